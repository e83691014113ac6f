"""
Detail-page enhancement.

For each list item with a detail link, the enhancer opens that page in the
session's single tab, extracts the detail fields and merges them into the
item. Items are processed one at a time, in list order. A failing detail
page never fails the run: the item is kept with "Unknown" placeholders.
"""

from typing import AsyncIterator, Iterable, List, Optional
from playwright.async_api import Page, Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from harvester.core.error_logger import ErrorLogger
from harvester.core.error_models import ErrorComponent, ErrorSeverity, ErrorStage
from harvester.core.exceptions import DetailPageError
from harvester.core.logging import get_logger
from harvester.extraction.detail import DetailFields
from harvester.records.models import (
    DETAIL_PLACEHOLDER,
    DetailOutcome,
    EnhancedRecord,
    OutcomeStatus,
    RawRecord,
)
from harvester.sites.base import DetailSpec
from harvester.utils.url_utils import domain_of

logger = get_logger(__name__)


def merge_details(record: RawRecord, details: DetailFields, detail: DetailSpec) -> EnhancedRecord:
    """
    Merge detail fields into a copy of the base record.

    Non-empty detail values overwrite; empty group fields become
    ["Unknown"]; empty scalars leave an existing base value in place.

    Example:
        >>> merge_details({"name": "Hades II", "releaseDate": "2026"},
        ...               {"genre": [], "releaseDate": "Oct 19, 2026"}, GAME_DETAIL)
        {'name': 'Hades II', 'releaseDate': 'Oct 19, 2026', 'genre': ['Unknown']}
    """
    merged: EnhancedRecord = dict(record)
    for key, value in details.items():
        if key in detail.list_fields or isinstance(value, list):
            merged[key] = list(value) if value else [DETAIL_PLACEHOLDER]
        elif value:
            merged[key] = value
        else:
            merged.setdefault(key, None)
    return merged


def with_placeholders(record: RawRecord, detail: DetailSpec) -> EnhancedRecord:
    """Copy of the base record with every placeholder field set to Unknown."""
    merged: EnhancedRecord = dict(record)
    for key in detail.placeholder_fields:
        merged[key] = [DETAIL_PLACEHOLDER] if key in detail.list_fields else DETAIL_PLACEHOLDER
    return merged


async def enhance_record(
    page: Page,
    record: RawRecord,
    detail: DetailSpec,
    timeout_ms: int,
    ready_timeout_ms: int,
    errors: Optional[ErrorLogger] = None,
) -> DetailOutcome:
    """
    Enhance one list item from its detail page.

    Args:
        page: The session's page (navigated away from the listing)
        record: Base record from the list
        detail: Detail-page settings of the site
        timeout_ms: Navigation timeout for the detail page
        ready_timeout_ms: Wait for the detail container
        errors: Optional error journal for failures

    Returns:
        ENHANCED outcome, or FAILED_WITH_PLACEHOLDER on any navigation
        timeout, navigation error, HTTP error status, missing container or
        missing link
    """
    link = record.get(detail.link_field)
    if not link:
        logger.debug(f"No detail link in '{detail.link_field}'; using placeholders")
        return DetailOutcome(
            OutcomeStatus.FAILED_WITH_PLACEHOLDER,
            with_placeholders(record, detail),
            error="missing detail link",
        )

    try:
        response = await page.goto(link, wait_until="networkidle", timeout=timeout_ms)
        if response is not None and response.status >= 400:
            raise DetailPageError(f"HTTP {response.status}")
        await page.wait_for_selector(detail.ready_selector, state="attached", timeout=ready_timeout_ms)
        html = await page.content()
        details = detail.extract(html, page.url)
    except (PlaywrightTimeoutError, PlaywrightError, DetailPageError) as e:
        if errors is not None:
            errors.log_exception(
                e,
                component=ErrorComponent.ENHANCER,
                stage=ErrorStage.ENHANCE_ITEM,
                domain=domain_of(link),
                url=link,
                severity=ErrorSeverity.WARNING,
            )
        else:
            logger.warning(f"Could not enhance {link}: {e}")
        return DetailOutcome(
            OutcomeStatus.FAILED_WITH_PLACEHOLDER,
            with_placeholders(record, detail),
            error=str(e) or type(e).__name__,
        )

    return DetailOutcome(OutcomeStatus.ENHANCED, merge_details(record, details, detail))


async def enhance_records(
    page: Page,
    records: Iterable[RawRecord],
    detail: DetailSpec,
    timeout_ms: int,
    ready_timeout_ms: int,
    delay_ms: int,
    cap: Optional[int] = None,
    errors: Optional[ErrorLogger] = None,
) -> AsyncIterator[DetailOutcome]:
    """
    Fold over the list, yielding one outcome per item in order.

    The first ``cap`` items (all items when cap is None) are enhanced with a
    pause of delay_ms between consecutive detail pages; the rest are passed
    through unchanged as SKIPPED.
    """
    items: List[RawRecord] = list(records)
    limit = len(items) if cap is None else min(cap, len(items))

    for index, record in enumerate(items):
        if index >= limit:
            yield DetailOutcome(OutcomeStatus.SKIPPED, dict(record))
            continue

        if index > 0:
            await page.wait_for_timeout(delay_ms)

        logger.info(f"Enhancing item {index + 1}/{limit}: {record.get(detail.link_field) or '(no link)'}")
        yield await enhance_record(page, record, detail, timeout_ms, ready_timeout_ms, errors)
