"""
Harvest pipeline orchestration.

One run: open a session, navigate to the target, pass the challenge gate,
optionally prepare the page, expand lazy content, extract the list, enhance
items from their detail pages, normalize, persist, release the session.
Stages run strictly one after another on the run's single page.
"""

import asyncio
import uuid
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional
from playwright.async_api import Page

from harvester.core.config import HarvestConfig
from harvester.core.error_logger import ErrorLogger
from harvester.core.error_models import ErrorComponent, ErrorSeverity, ErrorStage
from harvester.core.exceptions import RunDeadlineExceeded
from harvester.core.logging import get_logger, run_logger
from harvester.crawler.enhancer import enhance_records
from harvester.crawler.gate import GateResult, await_challenge_clearance
from harvester.crawler.navigation import navigate, wait_for_ready
from harvester.crawler.pagination import ScrollReport, expand_to_full_content
from harvester.crawler.session import open_session
from harvester.extraction.scripts import FETCH_JSON_JS
from harvester.records.models import CrawlResult, DetailOutcome, OutcomeStatus, RawRecord
from harvester.records.normalizer import normalize
from harvester.sites import SiteProfile, pick_profile
from harvester.storage.file_manager import build_file_path, persist_result, write_csv
from harvester.utils.url_utils import domain_of, validate_target_url

logger = get_logger(__name__)

ResultSink = Callable[[CrawlResult, Path], Path]


@dataclass
class RunContext:
    """State threaded through the stages of one run."""
    run_id: str
    url: str
    config: HarvestConfig
    profile: SiteProfile
    errors: ErrorLogger
    page: Optional[Page] = None
    gates: List[GateResult] = field(default_factory=list)
    scroll: Optional[ScrollReport] = None

    @property
    def domain(self) -> str:
        return domain_of(self.url)

    @property
    def log(self):
        return run_logger(__name__, self.run_id)


@dataclass(frozen=True)
class HarvestReport:
    """What a finished run hands back to its caller."""
    run_id: str
    result: CrawlResult
    location: Path
    profile: str
    gates: List[GateResult]
    scroll: Optional[ScrollReport]
    outcomes: Dict[str, int]


async def extract_list(page: Page, profile: SiteProfile) -> List[RawRecord]:
    """
    Read the listing from the current page.

    API-backed profiles fetch the page's own URL as JSON from inside the page
    (same origin, same cookies); the others parse the rendered DOM.
    """
    if profile.api_backed:
        payload = await page.evaluate(FETCH_JSON_JS, page.url)
        records = profile.parse_payload(payload)
    else:
        html = await page.content()
        records = profile.extract_html(html, page.url)
    logger.info(f"Extracted {len(records)} list items ({profile.name})")
    return records


async def _gate(ctx: RunContext) -> GateResult:
    result = await await_challenge_clearance(
        ctx.page,
        ctx.profile.challenge_marker,
        ctx.config.challenge_timeout_ms,
        ctx.config.clearance_timeout_ms,
        errors=ctx.errors,
    )
    ctx.gates.append(result)
    return result


def _build_result(ctx: RunContext, records, partial: bool = False) -> CrawlResult:
    canonical = normalize(
        records,
        ctx.profile.schema,
        sort_key=ctx.config.sort_key,
        dedupe=ctx.config.dedupe,
    )
    return CrawlResult(url=ctx.url, data=canonical, partial=partial)


def _persist(ctx: RunContext, result: CrawlResult, sink: ResultSink) -> Path:
    location = sink(result, ctx.config.out_dir)
    if ctx.config.export_csv or ctx.profile.export_csv:
        write_csv(result, build_file_path(result.url, result.timestamp, ctx.config.out_dir, suffix=".csv"))
    return location


def _persist_partial(ctx: RunContext, raw: List[RawRecord], outcomes: List[DetailOutcome], sink: ResultSink) -> None:
    """Persist what the run had when it failed; items not yet reached stay raw."""
    records = [o.record for o in outcomes] + [dict(r) for r in raw[len(outcomes):]]
    try:
        result = _build_result(ctx, records, partial=True)
        location = _persist(ctx, result, sink)
        ctx.log.warning(f"Run failed; partial result with {result.total_items} items saved to {location}")
    except Exception as e:
        ctx.log.error(f"Could not persist partial result: {e}")


async def _harvest(ctx: RunContext, sink: ResultSink) -> HarvestReport:
    config, profile = ctx.config, ctx.profile

    async with open_session(config) as session:
        ctx.page = page = session.page

        await navigate(page, ctx.url, config.nav_timeout_ms)
        await _gate(ctx)

        if profile.prepare is not None and await profile.prepare(page, config):
            await _gate(ctx)

        await wait_for_ready(page, profile.ready_selector, config.ready_timeout_ms)
        ctx.scroll = await expand_to_full_content(page, config.scroll_interval_ms)

        raw = await extract_list(page, profile)

        outcomes: List[DetailOutcome] = []
        try:
            if profile.detail is not None:
                async for outcome in enhance_records(
                    page,
                    raw,
                    profile.detail,
                    timeout_ms=config.detail_timeout_ms,
                    ready_timeout_ms=config.detail_ready_timeout_ms,
                    delay_ms=config.detail_delay_ms,
                    cap=config.enhancement_cap,
                    errors=ctx.errors,
                ):
                    outcomes.append(outcome)
            else:
                outcomes = [DetailOutcome(OutcomeStatus.SKIPPED, dict(r)) for r in raw]
        except (Exception, asyncio.CancelledError):
            if config.persist_partial:
                _persist_partial(ctx, raw, outcomes, sink)
            raise

        result = _build_result(ctx, [o.record for o in outcomes])
        location = _persist(ctx, result, sink)

    counts = Counter(o.status.value for o in outcomes)
    failed = counts.get(OutcomeStatus.FAILED_WITH_PLACEHOLDER.value, 0)
    ctx.log.info(f"Harvest complete: {result.total_items} records, {failed} with placeholder details")

    return HarvestReport(
        run_id=ctx.run_id,
        result=result,
        location=location,
        profile=profile.name,
        gates=list(ctx.gates),
        scroll=ctx.scroll,
        outcomes=dict(counts),
    )


async def run_harvest(
    url: str,
    config: HarvestConfig,
    profile: Optional[SiteProfile] = None,
    sink: ResultSink = persist_result,
) -> HarvestReport:
    """
    Run the full harvesting pipeline for one target URL.

    Args:
        url: Target URL (validated here)
        config: Run configuration
        profile: Site profile; picked from the URL (or config.site) if None
        sink: Result sink, called once with the finished CrawlResult

    Returns:
        HarvestReport with the result and where it was persisted

    Raises:
        ConfigurationError: Malformed URL, unknown profile or bad sort key
        SessionAcquisitionError: The browser could not be started
        NavigationError: The target page could not be loaded
        RunDeadlineExceeded: config.run_deadline_s elapsed

    Example:
        >>> report = await run_harvest("https://www.igdb.com/games/coming_soon", HarvestConfig())
        >>> report.result.total_items
        20
    """
    url = validate_target_url(url)
    profile = profile or pick_profile(url, config.site)

    if config.sort_key is not None:
        # Fail before a browser is started
        normalize([], profile.schema, sort_key=config.sort_key)

    run_id = uuid.uuid4().hex
    ctx = RunContext(
        run_id=run_id,
        url=url,
        config=config,
        profile=profile,
        errors=ErrorLogger(config.log_dir, run_id=run_id),
    )
    ctx.log.info(f"Harvest started: {url} (profile={profile.name})")

    try:
        if config.run_deadline_s is None:
            return await _harvest(ctx, sink)
        try:
            return await asyncio.wait_for(_harvest(ctx, sink), timeout=config.run_deadline_s)
        except asyncio.TimeoutError as e:
            raise RunDeadlineExceeded(config.run_deadline_s) from e
    except Exception as e:
        ctx.errors.log_exception(
            e,
            component=ErrorComponent.PIPELINE,
            stage=ErrorStage.RUN,
            domain=ctx.domain,
            url=url,
            severity=ErrorSeverity.ERROR,
        )
        raise
