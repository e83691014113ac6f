"""
IBBA business-broker directory profiles.

Two ways into the same data: the rendered search page (optionally driven
through its search form) and the JSON brokers API behind it.
"""

from playwright.async_api import Page

from harvester.core.config import HarvestConfig
from harvester.core.logging import get_logger
from harvester.extraction.api import parse_broker_directory
from harvester.extraction.dom import BROKER_CARD_SELECTOR, extract_broker_cards
from harvester.records.models import FieldSpec, RecordSchema
from harvester.sites.base import SiteProfile

logger = get_logger(__name__)

SEARCH_INPUT_SELECTOR = 'input[type="text"], input:not([type])'
SEARCH_SUBMIT_SELECTOR = 'button[type="submit"], input[type="submit"]'
SEARCH_FILTER_BOXES = 3
SEARCH_INPUT_TIMEOUT_MS = 20_000
SEARCH_RESULTS_TIMEOUT_MS = 30_000

BROKER_SCHEMA = RecordSchema(fields=(
    FieldSpec("firm", sources=("firmName", "company")),
    FieldSpec("contact_person", sources=("contactName",), join=("first_name", "last_name")),
    FieldSpec("email"),
))


async def fill_search_form(page: Page, config: HarvestConfig) -> bool:
    """
    Run a directory search for config.search_query.

    Types the query, ticks the first filter checkboxes and submits, waiting
    for the results navigation.

    Returns:
        True if a search was submitted (a top-level navigation happened),
        False when no query is configured
    """
    if not config.search_query:
        return False

    logger.info(f"Searching directory for '{config.search_query}'")
    field = await page.wait_for_selector(SEARCH_INPUT_SELECTOR, timeout=SEARCH_INPUT_TIMEOUT_MS)
    await field.type(config.search_query, delay=50)

    boxes = await page.query_selector_all('input[type="checkbox"]')
    for box in boxes[:SEARCH_FILTER_BOXES]:
        await box.click()
        await page.wait_for_timeout(300)

    submit = await page.query_selector(SEARCH_SUBMIT_SELECTOR)
    async with page.expect_navigation(wait_until="networkidle", timeout=SEARCH_RESULTS_TIMEOUT_MS):
        if submit is not None:
            await submit.click()
        else:
            await page.keyboard.press("Enter")
    return True


IBBA_DIRECTORY = SiteProfile(
    name="ibba-directory",
    domains=("ibba.org",),
    schema=BROKER_SCHEMA,
    extract_html=extract_broker_cards,
    ready_selector=BROKER_CARD_SELECTOR,
    prepare=fill_search_form,
    export_csv=True,
)

IBBA_API = SiteProfile(
    name="ibba-api",
    domains=("ibba.org",),
    path_hint="/wp-json/brokers",
    schema=BROKER_SCHEMA,
    parse_payload=parse_broker_directory,
    export_csv=True,
)
