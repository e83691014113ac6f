"""
Scroll-driven lazy loading.

Repeatedly scrolls to the bottom of the document until its extent stops
changing. There is no round limit: a page that never settles
keeps the loop going until the run deadline cancels it.
"""

from dataclasses import dataclass
from typing import Optional
from playwright.async_api import Page

from harvester.core.logging import get_logger
from harvester.extraction.scripts import SCROLL_HEIGHT_JS, SCROLL_TO_JS

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScrollReport:
    rounds: int
    reads: int
    final_extent: int


async def scroll_height(page: Page) -> int:
    """
    Get the total scrollable height of the page.

    Example:
        >>> await scroll_height(page)
        3500
    """
    return int(await page.evaluate(SCROLL_HEIGHT_JS) or 0)


async def expand_to_full_content(page: Page, interval_ms: int) -> ScrollReport:
    """
    Scroll until two consecutive extent readings are equal.

    Each round reads the extent, stops if it equals the previous reading,
    otherwise scrolls to it and pauses interval_ms for lazy content to
    attach. A page whose extent grows for K rounds is read K+1 times.

    Args:
        page: Page showing the listing
        interval_ms: Pause after each scroll

    Returns:
        ScrollReport with the number of scroll rounds, extent reads and the
        final extent
    """
    previous: Optional[int] = None
    reads = 0
    rounds = 0

    while True:
        height = await scroll_height(page)
        reads += 1
        if height == previous:
            break
        previous = height

        await page.evaluate(SCROLL_TO_JS, height)
        await page.wait_for_timeout(interval_ms)
        rounds += 1
        logger.debug(f"Scroll round {rounds}: extent {height}px")

    logger.info(f"Content settled at {previous}px after {rounds} scroll rounds")
    return ScrollReport(rounds=rounds, reads=reads, final_extent=previous or 0)
