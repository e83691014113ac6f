"""
Page navigation helpers for the crawler.

Top-level navigations are fatal when they fail; readiness waits are not.
"""

from typing import Optional
from playwright.async_api import Page, Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from harvester.core.exceptions import NavigationError
from harvester.core.logging import get_logger

logger = get_logger(__name__)


async def navigate(page: Page, url: str, timeout_ms: int, wait_until: str = "domcontentloaded") -> Optional[int]:
    """
    Navigate the session's page to a URL.

    Args:
        page: Playwright page instance
        url: URL to open
        timeout_ms: Navigation timeout
        wait_until: Load state that completes the navigation

    Returns:
        HTTP status of the main response, or None when there was none

    Raises:
        NavigationError: On timeout or network failure
    """
    logger.info(f"[nav] {url}")
    try:
        response = await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise NavigationError(url, f"timed out after {timeout_ms}ms") from e
    except PlaywrightError as e:
        raise NavigationError(url, str(e)) from e

    status = response.status if response is not None else None
    if status is not None and status >= 400:
        logger.warning(f"[nav] {url} answered HTTP {status}; continuing (challenge pages often do)")
    return status


async def wait_for_ready(page: Page, selector: Optional[str], timeout_ms: int) -> bool:
    """
    Wait for the listing container to appear.

    Args:
        page: Playwright page instance
        selector: Container selector, or None to skip the wait
        timeout_ms: Maximum wait

    Returns:
        True if the container appeared (or no selector was given), False on
        timeout; the caller proceeds either way
    """
    if not selector:
        return True
    try:
        await page.wait_for_selector(selector, state="attached", timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError:
        logger.warning(f"Listing container '{selector}' not visible after {timeout_ms}ms; extraction may be sparse")
        return False
