"""
Browser session control.

A Session owns one Playwright driver, one Chromium browser, one context and
exactly one page. It is acquired at the start of a run and released exactly
once at the end, whatever happened in between.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional
from playwright.async_api import async_playwright, Browser, BrowserContext, Page
from playwright_stealth import Stealth

from harvester.core.config import HarvestConfig
from harvester.core.exceptions import SessionAcquisitionError
from harvester.core.logging import get_logger
from harvester.extraction.scripts import HIDE_WEBDRIVER_JS

logger = get_logger(__name__)

EVASION_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-dev-shm-usage",
]

VIEWPORT = {"width": 1366, "height": 900}


@dataclass
class Session:
    """Live browser handle for one harvest run."""
    playwright: Any
    browser: Optional[Browser]
    context: Optional[BrowserContext]
    page: Page
    released: bool = False


async def _close_quietly(obj: Any, what: str) -> None:
    if obj is None:
        return
    try:
        if what == "playwright":
            await obj.stop()
        else:
            await obj.close()
    except Exception as e:
        logger.warning(f"Failed to close {what}: {e}")


async def acquire_session(config: HarvestConfig) -> Session:
    """
    Launch Chromium and open the run's single page.

    With evasion enabled the browser drops its automation flag, presents a
    desktop user agent and viewport, hides navigator.webdriver and has the
    stealth patches applied to its context.

    Args:
        config: Run configuration (headless, evasion_enabled, user_agent,
            nav_timeout_ms)

    Returns:
        Session ready for navigation

    Raises:
        SessionAcquisitionError: If any launch step fails; resources started
            before the failure are closed
    """
    pw = browser = context = None
    try:
        pw = await async_playwright().start()

        launch_args = EVASION_ARGS if config.evasion_enabled else []
        browser = await pw.chromium.launch(headless=config.headless, args=launch_args)

        context_kwargs = {"viewport": VIEWPORT, "locale": "en-US"}
        if config.evasion_enabled:
            context_kwargs["user_agent"] = config.user_agent
        context = await browser.new_context(**context_kwargs)

        if config.evasion_enabled:
            await context.add_init_script(HIDE_WEBDRIVER_JS)
            await Stealth().apply_stealth_async(context)

        page = await context.new_page()
        page.set_default_navigation_timeout(config.nav_timeout_ms)

    except Exception as e:
        await _close_quietly(context, "context")
        await _close_quietly(browser, "browser")
        await _close_quietly(pw, "playwright")
        raise SessionAcquisitionError(f"Could not start browser session: {e}") from e

    logger.info(
        f"Browser session started (headless={config.headless}, evasion={config.evasion_enabled})"
    )
    return Session(playwright=pw, browser=browser, context=context, page=page)


async def release_session(session: Session) -> None:
    """
    Close the page's context, the browser and the driver.

    Calling it again on a released session does nothing. Close failures are
    logged, never raised.
    """
    if session.released:
        return
    session.released = True
    await _close_quietly(session.context, "context")
    await _close_quietly(session.browser, "browser")
    await _close_quietly(session.playwright, "playwright")
    logger.info("Browser session closed")


@asynccontextmanager
async def open_session(config: HarvestConfig) -> AsyncIterator[Session]:
    """
    Scoped session: acquired on entry, released exactly once on exit.

    Example:
        >>> async with open_session(config) as session:
        ...     await session.page.goto(url)
    """
    session = await acquire_session(config)
    try:
        yield session
    finally:
        await release_session(session)
