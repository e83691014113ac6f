"""
Bot-challenge gate.

After a top-level navigation the page may show a challenge (reCAPTCHA frame,
Turnstile widget). The gate tolerates it but does not solve it: it gives a
human (or the stealth layer) a bounded window to clear it, then proceeds.

Both "marker never appeared" and "marker still present when the clearance
window closed" return TIMED_OUT and the run continues. The second case can
hide an active challenge; it is logged as a warning so it stays visible.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from harvester.core.error_logger import ErrorLogger
from harvester.core.error_models import ErrorComponent, ErrorSeverity, ErrorStage, ErrorType
from harvester.core.logging import get_logger
from harvester.utils.url_utils import domain_of

logger = get_logger(__name__)


class GateOutcome(str, Enum):
    """Two-outcome result of a gate wait."""
    CLEARED = "cleared"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class GateResult:
    outcome: GateOutcome
    marker_seen: bool
    waited_ms: int

    @property
    def cleared(self) -> bool:
        return self.outcome == GateOutcome.CLEARED


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


async def await_challenge_clearance(
    page: Page,
    marker: str,
    timeout_ms: int,
    clearance_timeout_ms: int,
    errors: Optional[ErrorLogger] = None,
) -> GateResult:
    """
    Wait for a challenge marker to appear and, if it does, to go away.

    Args:
        page: Page that has just navigated
        marker: CSS selector of the challenge artifact
        timeout_ms: How long to watch for the marker
        clearance_timeout_ms: How long a present marker may take to clear
        errors: Optional error journal for the still-present case

    Returns:
        GateResult; never raises on timeouts

    Example:
        >>> result = await await_challenge_clearance(page, RECAPTCHA_MARKER, 30000, 180000)
        >>> result.outcome
        <GateOutcome.TIMED_OUT: 'timed_out'>
    """
    start = time.monotonic()

    try:
        await page.wait_for_selector(marker, state="attached", timeout=timeout_ms)
    except PlaywrightTimeoutError:
        logger.info(f"No challenge detected within {timeout_ms}ms, continuing")
        return GateResult(GateOutcome.TIMED_OUT, marker_seen=False, waited_ms=_elapsed_ms(start))

    logger.info(f"Challenge detected ({marker}); waiting up to {clearance_timeout_ms}ms for it to clear")

    try:
        await page.wait_for_selector(marker, state="detached", timeout=clearance_timeout_ms)
    except PlaywrightTimeoutError:
        message = f"Challenge still present after {clearance_timeout_ms}ms, proceeding anyway"
        if errors is not None:
            errors.log_error(
                component=ErrorComponent.GATE,
                stage=ErrorStage.AWAIT_CHALLENGE,
                error_type=ErrorType.CHALLENGE_PENDING,
                domain=domain_of(page.url),
                url=page.url,
                message=message,
                severity=ErrorSeverity.WARNING,
                metadata={"marker": marker, "clearance_timeout_ms": clearance_timeout_ms},
            )
        else:
            logger.warning(message)
        return GateResult(GateOutcome.TIMED_OUT, marker_seen=True, waited_ms=_elapsed_ms(start))

    logger.info("Challenge cleared")
    return GateResult(GateOutcome.CLEARED, marker_seen=True, waited_ms=_elapsed_ms(start))
