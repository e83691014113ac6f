"""
Exception hierarchy for the harvesting pipeline.

Fatal errors (configuration, session acquisition, top-level navigation) abort
a run. DetailPageError never leaves the detail enhancer.
"""


class HarvestError(Exception):
    """Base class for all harvester errors."""


class ConfigurationError(HarvestError, ValueError):
    """Malformed input URL or invalid configuration. Not retryable."""


class SessionAcquisitionError(HarvestError):
    """The browser session could not be started."""


class NavigationError(HarvestError):
    """A top-level navigation failed."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Navigation to {url} failed: {message}")
        self.url = url


class DetailPageError(HarvestError):
    """A detail page loaded but is unusable (bad status, missing content)."""


class RunDeadlineExceeded(HarvestError):
    """The caller-supplied run deadline elapsed before the run finished."""

    def __init__(self, deadline_s: float):
        super().__init__(f"Harvest run exceeded its deadline of {deadline_s:g}s")
        self.deadline_s = deadline_s
