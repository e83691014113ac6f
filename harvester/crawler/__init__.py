"""
Crawler module for the harvesting pipeline.

This module drives the browser through one harvest run.

Module Structure:
- session: Browser session acquisition and release (requires playwright)
- gate: Bot-challenge clearance wait (requires playwright)
- navigation: Top-level navigation and readiness waits (requires playwright)
- pagination: Scroll-to-fixed-point lazy loading (requires playwright)
- enhancer: Detail-page enhancement with per-item isolation (requires playwright)
- pipeline: Run orchestration (entry point, requires playwright)
"""

_LAZY = {
    "Session": "harvester.crawler.session",
    "acquire_session": "harvester.crawler.session",
    "release_session": "harvester.crawler.session",
    "open_session": "harvester.crawler.session",
    "GateOutcome": "harvester.crawler.gate",
    "GateResult": "harvester.crawler.gate",
    "await_challenge_clearance": "harvester.crawler.gate",
    "navigate": "harvester.crawler.navigation",
    "wait_for_ready": "harvester.crawler.navigation",
    "ScrollReport": "harvester.crawler.pagination",
    "scroll_height": "harvester.crawler.pagination",
    "expand_to_full_content": "harvester.crawler.pagination",
    "enhance_record": "harvester.crawler.enhancer",
    "enhance_records": "harvester.crawler.enhancer",
    "merge_details": "harvester.crawler.enhancer",
    "with_placeholders": "harvester.crawler.enhancer",
    "RunContext": "harvester.crawler.pipeline",
    "HarvestReport": "harvester.crawler.pipeline",
    "extract_list": "harvester.crawler.pipeline",
    "run_harvest": "harvester.crawler.pipeline",
}


# Lazy loading for playwright-dependent functions
def __getattr__(name):
    """Lazy loading for playwright-dependent functions."""
    if name in _LAZY:
        import importlib
        module = importlib.import_module(_LAZY[name])
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_LAZY)
