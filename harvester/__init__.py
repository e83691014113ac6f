"""
Harvester: browser-driven listing harvester.

Opens a stealth browser session, waits out bot challenges, scrolls lazy
listings to completion, extracts records, enhances them from detail pages
and writes one timestamped JSON document per run.
"""

__version__ = "0.1.0"
