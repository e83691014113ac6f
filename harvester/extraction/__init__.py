"""
Extraction functions.

Pure functions that turn rendered markup or an API payload into RawRecords
(no playwright dependency), plus the JavaScript snippets the crawler
evaluates in the page.
"""

from harvester.extraction.dom import (
    extract_broker_cards,
    extract_game_listing,
    extract_link_inventory,
    find_emails,
)
from harvester.extraction.api import parse_broker_directory
from harvester.extraction.detail import extract_game_details
from harvester.extraction.scripts import (
    SCROLL_HEIGHT_JS,
    SCROLL_TO_JS,
    FETCH_JSON_JS,
    HIDE_WEBDRIVER_JS,
)

__all__ = [
    "extract_broker_cards",
    "extract_game_listing",
    "extract_link_inventory",
    "find_emails",
    "parse_broker_directory",
    "extract_game_details",
    "SCROLL_HEIGHT_JS",
    "SCROLL_TO_JS",
    "FETCH_JSON_JS",
    "HIDE_WEBDRIVER_JS",
]
