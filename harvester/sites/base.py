"""
Site profile definitions.

A SiteProfile bundles everything the pipeline needs to know about one target
site: which hosts it serves, how to read the list, which detail pages to
visit, and the canonical record schema.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Tuple
from urllib.parse import urlparse

from harvester.extraction.detail import DetailFields
from harvester.records.models import RawRecord, RecordSchema

RECAPTCHA_MARKER = '.g-recaptcha, iframe[src*="recaptcha"]'

HtmlExtractor = Callable[[str, str], List[RawRecord]]
PayloadParser = Callable[[Any], List[RawRecord]]
DetailExtractor = Callable[[str, str], DetailFields]
PrepareHook = Callable[[Any, Any], Awaitable[bool]]


@dataclass(frozen=True)
class DetailSpec:
    """
    Secondary-page enhancement for one site.

    Args:
        link_field: Record key holding the detail page URL
        ready_selector: Container that must appear on a usable detail page
        extract: Detail extractor over the rendered detail page
        placeholder_fields: Fields set to "Unknown" when enhancement fails
        list_fields: Subset of placeholder_fields that hold string sequences
    """
    link_field: str
    ready_selector: str
    extract: DetailExtractor
    placeholder_fields: Tuple[str, ...]
    list_fields: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SiteProfile:
    """
    Everything the pipeline needs to harvest one target site.

    Exactly one of extract_html / parse_payload is set. API-backed profiles
    fetch the target URL itself from inside the page.
    """
    name: str
    domains: Tuple[str, ...]
    schema: RecordSchema
    extract_html: Optional[HtmlExtractor] = None
    parse_payload: Optional[PayloadParser] = None
    detail: Optional[DetailSpec] = None
    path_hint: Optional[str] = None
    challenge_marker: str = RECAPTCHA_MARKER
    ready_selector: Optional[str] = None
    prepare: Optional[PrepareHook] = None
    export_csv: bool = False

    def __post_init__(self):
        if (self.extract_html is None) == (self.parse_payload is None):
            raise ValueError(f"Profile '{self.name}' needs exactly one of extract_html or parse_payload")

    @property
    def api_backed(self) -> bool:
        return self.parse_payload is not None

    def matches(self, url: str) -> bool:
        """
        Whether this profile serves the URL.

        An empty domain list matches every host (fallback profiles).
        """
        parsed = urlparse(url)
        host = parsed.netloc.lower()
        if self.domains and not any(host == d or host.endswith("." + d) for d in self.domains):
            return False
        if self.path_hint and self.path_hint not in parsed.path:
            return False
        return True
