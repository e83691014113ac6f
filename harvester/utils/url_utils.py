"""
URL utility functions for Harvester.

This module provides target URL validation, link resolution and the
filename-safe form of a URL.
"""

import re
from typing import Optional
from urllib.parse import urljoin, urlparse

from harvester.core.exceptions import ConfigurationError


def validate_target_url(url: Optional[str]) -> str:
    """
    Check that a target URL is well formed.

    Args:
        url: URL supplied by the caller

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        ConfigurationError: If the URL is missing, not http(s) or has no host

    Examples:
        >>> validate_target_url(" https://www.igdb.com/games/coming_soon ")
        'https://www.igdb.com/games/coming_soon'
    """
    if not url or not url.strip():
        raise ConfigurationError("A target URL is required")

    url = url.strip()
    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        raise ConfigurationError(f"Invalid URL format (expected http or https): {url}")
    if not parsed.netloc or not parsed.hostname:
        raise ConfigurationError(f"Invalid URL format (missing host): {url}")

    return url


def domain_of(url: str) -> str:
    """
    Extract domain from URL.

    Example:
        >>> domain_of("https://www.IBBA.org/find-a-business-broker/")
        'www.ibba.org'
    """
    return urlparse(url).netloc.lower()


def absolute_url(base_url: str, href: Optional[str]) -> Optional[str]:
    """
    Resolve a link against the page it was found on.

    Protocol-relative links ("//cdn.example.com/a.jpg") get the page scheme.
    Empty links and javascript: pseudo-links resolve to None.

    Examples:
        >>> absolute_url("https://www.igdb.com/games/coming_soon", "/games/hades-ii")
        'https://www.igdb.com/games/hades-ii'
        >>> absolute_url("https://www.igdb.com/", "//images.igdb.com/cover.jpg")
        'https://images.igdb.com/cover.jpg'
    """
    if not href:
        return None
    href = href.strip()
    if not href or href.lower().startswith("javascript:"):
        return None
    return urljoin(base_url, href)


def sanitize_url(url: str, max_len: int = 50) -> str:
    """
    Turn a URL into a filename fragment.

    Drops the http(s) scheme, replaces every character outside [A-Za-z0-9_-]
    with an underscore and truncates.

    Raises:
        TypeError: If url is not a string

    Example:
        >>> sanitize_url("https://www.ibba.org/wp-json/brokers/all")
        'www_ibba_org_wp-json_brokers_all'
    """
    if not isinstance(url, str):
        raise TypeError(f"sanitize_url expected a string, but got {type(url).__name__}")

    stripped = re.sub(r"^https?://", "", url)
    return re.sub(r"[^\w\-]", "_", stripped, flags=re.ASCII)[:max_len]
