"""
Shared utility functions for Harvester.

This module contains reusable utilities used across components:
- URL validation, resolution and sanitizing
- Timestamps
"""

from harvester.utils.url_utils import validate_target_url, domain_of, absolute_url, sanitize_url
from harvester.utils.date_utils import get_current_timestamp, file_timestamp

__all__ = [
    # URL utilities
    "validate_target_url",
    "domain_of",
    "absolute_url",
    "sanitize_url",
    # Date utilities
    "get_current_timestamp",
    "file_timestamp",
]
