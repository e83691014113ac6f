"""
Date utility functions for Harvester.

This module provides run timestamps and their filename-safe form.
"""

from datetime import datetime, timezone
from typing import Optional


def get_current_timestamp(now: Optional[datetime] = None) -> str:
    """
    Get current timestamp in ISO format with UTC timezone.

    Args:
        now: Optional fixed datetime (naive values are taken as UTC)

    Returns:
        ISO formatted timestamp string

    Example:
        >>> ts = get_current_timestamp()
        >>> ts.endswith('+00:00')
        True
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.isoformat()


def file_timestamp(timestamp: str) -> str:
    """
    Make an ISO timestamp safe for use in a filename.

    Colons, dots and the '+' of the UTC offset are replaced by hyphens.

    Example:
        >>> file_timestamp("2026-10-19T08:30:00.123456+00:00")
        '2026-10-19T08-30-00-123456-00-00'
    """
    return timestamp.replace(":", "-").replace(".", "-").replace("+", "-")
