"""
List extraction from structured API responses.

Used for sites whose listing is backed by a JSON endpoint that the page can
fetch same-origin (see FETCH_JSON_JS).
"""

from typing import Any, List, Optional

from harvester.core.logging import get_logger
from harvester.records.models import RawRecord

logger = get_logger(__name__)

BROKER_FIELDS = ("company", "first_name", "last_name", "email")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _items(payload: Any) -> List[Any]:
    """Item list of a payload that is either a list or a wrapping object."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("data", "brokers", "items", "results"):
            if isinstance(payload.get(key), list):
                return payload[key]
    raise ValueError(f"Unexpected payload shape: {type(payload).__name__}")


def parse_broker_directory(payload: Any) -> List[RawRecord]:
    """
    Brokers from the IBBA brokers API.

    Args:
        payload: Parsed JSON (a list of broker objects, or an object
            wrapping such a list)

    Returns:
        One record per broker with company, first_name, last_name, email;
        non-object entries are skipped

    Raises:
        ValueError: If the payload holds no broker list at all

    Example:
        >>> parse_broker_directory([{"company": "Acme", "first_name": "Ada", "email": ""}])
        [{'company': 'Acme', 'first_name': 'Ada', 'last_name': None, 'email': None}]
    """
    records: List[RawRecord] = []
    for index, item in enumerate(_items(payload)):
        if not isinstance(item, dict):
            logger.debug(f"Skipping broker entry {index}: not an object")
            continue
        records.append({name: _as_text(item.get(name)) for name in BROKER_FIELDS})
    return records
