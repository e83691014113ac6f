"""
Record normalization and deduplication.

Maps raw or enhanced records onto a RecordSchema. The result is total (no
empty canonical field), deterministic, and idempotent: normalizing canonical
records again returns them unchanged.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from harvester.core.exceptions import ConfigurationError
from harvester.core.logging import get_logger
from harvester.records.models import CanonicalRecord, FieldSpec, RecordSchema

logger = get_logger(__name__)


def _clean_text(value: Any) -> Optional[str]:
    """Collapse a scalar source value to stripped text, None when empty."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        parts = [p for p in (_clean_text(v) for v in value) if p]
        return ", ".join(parts) or None
    text = str(value).strip()
    return text or None


def _clean_list(value: Any) -> List[str]:
    """Collapse a source value to an ordered list of non-empty strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [t for t in (_clean_text(v) for v in value) if t]
    text = _clean_text(value)
    return [text] if text else []


def _lookup(record: Mapping[str, Any], spec: FieldSpec) -> Any:
    """First non-empty value among the canonical name and its sources."""
    for key in (spec.name,) + spec.sources:
        value = record.get(key)
        if spec.multi:
            if _clean_list(value):
                return value
        elif _clean_text(value) is not None:
            return value
    return None


def _joined(record: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    """
    Concatenate split name parts.

    Example:
        >>> _joined({"first_name": " Ada ", "last_name": "Lovelace"}, ("first_name", "last_name"))
        'Ada Lovelace'
    """
    parts = [p for p in (_clean_text(record.get(k)) for k in keys) if p]
    return " ".join(parts) or None


def normalize_record(record: Mapping[str, Any], schema: RecordSchema) -> CanonicalRecord:
    """
    Map one record onto the schema, substituting the sentinel for gaps.

    Args:
        record: Raw or enhanced record
        schema: Target canonical schema

    Returns:
        Dict with exactly the schema's fields, none empty
    """
    out: CanonicalRecord = {}
    for spec in schema.fields:
        value = _lookup(record, spec)
        if value is None and spec.join:
            value = _joined(record, spec.join)

        if spec.multi:
            out[spec.name] = _clean_list(value) or [schema.sentinel]
        else:
            out[spec.name] = _clean_text(value) or schema.sentinel
    return out


def _identity(record: CanonicalRecord, field_names: Tuple[str, ...]) -> Tuple:
    return tuple(
        tuple(record[name]) if isinstance(record[name], list) else record[name]
        for name in field_names
    )


def dedupe_records(records: Iterable[CanonicalRecord], field_names: Tuple[str, ...]) -> List[CanonicalRecord]:
    """Drop records identical to an earlier one, keeping first occurrences in order."""
    seen = set()
    out: List[CanonicalRecord] = []
    for record in records:
        key = _identity(record, field_names)
        if key not in seen:
            seen.add(key)
            out.append(record)
    return out


def sort_key_for(field_name: str):
    """Case-insensitive sort key over one canonical field."""
    def key(record: CanonicalRecord) -> str:
        value = record.get(field_name, "")
        if isinstance(value, list):
            value = ", ".join(value)
        return value.casefold()
    return key


def normalize(
    records: Iterable[Mapping[str, Any]],
    schema: RecordSchema,
    sort_key: Optional[str] = None,
    dedupe: bool = False,
) -> List[CanonicalRecord]:
    """
    Normalize, optionally deduplicate, and optionally sort records.

    Sorting is stable, so records with equal keys keep source order.

    Args:
        records: Raw or enhanced records in source order
        schema: Target canonical schema
        sort_key: Canonical field to sort by (case-insensitive), or None
        dedupe: Remove exact duplicate canonical records

    Returns:
        Canonical records

    Raises:
        ConfigurationError: If sort_key is not a field of the schema

    Example:
        >>> schema = RecordSchema(fields=(FieldSpec("firm", sources=("company",)),))
        >>> normalize([{"company": "Charlie"}, {"company": "alpha"}, {}], schema, sort_key="firm")
        [{'firm': 'alpha'}, {'firm': 'Charlie'}, {'firm': 'N/A'}]
    """
    if sort_key is not None and not schema.has_field(sort_key):
        raise ConfigurationError(
            f"Sort key '{sort_key}' is not a canonical field ({', '.join(schema.field_names)})"
        )

    out = [normalize_record(r, schema) for r in records]

    if dedupe:
        before = len(out)
        out = dedupe_records(out, schema.field_names)
        if before != len(out):
            logger.info(f"Removed {before - len(out)} duplicate records")

    if sort_key is not None:
        out = sorted(out, key=sort_key_for(sort_key))

    return out
