"""
Record models and normalization.

- models: RawRecord/EnhancedRecord/CanonicalRecord shapes, RecordSchema,
  DetailOutcome and the immutable CrawlResult
- normalizer: canonical mapping, sentinel filling, dedupe and sort
"""

from harvester.records.models import (
    RawRecord,
    EnhancedRecord,
    CanonicalRecord,
    FieldSpec,
    RecordSchema,
    OutcomeStatus,
    DetailOutcome,
    CrawlResult,
    SENTINEL,
    DETAIL_PLACEHOLDER,
)
from harvester.records.normalizer import normalize, normalize_record, dedupe_records

__all__ = [
    "RawRecord",
    "EnhancedRecord",
    "CanonicalRecord",
    "FieldSpec",
    "RecordSchema",
    "OutcomeStatus",
    "DetailOutcome",
    "CrawlResult",
    "SENTINEL",
    "DETAIL_PLACEHOLDER",
    "normalize",
    "normalize_record",
    "dedupe_records",
]
