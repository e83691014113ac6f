"""
Record shapes flowing through the harvesting pipeline.

RawRecord and EnhancedRecord are plain dicts straight from the page.
CanonicalRecord is a dict whose keys are exactly the fields of a
RecordSchema. CrawlResult is the immutable value handed to the result sink.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from harvester.utils.date_utils import get_current_timestamp


RawRecord = Dict[str, Optional[str]]
EnhancedRecord = Dict[str, Union[None, str, List[str]]]
CanonicalRecord = Dict[str, Union[str, List[str]]]

SENTINEL = "N/A"
DETAIL_PLACEHOLDER = "Unknown"


@dataclass(frozen=True)
class FieldSpec:
    """
    One canonical output field.

    Args:
        name: Canonical field name
        sources: Source keys tried in order after the canonical name itself
        join: Source keys whose values are concatenated into a display value
        multi: Value is an ordered sequence of strings
    """
    name: str
    sources: Tuple[str, ...] = ()
    join: Tuple[str, ...] = ()
    multi: bool = False


@dataclass(frozen=True)
class RecordSchema:
    """Fixed set of canonical fields for one target site."""
    fields: Tuple[FieldSpec, ...]
    sentinel: str = SENTINEL

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def has_field(self, name: str) -> bool:
        return name in self.field_names


class OutcomeStatus(str, Enum):
    """How a list item left the detail enhancer."""
    ENHANCED = "enhanced"
    FAILED_WITH_PLACEHOLDER = "failed_with_placeholder"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class DetailOutcome:
    """Result variant for one item of the detail fold."""
    status: OutcomeStatus
    record: EnhancedRecord
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status == OutcomeStatus.FAILED_WITH_PLACEHOLDER


def _freeze_record(record: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType({k: tuple(v) if isinstance(v, list) else v for k, v in record.items()})


def _thaw_record(record: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: list(v) if isinstance(v, tuple) else v for k, v in record.items()}


class CrawlResult(BaseModel):
    """
    Output of one harvest run.

    Serialized as {"timestamp", "url", "totalItems", "data"}; "partial" is
    only written for results persisted after a failed run. Records are held
    as read-only mappings with list fields as tuples; to_document() gives
    back plain dicts and lists.
    """
    timestamp: str = Field(default_factory=get_current_timestamp, description="ISO-8601 run timestamp")
    url: str = Field(..., min_length=1, description="Source URL, verbatim")
    data: Tuple[Mapping[str, Any], ...] = Field(default_factory=tuple, description="Canonical records in output order")
    partial: bool = Field(default=False, description="Run failed before completion")

    model_config = ConfigDict(frozen=True)

    @field_validator("data")
    @classmethod
    def freeze_records(cls, v: Tuple[Mapping[str, Any], ...]) -> Tuple[Mapping[str, Any], ...]:
        """Detach the records from the caller's list and make them read-only."""
        return tuple(_freeze_record(r) for r in v)

    @computed_field
    @property
    def total_items(self) -> int:
        return len(self.data)

    def to_document(self) -> Dict[str, Any]:
        """
        Build the structured document written by the result sink.

        Example:
            >>> CrawlResult(url="https://example.com", timestamp="t").to_document()
            {'timestamp': 't', 'url': 'https://example.com', 'totalItems': 0, 'data': []}
        """
        doc: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "url": self.url,
            "totalItems": self.total_items,
            "data": [_thaw_record(r) for r in self.data],
        }
        if self.partial:
            doc["partial"] = True
        return doc
