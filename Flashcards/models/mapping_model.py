"""
Semantic mapping data models.

Plain records shared by the field mapper and the deck analyzer. All of them are
built per call and never mutated afterwards.
"""

from typing import Optional, List, Dict, Any, Tuple, Protocol
from dataclasses import dataclass, field


# label -> actual field name
SemanticMapping = Dict[str, str]

# field name -> truncated, non-blank sample values
FieldSampleSet = Dict[str, List[str]]


@dataclass(frozen=True)
class SemanticPattern:
    """A semantic label and the keywords that identify it in field names."""

    label: str
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class RecordSchema:
    """A note type name and its ordered field names."""

    type_name: str
    fields: Tuple[str, ...] = ()

    @classmethod
    def from_fields(cls, type_name: str, fields) -> 'RecordSchema':
        return cls(type_name=type_name, fields=tuple(fields))

    @classmethod
    def from_provider(cls, provider: 'SchemaProvider', type_name: str) -> 'RecordSchema':
        """Look up a note type's field names through any schema provider."""
        return cls.from_fields(type_name, provider.get_field_names(type_name))


@dataclass(frozen=True)
class FieldMatch:
    """Best unused field for one pattern, or no field with confidence 0."""

    field: Optional[str] = None
    confidence: float = 0.0


@dataclass(frozen=True)
class SuggestionEntry:
    """A ranked suggestion with an advisory confidence in [0, 1]."""

    label: str
    field: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "semantic": self.label,
            "field": self.field,
            "confidence": self.confidence
        }


@dataclass(frozen=True)
class CardRecord:
    """A stored card reduced to its note type and field values."""

    type_name: str
    fields: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DeckAnalysisResult:
    """
    Aggregated result of sampling an existing deck.

    field_analysis and suggested_mapping keep insertion order, which is the
    order the report renders them in.
    """

    collection_name: str
    sample_size: int
    dominant_type_name: str
    field_analysis: Dict[str, str] = field(default_factory=dict)
    suggested_mapping: SemanticMapping = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "deckName": self.collection_name,
            "sampleSize": self.sample_size,
            "primaryNoteType": self.dominant_type_name,
            "fieldAnalysis": dict(self.field_analysis),
            "suggestedMappings": dict(self.suggested_mapping)
        }


class CardStore(Protocol):
    """Card lookup capability consumed by the deck analyzer."""

    def find_ids(self, query: str) -> List[int]:
        ...

    def fetch_records(self, ids: List[int]) -> List[CardRecord]:
        ...


class SchemaProvider(Protocol):
    """Resolves a note type name to its ordered field names."""

    def get_field_names(self, type_name: str) -> List[str]:
        ...
