"""
Data models for the Flashcards system.
"""

from .mapping_model import (
    SemanticMapping,
    FieldSampleSet,
    SemanticPattern,
    RecordSchema,
    FieldMatch,
    SuggestionEntry,
    CardRecord,
    DeckAnalysisResult,
    CardStore,
    SchemaProvider
)


# Define public API
__all__ = [
    "SemanticMapping",
    "FieldSampleSet",
    "SemanticPattern",
    "RecordSchema",
    "FieldMatch",
    "SuggestionEntry",
    "CardRecord",
    "DeckAnalysisResult",
    "CardStore",
    "SchemaProvider"
]
