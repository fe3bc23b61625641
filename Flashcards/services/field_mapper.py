"""
Field Mapper Service - Maps note type fields to portable semantic labels.

CORE RESPONSIBILITIES:
- Score field names against each semantic pattern's keywords
- Resolve a label -> field mapping (two passes plus positional fallback)
- Rank suggestions with confidence values for display
- Validate and apply mappings to semantic card content
"""
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..config.constants import (
    DEFAULT_SEMANTIC_PATTERNS,
    EXACT_MATCH_CONFIDENCE,
    CONTAINS_KEYWORD_CONFIDENCE,
    PARTIAL_KEYWORD_CONFIDENCE,
    FALLBACK_CONFIDENCE,
    FIRST_PASS_THRESHOLD,
    SECOND_PASS_THRESHOLD,
    SemanticLabel
)
from ..config.logging_config import get_logger
from ..models.mapping_model import (
    FieldMatch,
    RecordSchema,
    SemanticMapping,
    SemanticPattern,
    SuggestionEntry
)

logger = get_logger(__name__)

PRIMARY = SemanticLabel.PRIMARY.value
SECONDARY = SemanticLabel.SECONDARY.value


class FieldMatcher:
    """
    Keyword scorer for field names.

    Confidence tiers per (field, keyword):
    - 1.0  field equals keyword (case-insensitive); stops scanning keywords
    - 0.8  field contains keyword, keyword longer than 2 characters
    - 0.6  keyword contains field, field at least 4 characters and keyword at
           most 3 characters longer
    """

    def score_field(self, field_name: str, keywords: Iterable[str]) -> float:
        """Highest confidence of one field against a keyword set."""
        field_lower = field_name.lower()
        confidence = 0.0

        for keyword in keywords:
            keyword_lower = keyword.lower()

            if field_lower == keyword_lower:
                return EXACT_MATCH_CONFIDENCE
            elif keyword_lower in field_lower and len(keyword_lower) > 2:
                confidence = max(confidence, CONTAINS_KEYWORD_CONFIDENCE)
            elif (
                field_lower in keyword_lower
                and len(field_lower) >= 4
                and len(keyword_lower) - len(field_lower) <= 3
            ):
                confidence = max(confidence, PARTIAL_KEYWORD_CONFIDENCE)

        return confidence

    def find_best_field_match(
        self,
        fields: Sequence[str],
        keywords: Iterable[str],
        used_fields: Set[str]
    ) -> FieldMatch:
        """
        Best unused field for a keyword set.

        Fields are scanned in declared order and only a strictly higher score
        replaces the current best, so ties keep the earlier field and a score
        of 0 is never selected.
        """
        keywords = tuple(keywords)
        best_field: Optional[str] = None
        best_confidence = 0.0

        for field_name in fields:
            if field_name in used_fields:
                continue

            confidence = self.score_field(field_name, keywords)
            if confidence > best_confidence:
                best_confidence = confidence
                best_field = field_name

        return FieldMatch(field=best_field, confidence=best_confidence)


class FieldMapperService:
    """
    Maps note type fields to semantic labels using an injected pattern table.

    The pattern table is read-only; one instance can be shared freely.
    """

    def __init__(
        self,
        patterns: Sequence[SemanticPattern] = DEFAULT_SEMANTIC_PATTERNS,
        matcher: Optional[FieldMatcher] = None
    ):
        self.patterns: Tuple[SemanticPattern, ...] = tuple(patterns)
        self.matcher = matcher or FieldMatcher()

    def suggest_mappings(self, schema: RecordSchema) -> SemanticMapping:
        """
        Resolve a label -> field mapping for a note type.

        Pass 1 keeps exact matches only (> 0.8), pass 2 accepts anything
        above 0.5 among the fields still unused. If primary/secondary are
        still missing, fields[0]/fields[1] are assigned when unused.

        Args:
            schema: Note type with its ordered field names

        Returns:
            Mapping containing only the labels that were assigned
        """
        fields = schema.fields
        mappings: SemanticMapping = {}
        used_fields: Set[str] = set()

        for threshold in (FIRST_PASS_THRESHOLD, SECOND_PASS_THRESHOLD):
            for pattern in self.patterns:
                if pattern.label in mappings:
                    continue

                match = self.matcher.find_best_field_match(fields, pattern.keywords, used_fields)
                if match.field is not None and match.confidence > threshold:
                    mappings[pattern.label] = match.field
                    used_fields.add(match.field)

        # Positional fallback: fixed indices, not the first unused field
        if PRIMARY not in mappings and len(fields) > 0 and fields[0] not in used_fields:
            mappings[PRIMARY] = fields[0]
            used_fields.add(fields[0])
        if SECONDARY not in mappings and len(fields) > 1 and fields[1] not in used_fields:
            mappings[SECONDARY] = fields[1]
            used_fields.add(fields[1])

        logger.debug(
            "mappings_suggested",
            note_type=schema.type_name,
            field_count=len(fields),
            mapped=len(mappings)
        )
        return mappings

    def get_suggestion_details(self, schema: RecordSchema) -> List[SuggestionEntry]:
        """
        Rank suggestions in a single pass and report their confidence.

        Any match above 0 is kept. Missing primary/secondary labels then take
        the first unused field in declared order at a fixed 0.3 confidence.
        """
        fields = schema.fields
        suggestions: List[SuggestionEntry] = []
        used_fields: Set[str] = set()

        for pattern in self.patterns:
            match = self.matcher.find_best_field_match(fields, pattern.keywords, used_fields)
            if match.field is not None:
                suggestions.append(SuggestionEntry(pattern.label, match.field, match.confidence))
                used_fields.add(match.field)

        mapped_labels = {entry.label for entry in suggestions}
        for label in (PRIMARY, SECONDARY):
            if label in mapped_labels:
                continue

            field_name = next((f for f in fields if f not in used_fields), None)
            if field_name is not None:
                suggestions.append(SuggestionEntry(label, field_name, FALLBACK_CONFIDENCE))
                used_fields.add(field_name)

        return suggestions

    def validate_mapping(self, schema: RecordSchema, mapping: SemanticMapping) -> bool:
        """
        Check a mapping before it is persisted.

        Returns:
            True when every target field exists in the schema and no two
            labels share a target. An empty mapping is always valid.
        """
        available_fields = set(schema.fields)
        used_fields: Set[str] = set()

        for semantic, field_name in mapping.items():
            if field_name not in available_fields:
                logger.debug("mapping_unknown_field", semantic=semantic, field=field_name)
                return False
            if field_name in used_fields:
                logger.debug("mapping_duplicate_field", semantic=semantic, field=field_name)
                return False
            used_fields.add(field_name)

        return True

    def apply_mapping(
        self,
        mapping: SemanticMapping,
        semantic_content: Dict[str, str]
    ) -> Dict[str, str]:
        """
        Project semantic content onto actual field names.

        Unmapped labels and blank values are skipped. Labels that share a
        target field are joined with a newline in input order; this is
        allowed here even though validate_mapping rejects such mappings.
        """
        result: Dict[str, str] = {}

        for semantic, content in semantic_content.items():
            actual_field = mapping.get(semantic)
            if not actual_field or not content or not content.strip():
                continue

            if actual_field in result:
                result[actual_field] += f"\n{content}"
            else:
                result[actual_field] = content

        return result

    def get_semantic_keywords(self) -> Dict[str, Tuple[str, ...]]:
        """Keywords per semantic label, in pattern table order."""
        return {pattern.label: pattern.keywords for pattern in self.patterns}
