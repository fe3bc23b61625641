"""
Deck analysis service - reverse-engineers a field mapping from an existing deck.

Samples the first cards of a deck, classifies each field from its name and
content, and runs the field mapper on the sampled field names. The card store
is called exactly twice (id lookup, then card fetch); failures propagate.
"""
import re
from collections import Counter
from typing import List, Sequence

from ..config.constants import (
    DEFAULT_SAMPLE_SIZE,
    SAMPLE_TRUNCATE_LENGTH,
    LONG_SAMPLE_LENGTH,
    SHORT_SAMPLE_LENGTH
)
from ..config.logging_config import get_logger
from ..core.exceptions import CollectionEmpty
from ..models.mapping_model import (
    CardRecord,
    CardStore,
    DeckAnalysisResult,
    FieldSampleSet,
    RecordSchema
)
from .field_mapper import FieldMapperService

logger = get_logger(__name__)

# (name fragments, label); first match wins
FIELD_NAME_RULES = (
    (('expression', 'pronunciation'), 'English expressions or pronunciation'),
    # 'pronunciation' is already taken by the rule above
    (('phonetic', 'pronunciation'), 'Pronunciation or phonetic information'),
    (('example', 'sentence'), 'Usage examples or sample sentences'),
    (('meaning', 'translation'), 'Meaning or translation'),
    (('explanation', 'description'), 'Detailed explanation or description'),
    (('grammar',), 'Grammar information'),
    (('synonym', 'related'), 'Synonyms or related words'),
    (('collocation',), 'Word collocations'),
)

PRONUNCIATION_SYMBOLS_PATTERN = re.compile(r'/.*/')


def deck_query(deck_name: str) -> str:
    """Search query selecting every card of a deck."""
    return f'deck:"{deck_name}"'


class DeckAnalyzerService:
    """
    Analyzes existing decks to suggest a semantic configuration.
    """

    def __init__(self, card_store: CardStore, field_mapper: FieldMapperService):
        self.card_store = card_store
        self.field_mapper = field_mapper

    def analyze_deck(self, deck_name: str, sample_size: int = DEFAULT_SAMPLE_SIZE) -> DeckAnalysisResult:
        """
        Sample a deck and build an analysis result.

        Args:
            deck_name: Deck to analyze
            sample_size: Maximum number of cards to sample

        Returns:
            DeckAnalysisResult with field classifications and suggested mapping

        Raises:
            CollectionEmpty: If the deck has no cards (cards are never fetched)
        """
        logger.info("deck_analysis_started", deck=deck_name, requested_sample_size=sample_size)

        card_ids = self.card_store.find_ids(deck_query(deck_name))
        if not card_ids:
            logger.warning("deck_empty", deck=deck_name)
            raise CollectionEmpty(deck_name)

        actual_sample_size = min(sample_size, len(card_ids))
        cards = self.card_store.fetch_records(list(card_ids[:actual_sample_size]))

        dominant_type = self.get_dominant_note_type(cards)
        field_samples = self.get_field_samples(cards)
        field_analysis = {
            field_name: self.classify_field_content(field_name, samples)
            for field_name, samples in field_samples.items()
        }

        synthetic_schema = RecordSchema.from_fields(dominant_type, field_samples.keys())
        suggested_mapping = self.field_mapper.suggest_mappings(synthetic_schema)

        logger.info(
            "deck_analysis_completed",
            deck=deck_name,
            sample_size=actual_sample_size,
            note_type=dominant_type,
            fields=len(field_analysis),
            mapped=len(suggested_mapping)
        )

        return DeckAnalysisResult(
            collection_name=deck_name,
            sample_size=actual_sample_size,
            dominant_type_name=dominant_type,
            field_analysis=field_analysis,
            suggested_mapping=suggested_mapping
        )

    def classify_field_content(self, field_name: str, samples: Sequence[str]) -> str:
        """
        Guess a field's purpose, first from its name and then from its samples.
        """
        field_lower = field_name.lower()

        for fragments, label in FIELD_NAME_RULES:
            if any(fragment in field_lower for fragment in fragments):
                return label

        content_sample = ' '.join(samples).lower()

        if PRONUNCIATION_SYMBOLS_PATTERN.search(content_sample):
            return 'Likely pronunciation symbols'
        if 'example:' in content_sample or 'usage:' in content_sample:
            return 'Examples or usage demonstrations'
        if any(len(s) > LONG_SAMPLE_LENGTH for s in samples):
            return 'Long detailed explanations'
        if any(len(s) < SHORT_SAMPLE_LENGTH for s in samples):
            return 'Short words or phrases'

        return 'General content (purpose unclear)'

    def get_field_samples(self, cards: Sequence[CardRecord]) -> FieldSampleSet:
        """
        Collect truncated, non-blank values per field in first-seen field order.

        A field that only ever holds blank values is kept with an empty list.
        """
        field_samples: FieldSampleSet = {}

        for card in cards:
            for field_name, value in card.fields.items():
                samples = field_samples.setdefault(field_name, [])
                if value and value.strip():
                    samples.append(value[:SAMPLE_TRUNCATE_LENGTH])

        return field_samples

    def get_dominant_note_type(self, cards: Sequence[CardRecord]) -> str:
        """Most frequent note type; the first type to reach the top count wins ties."""
        counts = Counter(card.type_name for card in cards)

        dominant_type = ''
        max_count = 0
        for note_type, count in counts.items():
            if count > max_count:
                max_count = count
                dominant_type = note_type

        return dominant_type

    def generate_report(self, analysis_result: DeckAnalysisResult) -> str:
        """
        Render an analysis result as the fixed-layout text report.
        """
        lines: List[str] = [
            "=== Deck Analysis Report ===",
            "",
            f"Deck: {analysis_result.collection_name}",
            f"Sample size: {analysis_result.sample_size}",
            f"Primary note type: {analysis_result.dominant_type_name}",
            "",
            "Field Analysis:",
        ]
        lines.extend(
            f"- {field_name}: {analysis}"
            for field_name, analysis in analysis_result.field_analysis.items()
        )

        lines.append("")
        lines.append("Suggested Semantic Mappings:")
        if not analysis_result.suggested_mapping:
            lines.append("No semantic mappings suggested")
        else:
            lines.extend(
                f"- {semantic} → {field_name}"
                for semantic, field_name in analysis_result.suggested_mapping.items()
            )

        return "\n".join(lines) + "\n"
