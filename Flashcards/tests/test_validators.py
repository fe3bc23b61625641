"""
Test suite for tool argument validation.
"""
import pytest
from pydantic import ValidationError

from Flashcards.models.validators import (
    AnalyzeDeckInput,
    AutoConfigureInput,
    ConfigureSetupInput,
    SmartCardInput,
    SuggestFieldMappingInput,
    sanitize_for_logging
)


class TestConfigureSetupInput:

    def test_camel_case_keys(self):
        args = ConfigureSetupInput.model_validate({
            "deck": " Japanese ",
            "noteType": "Basic",
            "fieldMappings": {"primary": "Front"},
        })
        assert args.deck == "Japanese"
        assert args.note_type == "Basic"
        assert args.field_mappings == {"primary": "Front"}

    def test_snake_case_keys(self):
        args = ConfigureSetupInput(deck="D", note_type="Basic")
        assert args.field_mappings is None

    def test_blank_deck(self):
        with pytest.raises(ValidationError):
            ConfigureSetupInput(deck="   ", note_type="Basic")

    def test_quote_in_deck_name(self):
        with pytest.raises(ValidationError, match="double quotes"):
            ConfigureSetupInput(deck='My "Deck"', note_type="Basic")


class TestSmartCardInput:

    def test_optional_fields(self):
        args = SmartCardInput.model_validate({"content": {"primary": "Hi"}})
        assert args.deck is None
        assert args.note_type is None
        assert args.tags == []

    def test_empty_content(self):
        with pytest.raises(ValidationError):
            SmartCardInput.model_validate({"content": {}})

    def test_tags_cleaned(self):
        args = SmartCardInput.model_validate({"content": {"primary": "Hi"}, "tags": ["a", " ", " b "]})
        assert args.tags == ["a", "b"]

    def test_tag_with_space(self):
        with pytest.raises(ValidationError, match="whitespace"):
            SmartCardInput.model_validate({"content": {"primary": "Hi"}, "tags": ["two words"]})


class TestDeckInputs:

    def test_sample_size_left_to_service(self):
        assert AnalyzeDeckInput(deck="D").sample_size is None

    def test_sample_size_alias(self):
        assert AnalyzeDeckInput.model_validate({"deck": "D", "sampleSize": 20}).sample_size == 20

    @pytest.mark.parametrize("size", [0, -1, 1001])
    def test_sample_size_bounds(self, size):
        with pytest.raises(ValidationError):
            AnalyzeDeckInput(deck="D", sample_size=size)

    def test_auto_configure_default(self):
        assert AutoConfigureInput(deck="D").confirm is False

    def test_suggest_requires_note_type(self):
        with pytest.raises(ValidationError):
            SuggestFieldMappingInput.model_validate({})


def test_sanitize_for_logging():
    assert sanitize_for_logging(None) == "None"
    assert sanitize_for_logging("a\nb\tc") == "a b c"
    assert sanitize_for_logging("x" * 20, max_length=5) == "xxxxx...[truncated]"
