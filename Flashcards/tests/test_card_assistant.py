"""
Test suite for the card assistant tool layer, run against in-memory doubles.
"""
import json

import pytest

from Flashcards.core.exceptions import (
    AnkiConnectError,
    CollectionEmpty,
    NoFieldsMapped,
    NoteTypeNotFound,
    ToolExecutionError
)
from Flashcards.models.mapping_model import CardRecord, RecordSchema
from Flashcards.models.user_config import UserConfig
from Flashcards.services.card_assistant import CardAssistantService
from Flashcards.services.configuration_manager import ConfigurationManager
from Flashcards.services.deck_analyzer import DeckAnalyzerService
from Flashcards.services.field_mapper import FieldMapperService

from .conftest import FakeAnkiClient


NOTE_TYPES = [
    RecordSchema("Basic", ("Front", "Back")),
    RecordSchema("Japanese", ("Expression", "Reading", "Meaning", "Sentence")),
]


@pytest.fixture
def anki_client(japanese_cards):
    return FakeAnkiClient(japanese_cards, note_types=NOTE_TYPES, decks=["Default", "Japanese"])


@pytest.fixture
def config_manager(tmp_path):
    return ConfigurationManager(tmp_path / "config.json")


@pytest.fixture
def assistant(anki_client, config_manager):
    field_mapper = FieldMapperService()
    return CardAssistantService(
        anki_client=anki_client,
        config_manager=config_manager,
        field_mapper=field_mapper,
        deck_analyzer=DeckAnalyzerService(anki_client, field_mapper)
    )


class TestConfigure:

    def test_saves_configuration(self, assistant, anki_client, config_manager):
        text = assistant.configure_anki_setup("Japanese", "Japanese", {"primary": "Expression"})

        assert anki_client.created_decks == ["Japanese"]
        assert config_manager.load_config() == UserConfig(
            preferred_deck="Japanese",
            preferred_note_type="Japanese",
            field_mappings={"primary": "Expression"}
        )
        assert text.startswith("Anki configuration updated:\nDeck: Japanese\nNote type: Japanese\n")
        assert str(config_manager.get_config_path()) in text

    def test_keeps_previous_mappings(self, assistant, config_manager):
        assistant.configure_anki_setup("Other", "Basic")
        assert config_manager.load_config().field_mappings == {"primary": "Front", "secondary": "Back"}

    def test_deck_creation_failure_does_not_block(self, assistant, anki_client, config_manager):
        anki_client.create_deck_error = AnkiConnectError("AnkiConnect error: boom")

        assistant.configure_anki_setup("Broken", "Basic")

        assert config_manager.load_config().preferred_deck == "Broken"


class TestAddSmartCard:

    def test_adds_mapped_note(self, assistant, anki_client):
        text = assistant.add_smart_card(
            {"primary": "Hello", "secondary": "こんにちは", "hint": "ignored"},
            tags=["greeting"]
        )

        assert anki_client.added_notes == [{
            "deckName": "Default",
            "modelName": "Basic",
            "fields": {"Front": "Hello", "Back": "こんにちは"},
            "tags": ["greeting"],
        }]
        assert "Note ID: 1496198395707" in text
        assert "- Front: Hello" in text

    def test_explicit_deck_and_note_type(self, assistant, anki_client):
        assistant.add_smart_card({"primary": "Hi"}, deck="Other", note_type="Custom")
        assert anki_client.added_notes[0]["deckName"] == "Other"
        assert anki_client.added_notes[0]["modelName"] == "Custom"

    def test_nothing_mapped_raises(self, assistant, anki_client):
        with pytest.raises(NoFieldsMapped):
            assistant.add_smart_card({"reading": "にほん"})
        assert anki_client.added_notes == []


class TestSuggestAndInfo:

    def test_suggest_field_mapping(self, assistant):
        text = assistant.suggest_field_mapping("Japanese")

        assert 'Recommended field mappings for note type "Japanese":' in text
        assert "Available fields: [Expression, Reading, Meaning, Sentence]" in text
        assert "- primary → Expression" in text
        assert "- secondary → Meaning (1.0)" in text
        assert "- primary → Expression (0.3)" in text

    def test_unknown_note_type(self, assistant):
        with pytest.raises(NoteTypeNotFound, match='Note type "Missing" not found.'):
            assistant.suggest_field_mapping("Missing")

    def test_get_anki_info(self, assistant):
        text = assistant.get_anki_info()

        assert text.startswith("=== Anki Information ===\n\nAvailable decks:\n- Default\n- Japanese\n")
        assert "- Basic: [Front, Back]" in text
        assert "- Default deck: Default" in text


class TestDeckTools:

    def test_analyze_existing_deck(self, assistant, anki_client):
        text = assistant.analyze_existing_deck("Japanese", 1)

        assert text.startswith("=== Deck Analysis Report ===\n")
        assert "Sample size: 1\n" in text
        assert anki_client.fetched == [[101]]

    def test_auto_configure_preview(self, assistant, config_manager):
        text = assistant.auto_configure_from_deck("Japanese")

        assert "- primary → Expression" in text
        assert text.endswith("with confirm: true to apply.")
        assert not config_manager.get_config_path().exists()

    def test_auto_configure_confirmed(self, assistant, config_manager):
        assistant.auto_configure_from_deck("Japanese", confirm=True)

        config = config_manager.load_config()
        assert config.preferred_deck == "Japanese"
        assert config.preferred_note_type == "Japanese"
        assert config.field_mappings == {
            "primary": "Expression",
            "reading": "Reading",
            "secondary": "Meaning",
            "example": "Sentence",
        }

    def test_empty_deck(self, assistant, anki_client):
        anki_client.cards = {}
        with pytest.raises(CollectionEmpty):
            assistant.analyze_existing_deck("Japanese")


class TestCallTool:

    def test_camel_case_arguments(self, assistant, config_manager):
        assistant.call_tool("configure_anki_setup", {
            "deck": "Japanese",
            "noteType": "Japanese",
            "fieldMappings": {"primary": "Expression"},
        })
        assert config_manager.load_config().field_mappings == {"primary": "Expression"}

    def test_analyze_sample_size(self, assistant, anki_client):
        assistant.call_tool("analyze_existing_deck", {"deck": "Japanese", "sampleSize": 1})
        assert anki_client.fetched == [[101]]

    def test_unknown_tool(self, assistant):
        with pytest.raises(ToolExecutionError, match="Unknown tool: delete_everything"):
            assistant.call_tool("delete_everything")

    def test_invalid_arguments(self, assistant):
        with pytest.raises(ToolExecutionError, match="Invalid arguments"):
            assistant.call_tool("analyze_existing_deck", {"deck": "Japanese", "sampleSize": 0})

    def test_tool_failure_wrapped(self, assistant):
        with pytest.raises(ToolExecutionError, match="Tool execution failed") as exc:
            assistant.call_tool("add_smart_card", {"content": {"reading": "x"}})
        assert isinstance(exc.value.__cause__, NoFieldsMapped)

    def test_empty_deck_message(self, assistant, anki_client):
        anki_client.cards = {}
        with pytest.raises(ToolExecutionError, match='Deck "Japanese" contains no cards'):
            assistant.call_tool("auto_configure_from_deck", {"deck": "Japanese"})

    def test_mappings_json_in_output(self, assistant):
        text = assistant.call_tool("configure_anki_setup", {
            "deck": "D", "noteType": "Basic", "fieldMappings": {"primary": "Front"}
        })
        assert text.endswith(json.dumps({"primary": "Front"}, indent=2))


class TestDefaultSampleSize:

    @pytest.fixture
    def small_sample_assistant(self, anki_client, config_manager):
        field_mapper = FieldMapperService()
        return CardAssistantService(
            anki_client=anki_client,
            config_manager=config_manager,
            field_mapper=field_mapper,
            deck_analyzer=DeckAnalyzerService(anki_client, field_mapper),
            default_sample_size=1
        )

    def test_analyze_tool_without_size(self, small_sample_assistant, anki_client):
        text = small_sample_assistant.call_tool("analyze_existing_deck", {"deck": "Japanese"})

        assert "Sample size: 1\n" in text
        assert anki_client.fetched == [[101]]

    def test_explicit_size_wins(self, small_sample_assistant, anki_client):
        small_sample_assistant.analyze_existing_deck("Japanese", 2)
        assert anki_client.fetched == [[101, 102]]

    def test_auto_configure_uses_default(self, small_sample_assistant, anki_client):
        small_sample_assistant.auto_configure_from_deck("Japanese")
        assert anki_client.fetched == [[101]]

    def test_service_default(self, assistant):
        assert assistant.default_sample_size == 5
