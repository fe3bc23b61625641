"""
Card assistant - the tool layer on top of the mapping engine.

Each tool returns plain text for display. Policy that the engine leaves to its
caller lives here, e.g. refusing to add a card when no field was mapped.
"""
import json
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..config.constants import DEFAULT_SAMPLE_SIZE
from ..config.logging_config import get_logger
from ..core.exceptions import (
    ErrorContext,
    NoFieldsMapped,
    NoteTypeNotFound,
    ToolExecutionError
)
from ..models.mapping_model import RecordSchema
from ..models.user_config import UserConfig
from ..models.validators import (
    AnalyzeDeckInput,
    AutoConfigureInput,
    ConfigureSetupInput,
    SmartCardInput,
    SuggestFieldMappingInput,
    sanitize_for_logging
)
from .clients.anki_connect_client import AnkiConnectClient
from .configuration_manager import ConfigurationManager
from .deck_analyzer import DeckAnalyzerService
from .field_mapper import FieldMapperService

logger = get_logger(__name__)


class CardAssistantService:
    """
    Orchestrates configuration, card creation and deck analysis.
    """

    TOOL_NAMES = (
        "configure_anki_setup",
        "get_anki_info",
        "add_smart_card",
        "suggest_field_mapping",
        "analyze_existing_deck",
        "auto_configure_from_deck",
    )

    def __init__(
        self,
        anki_client: AnkiConnectClient,
        config_manager: ConfigurationManager,
        field_mapper: FieldMapperService,
        deck_analyzer: DeckAnalyzerService,
        default_sample_size: int = DEFAULT_SAMPLE_SIZE
    ):
        self.anki_client = anki_client
        self.config_manager = config_manager
        self.field_mapper = field_mapper
        self.deck_analyzer = deck_analyzer
        self.default_sample_size = default_sample_size

        self.user_config: Optional[UserConfig] = None
        self.available_note_types: List[RecordSchema] = []

    def initialize_user_config(self) -> UserConfig:
        """Load note types and stored configuration once."""
        if self.user_config is None:
            self.available_note_types = self.anki_client.get_note_types()
            self.user_config = self.config_manager.load_config()
            logger.info(
                "user_config_initialized",
                note_types=len(self.available_note_types),
                deck=self.user_config.preferred_deck
            )
        return self.user_config

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def configure_anki_setup(
        self,
        deck: str,
        note_type: str,
        field_mappings: Optional[Dict[str, str]] = None
    ) -> str:
        current = self.initialize_user_config()

        # A failed deck creation does not block saving the configuration
        with ErrorContext("create_deck", raise_on_error=False, log_level="warning"):
            self.anki_client.create_deck(deck)

        if field_mappings is None:
            field_mappings = dict(current.field_mappings)

        self.user_config = UserConfig(
            preferred_deck=deck,
            preferred_note_type=note_type,
            field_mappings=field_mappings
        )
        self.config_manager.save_config(self.user_config)

        schema = self._find_note_type(note_type)
        if schema is not None and not self.field_mapper.validate_mapping(schema, field_mappings):
            logger.warning("configured_mapping_invalid", note_type=note_type, mappings=field_mappings)

        return (
            "Anki configuration updated:\n"
            f"Deck: {deck}\n"
            f"Note type: {note_type}\n"
            f"Configuration file: {self.config_manager.get_config_path()}\n"
            f"Field mappings:\n{json.dumps(field_mappings, indent=2, ensure_ascii=False)}"
        )

    def get_anki_info(self) -> str:
        config = self.initialize_user_config()
        decks = self.anki_client.get_deck_names()

        lines = ["=== Anki Information ===", "", "Available decks:"]
        lines.extend(f"- {deck}" for deck in decks)
        lines.append("")
        lines.append("Available note types and fields:")
        lines.extend(
            f"- {schema.type_name}: [{', '.join(schema.fields)}]"
            for schema in self.available_note_types
        )
        lines.append("")
        lines.append("Current configuration:")
        lines.append(f"- Default deck: {config.preferred_deck}")
        lines.append(f"- Default note type: {config.preferred_note_type}")
        lines.append(
            f"- Field mappings: {json.dumps(config.field_mappings, indent=2, ensure_ascii=False)}"
        )
        return "\n".join(lines)

    def add_smart_card(
        self,
        content: Dict[str, str],
        deck: Optional[str] = None,
        note_type: Optional[str] = None,
        tags: Optional[Sequence[str]] = None
    ) -> str:
        """
        Raises:
            NoFieldsMapped: If no content label maps to a field
        """
        config = self.initialize_user_config()
        deck = deck or config.preferred_deck
        note_type = note_type or config.preferred_note_type

        mapped_fields = self.field_mapper.apply_mapping(config.field_mappings, content)
        if not mapped_fields:
            raise NoFieldsMapped("No fields were mapped. Please check your configuration.")

        logger.info(
            "adding_smart_card",
            deck=deck,
            note_type=note_type,
            fields=sanitize_for_logging(mapped_fields)
        )
        note_id = self.anki_client.add_note(deck, note_type, mapped_fields, tags)

        lines = [
            "Smart card added successfully!",
            f"Note ID: {note_id}",
            f"Deck: {deck}",
            f"Note type: {note_type}",
            "Mapped fields:",
        ]
        lines.extend(f"- {field_name}: {value}" for field_name, value in mapped_fields.items())
        return "\n".join(lines)

    def suggest_field_mapping(self, note_type: str) -> str:
        """
        Raises:
            NoteTypeNotFound: If the note type does not exist
        """
        self.initialize_user_config()

        schema = self._find_note_type(note_type)
        if schema is None:
            raise NoteTypeNotFound(note_type)

        suggestions = self.field_mapper.suggest_mappings(schema)
        details = self.field_mapper.get_suggestion_details(schema)

        lines = [
            f'Recommended field mappings for note type "{note_type}":',
            "",
            f"Available fields: [{', '.join(schema.fields)}]",
            "",
            "Recommended mappings:",
        ]
        lines.extend(f"- {semantic} → {field_name}" for semantic, field_name in suggestions.items())
        lines.append("")
        lines.append("Match confidence:")
        lines.extend(
            f"- {entry.label} → {entry.field} ({entry.confidence:.1f})"
            for entry in details
        )
        lines.append("")
        lines.append("Usage:")
        lines.append("Use the configure_anki_setup tool to apply these mappings.")
        return "\n".join(lines)

    def analyze_existing_deck(self, deck: str, sample_size: Optional[int] = None) -> str:
        self.initialize_user_config()
        if sample_size is None:
            sample_size = self.default_sample_size
        result = self.deck_analyzer.analyze_deck(deck, sample_size)
        return self.deck_analyzer.generate_report(result)

    def auto_configure_from_deck(self, deck: str, confirm: bool = False) -> str:
        analysis = self.deck_analyzer.analyze_deck(deck, self.default_sample_size)

        if not confirm:
            return (
                self.deck_analyzer.generate_report(analysis)
                + "\n\nIf this configuration looks good, run auto_configure_from_deck "
                "with confirm: true to apply."
            )

        return self.configure_anki_setup(
            deck=deck,
            note_type=analysis.dominant_type_name,
            field_mappings=dict(analysis.suggested_mapping)
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """
        Validate arguments and run a tool by name.

        Raises:
            ToolExecutionError: For unknown tools, invalid arguments and any
                failure raised by the tool itself
        """
        arguments = arguments or {}
        handlers: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "configure_anki_setup": self._run_configure,
            "get_anki_info": lambda args: self.get_anki_info(),
            "add_smart_card": self._run_add_smart_card,
            "suggest_field_mapping": self._run_suggest,
            "analyze_existing_deck": self._run_analyze,
            "auto_configure_from_deck": self._run_auto_configure,
        }

        handler = handlers.get(name)
        if handler is None:
            raise ToolExecutionError(f"Unknown tool: {name}")

        try:
            with ErrorContext(f"tool:{name}"):
                return handler(arguments)
        except ValidationError as e:
            raise ToolExecutionError(f"Invalid arguments for {name}: {e}") from e
        except Exception as e:
            raise ToolExecutionError(f"Tool execution failed: {e}") from e

    def _run_configure(self, arguments: Dict[str, Any]) -> str:
        args = ConfigureSetupInput.model_validate(arguments)
        return self.configure_anki_setup(args.deck, args.note_type, args.field_mappings)

    def _run_add_smart_card(self, arguments: Dict[str, Any]) -> str:
        args = SmartCardInput.model_validate(arguments)
        return self.add_smart_card(args.content, args.deck, args.note_type, args.tags)

    def _run_suggest(self, arguments: Dict[str, Any]) -> str:
        args = SuggestFieldMappingInput.model_validate(arguments)
        return self.suggest_field_mapping(args.note_type)

    def _run_analyze(self, arguments: Dict[str, Any]) -> str:
        args = AnalyzeDeckInput.model_validate(arguments)
        return self.analyze_existing_deck(args.deck, args.sample_size)

    def _run_auto_configure(self, arguments: Dict[str, Any]) -> str:
        args = AutoConfigureInput.model_validate(arguments)
        return self.auto_configure_from_deck(args.deck, args.confirm)

    def _find_note_type(self, note_type: str) -> Optional[RecordSchema]:
        return next(
            (schema for schema in self.available_note_types if schema.type_name == note_type),
            None
        )
