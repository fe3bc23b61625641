"""
Main entry point for the Flashcards assistant.
Provides CLI and programmatic access to the card tools.
"""
import sys
import argparse
from typing import Any, Dict, List, Optional

from .config.logging_config import setup_structured_logging, get_logger, CorrelationIdContext
from .config.settings import get_settings, Settings
from .core.exceptions import ToolExecutionError
from .services.card_assistant import CardAssistantService
from .services.clients.anki_connect_client import AnkiConnectClient
from .services.configuration_manager import ConfigurationManager
from .services.deck_analyzer import DeckAnalyzerService
from .services.field_mapper import FieldMapperService

logger = get_logger(__name__)


def build_assistant(settings: Optional[Settings] = None) -> CardAssistantService:
    """Wire the services together from settings."""
    settings = settings or get_settings()

    anki_client = AnkiConnectClient.from_settings(settings)
    field_mapper = FieldMapperService()

    return CardAssistantService(
        anki_client=anki_client,
        config_manager=ConfigurationManager(settings.config_path),
        field_mapper=field_mapper,
        deck_analyzer=DeckAnalyzerService(anki_client, field_mapper),
        default_sample_size=settings.default_sample_size
    )


def parse_pairs(pairs: Optional[List[str]], option: str) -> Optional[Dict[str, str]]:
    """Turn ["label=value", ...] into a dict."""
    if pairs is None:
        return None

    parsed = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"{option} expects LABEL=VALUE, got {pair!r}")
        parsed[key.strip()] = value
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Flashcards - add Anki cards with semantic field names"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write JSON log lines to this file (default: LOG_FILE)"
    )

    subparsers = parser.add_subparsers(dest="tool", required=True)

    configure = subparsers.add_parser("configure_anki_setup", help="Set default deck, note type and mappings")
    configure.add_argument("deck")
    configure.add_argument("note_type")
    configure.add_argument("--map", dest="field_mappings", action="append", metavar="LABEL=FIELD")

    subparsers.add_parser("get_anki_info", help="List decks, note types and the current configuration")

    add = subparsers.add_parser("add_smart_card", help="Add a card using semantic labels")
    add.add_argument("--set", dest="content", action="append", required=True, metavar="LABEL=TEXT")
    add.add_argument("--deck")
    add.add_argument("--note-type", dest="note_type")
    add.add_argument("--tag", dest="tags", action="append", default=[])

    suggest = subparsers.add_parser("suggest_field_mapping", help="Suggest mappings for a note type")
    suggest.add_argument("note_type")

    analyze = subparsers.add_parser("analyze_existing_deck", help="Analyze an existing deck")
    analyze.add_argument("deck")
    analyze.add_argument("--sample-size", dest="sample_size", type=int, default=None)

    auto = subparsers.add_parser("auto_configure_from_deck", help="Configure from an existing deck")
    auto.add_argument("deck")
    auto.add_argument("--confirm", action="store_true")

    return parser


def tool_arguments(args: argparse.Namespace) -> Dict[str, Any]:
    """Map parsed CLI options onto tool arguments."""
    if args.tool == "configure_anki_setup":
        arguments = {"deck": args.deck, "noteType": args.note_type}
        mappings = parse_pairs(args.field_mappings, "--map")
        if mappings is not None:
            arguments["fieldMappings"] = mappings
        return arguments
    if args.tool == "add_smart_card":
        arguments = {"content": parse_pairs(args.content, "--set"), "tags": args.tags}
        if args.deck:
            arguments["deck"] = args.deck
        if args.note_type:
            arguments["noteType"] = args.note_type
        return arguments
    if args.tool == "suggest_field_mapping":
        return {"noteType": args.note_type}
    if args.tool == "analyze_existing_deck":
        arguments = {"deck": args.deck}
        if args.sample_size is not None:
            arguments["sampleSize"] = args.sample_size
        return arguments
    if args.tool == "auto_configure_from_deck":
        return {"deck": args.deck, "confirm": args.confirm}
    return {}


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_structured_logging(
        log_level=args.log_level or settings.log_level,
        json_logs=args.json_logs or settings.json_logs,
        log_file=args.log_file or settings.log_file
    )

    try:
        arguments = tool_arguments(args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    assistant = build_assistant(settings)

    with CorrelationIdContext():
        try:
            output = assistant.call_tool(args.tool, arguments)
        except ToolExecutionError as e:
            logger.error("tool_failed", tool=args.tool, error=str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
