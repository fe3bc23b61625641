"""
Services - field mapping, deck analysis, configuration and the tool layer.
"""

from .field_mapper import FieldMatcher, FieldMapperService
from .deck_analyzer import DeckAnalyzerService
from .configuration_manager import ConfigurationManager
from .card_assistant import CardAssistantService
from .clients import AnkiConnectClient

__all__ = [
    "FieldMatcher",
    "FieldMapperService",
    "DeckAnalyzerService",
    "ConfigurationManager",
    "CardAssistantService",
    "AnkiConnectClient"
]
