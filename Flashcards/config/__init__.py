"""
Configuration package for the Flashcards system.
"""

from .settings import get_settings, reset_settings, Settings
from .constants import SemanticLabel, DEFAULT_SEMANTIC_PATTERNS

__all__ = [
    "get_settings",
    "reset_settings",
    "Settings",
    "SemanticLabel",
    "DEFAULT_SEMANTIC_PATTERNS"
]
