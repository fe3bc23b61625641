"""
Core package - exceptions and error handling.
"""

from .exceptions import (
    CollectionEmpty,
    ServiceError,
    AnkiConnectError,
    ConfigurationError,
    NoFieldsMapped,
    NoteTypeNotFound,
    ToolExecutionError,
    ErrorContext
)

__all__ = [
    "CollectionEmpty",
    "ServiceError",
    "AnkiConnectError",
    "ConfigurationError",
    "NoFieldsMapped",
    "NoteTypeNotFound",
    "ToolExecutionError",
    "ErrorContext"
]
