"""
Exceptions and error context for the Flashcards system.

CollectionEmpty is the only error raised by the mapping/analysis engine.
Everything else belongs to the AnkiConnect client, the configuration store and
the tool layer.
"""
import time
from typing import Optional

from ..config.logging_config import get_logger

logger = get_logger(__name__)


class CollectionEmpty(Exception):
    """The analyzed deck returned no card ids."""

    def __init__(self, collection_name: str):
        self.collection_name = collection_name
        super().__init__(f'Deck "{collection_name}" contains no cards')


# ============================================================================
# Service errors
# ============================================================================

class ServiceError(Exception):
    """Base exception for service-level errors."""
    pass


class AnkiConnectError(ServiceError):
    """AnkiConnect returned an error or could not be reached."""
    pass


class ConfigurationError(ServiceError):
    """User configuration could not be persisted."""
    pass


class NoFieldsMapped(ServiceError):
    """Card content produced no fields under the configured mapping."""
    pass


class NoteTypeNotFound(ServiceError):
    """Requested note type does not exist in the collection."""

    def __init__(self, note_type: str):
        self.note_type = note_type
        super().__init__(f'Note type "{note_type}" not found.')


class ToolExecutionError(ServiceError):
    """A tool call failed; wraps the underlying cause."""
    pass


# ============================================================================
# Error Context Manager
# ============================================================================

class ErrorContext:
    """Context manager for error handling with structured logging."""

    def __init__(
        self,
        operation: str,
        raise_on_error: bool = True,
        log_level: str = "error"
    ):
        """
        Args:
            operation: Name of the operation
            raise_on_error: Whether to re-raise exceptions
            log_level: Logging level for errors
        """
        self.operation = operation
        self.raise_on_error = raise_on_error
        self.log_level = log_level
        self.start_time: Optional[float] = None
        self.error: Optional[Exception] = None

    def __enter__(self):
        self.start_time = time.time()
        logger.debug("operation_start", operation=self.operation)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time if self.start_time else 0

        if exc_type is not None:
            self.error = exc_val

            log_func = getattr(logger, self.log_level)
            log_func(
                "operation_failed",
                operation=self.operation,
                duration_seconds=round(duration, 3),
                error_type=exc_type.__name__,
                error_message=str(exc_val)
            )

            if not self.raise_on_error:
                return True
        else:
            logger.debug(
                "operation_success",
                operation=self.operation,
                duration_seconds=round(duration, 3)
            )

        return False
