"""
Structured logging configuration using structlog.
Console output for interactive use, JSON output for log collectors.
"""
import os
import sys
import time
import uuid
import logging
from functools import wraps
from typing import Optional, Union
from pathlib import Path

import structlog
from pythonjsonlogger import jsonlogger


def setup_structured_logging(
    log_level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    json_logs: bool = False,
    service_name: str = "flashcards"
) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for JSON log output
        json_logs: Whether to render JSON (True) or human-readable lines (False)
        service_name: Name of the service bound to every log entry
    """
    # Logs go to stderr so command output on stdout stays clean
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper())
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        renderer = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer()
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        json_formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s',
            rename_fields={
                'levelname': 'level',
                'asctime': 'timestamp'
            }
        )
        file_handler.setFormatter(json_formatter)
        logging.root.addHandler(file_handler)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service=service_name,
        environment=os.getenv("ENVIRONMENT", "development")
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)


class CorrelationIdContext:
    """Context manager binding a correlation ID to every log entry of one invocation."""

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id or f"corr-{uuid.uuid4().hex[:16]}"
        self._previous_context = None

    def __enter__(self):
        self._previous_context = structlog.contextvars.get_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        structlog.contextvars.clear_contextvars()
        if self._previous_context:
            structlog.contextvars.bind_contextvars(**self._previous_context)


def log_api_call(logger: structlog.stdlib.BoundLogger, api_name: str):
    """
    Decorator to log external API calls with timing.
    Exceptions are logged and re-raised untouched.

    Args:
        logger: Structured logger instance
        api_name: Name of the API (e.g., "ankiconnect")

    Example:
        @log_api_call(logger, "ankiconnect")
        def find_cards(self, query):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()

            logger.debug(
                "api_call_start",
                api=api_name,
                function=func.__name__
            )

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "api_call_error",
                    api=api_name,
                    function=func.__name__,
                    duration_seconds=round(time.time() - start_time, 3),
                    error_type=type(e).__name__,
                    error_message=str(e)
                )
                raise

            logger.debug(
                "api_call_success",
                api=api_name,
                function=func.__name__,
                duration_seconds=round(time.time() - start_time, 3)
            )
            return result

        return wrapper
    return decorator
