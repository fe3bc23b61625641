"""External service clients."""

__all__ = ["AnkiConnectClient"]

from .anki_connect_client import AnkiConnectClient
