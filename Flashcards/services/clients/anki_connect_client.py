"""
AnkiConnect client - JSON-over-HTTP access to a running Anki instance.

Implements the CardStore and SchemaProvider protocols used by the deck analyzer
and the card assistant. No retries: every failure surfaces to the caller.
"""
from typing import Any, Dict, List, Optional, Sequence

import requests

from ...config.constants import (
    DEFAULT_ANKI_CONNECT_URL,
    DEFAULT_ANKI_CONNECT_VERSION,
    DEFAULT_REQUEST_TIMEOUT
)
from ...config.logging_config import get_logger, log_api_call
from ...core.exceptions import AnkiConnectError
from ...models.mapping_model import CardRecord, RecordSchema

logger = get_logger(__name__)


class AnkiConnectClient:
    """
    Thin wrapper around the AnkiConnect action API.

    Every request is a POST of {"action", "version", "params"}; the response is
    {"result", "error"} and a non-null error is raised as AnkiConnectError.
    """

    def __init__(
        self,
        url: str = DEFAULT_ANKI_CONNECT_URL,
        version: int = DEFAULT_ANKI_CONNECT_VERSION,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            url: AnkiConnect endpoint
            version: AnkiConnect API version sent with every request
            timeout: Request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.url = url
        self.version = version
        self.timeout = timeout
        self._session = session

        logger.debug("anki_connect_client_initialized", url=url, version=version)

    @classmethod
    def from_settings(cls, settings) -> 'AnkiConnectClient':
        return cls(
            url=settings.anki_connect_url,
            version=settings.anki_connect_version,
            timeout=settings.request_timeout
        )

    @property
    def session(self) -> requests.Session:
        """Get or create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @log_api_call(logger, "ankiconnect")
    def send_request(self, action: str, **params) -> Any:
        """
        Invoke one AnkiConnect action.

        Raises:
            AnkiConnectError: On transport failure or an error reply
        """
        payload = {"action": action, "version": self.version, "params": params}

        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise AnkiConnectError(f"AnkiConnect request '{action}' failed: {e}") from e
        except ValueError as e:
            raise AnkiConnectError(f"AnkiConnect returned invalid JSON for '{action}': {e}") from e

        if not isinstance(data, dict):
            raise AnkiConnectError(f"AnkiConnect returned an unexpected reply for '{action}': {data!r}")

        if data.get("error"):
            raise AnkiConnectError(f"AnkiConnect error: {data['error']}")

        return data.get("result")

    # ------------------------------------------------------------------
    # Deck and note type lookups
    # ------------------------------------------------------------------

    def get_deck_names(self) -> List[str]:
        return self.send_request("deckNames")

    def get_note_type_names(self) -> List[str]:
        return self.send_request("modelNames")

    def get_field_names(self, type_name: str) -> List[str]:
        return self.send_request("modelFieldNames", modelName=type_name)

    def get_note_types(self) -> List[RecordSchema]:
        """Every note type with its ordered field names (one request per type)."""
        return [
            RecordSchema.from_provider(self, name)
            for name in self.get_note_type_names()
        ]

    def create_deck(self, deck_name: str) -> None:
        """Create a deck; an already existing deck is not an error."""
        try:
            self.send_request("createDeck", deck=deck_name)
        except AnkiConnectError as e:
            if "deck already exists" in str(e):
                logger.debug("deck_already_exists", deck=deck_name)
                return
            raise

    def add_note(
        self,
        deck_name: str,
        note_type: str,
        fields: Dict[str, str],
        tags: Optional[Sequence[str]] = None
    ) -> int:
        """Add a note and return its id."""
        note = {
            "deckName": deck_name,
            "modelName": note_type,
            "fields": fields,
            "tags": list(tags or []),
        }
        return self.send_request("addNote", note=note)

    # ------------------------------------------------------------------
    # Card lookups
    # ------------------------------------------------------------------

    def find_cards(self, query: str) -> List[int]:
        return self.send_request("findCards", query=query)

    def get_cards_info(self, card_ids: Sequence[int]) -> List[Dict[str, Any]]:
        return self.send_request("cardsInfo", cards=list(card_ids))

    def find_ids(self, query: str) -> List[int]:
        return self.find_cards(query)

    def fetch_records(self, ids: Sequence[int]) -> List[CardRecord]:
        """Cards reduced to note type and field values, fields in note type order."""
        return [to_card_record(info) for info in self.get_cards_info(ids)]


def to_card_record(card_info: Dict[str, Any]) -> CardRecord:
    """
    Convert a cardsInfo entry ({"modelName", "fields": {name: {"value", "order"}}})
    into a CardRecord.
    """
    raw_fields = card_info.get("fields") or {}
    ordered = sorted(raw_fields.items(), key=lambda item: item[1].get("order", 0))

    return CardRecord(
        type_name=card_info.get("modelName", ""),
        fields={name: data.get("value", "") for name, data in ordered}
    )
