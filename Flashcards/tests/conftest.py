"""Shared fixtures: in-memory card store and Anki client doubles."""
from typing import Dict, List, Optional

import pytest

from Flashcards.models.mapping_model import CardRecord, RecordSchema
from Flashcards.services.field_mapper import FieldMapperService
from Flashcards.services.deck_analyzer import DeckAnalyzerService


class FakeCardStore:
    """Records every call so tests can assert on store traffic."""

    def __init__(self, cards: Optional[Dict[int, CardRecord]] = None):
        self.cards = cards or {}
        self.queries: List[str] = []
        self.fetched: List[List[int]] = []

    def find_ids(self, query: str) -> List[int]:
        self.queries.append(query)
        return list(self.cards.keys())

    def fetch_records(self, ids: List[int]) -> List[CardRecord]:
        self.fetched.append(list(ids))
        return [self.cards[card_id] for card_id in ids]


class FakeAnkiClient(FakeCardStore):
    """FakeCardStore plus the note type, deck and note operations of AnkiConnectClient."""

    def __init__(self, cards=None, note_types=None, decks=None):
        super().__init__(cards)
        self.note_types = note_types or []
        self.decks = decks or []
        self.created_decks: List[str] = []
        self.added_notes: List[dict] = []
        self.create_deck_error: Optional[Exception] = None

    def get_note_types(self) -> List[RecordSchema]:
        return list(self.note_types)

    def get_deck_names(self) -> List[str]:
        return list(self.decks)

    def create_deck(self, deck_name: str) -> None:
        if self.create_deck_error is not None:
            raise self.create_deck_error
        self.created_decks.append(deck_name)

    def add_note(self, deck_name, note_type, fields, tags=None) -> int:
        self.added_notes.append({
            "deckName": deck_name,
            "modelName": note_type,
            "fields": fields,
            "tags": list(tags or []),
        })
        return 1496198395707


@pytest.fixture
def field_mapper():
    return FieldMapperService()


@pytest.fixture
def japanese_cards():
    return {
        101: CardRecord("Japanese", {
            "Expression": "日本",
            "Reading": "にほん",
            "Meaning": "Japan",
            "Sentence": "",
        }),
        102: CardRecord("Japanese", {
            "Expression": "食べる",
            "Reading": "たべる",
            "Meaning": "to eat",
            "Sentence": "ご飯を食べる。",
        }),
    }


@pytest.fixture
def card_store(japanese_cards):
    return FakeCardStore(japanese_cards)


@pytest.fixture
def deck_analyzer(card_store, field_mapper):
    return DeckAnalyzerService(card_store, field_mapper)
