"""
Flashcards - add Anki cards through portable semantic field names and infer
those names from existing decks.
"""

__version__ = "1.0.0"
