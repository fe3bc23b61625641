"""
Persisted user configuration.

Stored as JSON with camelCase keys so existing config files stay readable.
"""
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config.constants import DEFAULT_DECK, DEFAULT_NOTE_TYPE, DEFAULT_FIELD_MAPPINGS


class UserConfig(BaseModel):
    """Default deck, note type and semantic field mappings for new cards."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    preferred_deck: str = Field(default=DEFAULT_DECK, alias="preferredDeck")
    preferred_note_type: str = Field(default=DEFAULT_NOTE_TYPE, alias="preferredNoteType")
    field_mappings: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_FIELD_MAPPINGS),
        alias="fieldMappings"
    )

    @field_validator('field_mappings')
    @classmethod
    def validate_field_mappings(cls, v):
        """Semantic labels and field names must be non-empty strings"""
        for semantic, field_name in v.items():
            if not semantic or not field_name:
                raise ValueError("Field mappings cannot contain empty labels or field names")
        return v

    def to_json_dict(self) -> Dict:
        """Serialize with the on-disk key names."""
        return self.model_dump(by_alias=True)
