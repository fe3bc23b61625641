"""
Input validation for tool arguments using Pydantic.
Arguments arrive with camelCase keys (noteType, fieldMappings, sampleSize);
the models accept both those and the snake_case names.
"""
import re
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator



def _clean_name(v: Optional[str], what: str) -> Optional[str]:
    if v is None:
        return None

    v = v.replace('\x00', '').strip()
    if not v:
        raise ValueError(f"{what} cannot be empty")
    return v


class ToolInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class DeckNameMixin(BaseModel):
    @field_validator('deck', check_fields=False)
    @classmethod
    def validate_deck(cls, v):
        """Deck names are embedded in a quoted search query"""
        v = _clean_name(v, "Deck name")
        if v is not None and '"' in v:
            raise ValueError("Deck name cannot contain double quotes")
        return v


class ConfigureSetupInput(ToolInput, DeckNameMixin):
    deck: str = Field(..., min_length=1, max_length=500)
    note_type: str = Field(..., min_length=1, max_length=500, alias="noteType")
    field_mappings: Optional[Dict[str, str]] = Field(default=None, alias="fieldMappings")

    @field_validator('note_type')
    @classmethod
    def validate_note_type(cls, v):
        return _clean_name(v, "Note type")


class SmartCardInput(ToolInput, DeckNameMixin):
    content: Dict[str, str] = Field(..., min_length=1)
    deck: Optional[str] = Field(default=None, max_length=500)
    note_type: Optional[str] = Field(default=None, max_length=500, alias="noteType")
    tags: List[str] = Field(default_factory=list)

    @field_validator('note_type')
    @classmethod
    def validate_note_type(cls, v):
        return _clean_name(v, "Note type")

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        """Anki tags are space separated, so a tag cannot contain whitespace"""
        cleaned = []
        for tag in v:
            tag = tag.strip()
            if not tag:
                continue
            if re.search(r'\s', tag):
                raise ValueError(f"Tag cannot contain whitespace: {tag!r}")
            cleaned.append(tag)
        return cleaned


class SuggestFieldMappingInput(ToolInput):
    note_type: str = Field(..., min_length=1, max_length=500, alias="noteType")

    @field_validator('note_type')
    @classmethod
    def validate_note_type(cls, v):
        return _clean_name(v, "Note type")


class AnalyzeDeckInput(ToolInput, DeckNameMixin):
    deck: str = Field(..., min_length=1, max_length=500)
    sample_size: Optional[int] = Field(default=None, ge=1, le=1000, alias="sampleSize")


class AutoConfigureInput(ToolInput, DeckNameMixin):
    deck: str = Field(..., min_length=1, max_length=500)
    confirm: bool = False


def sanitize_for_logging(data: Any, max_length: int = 100) -> str:
    """
    Flatten and truncate data for single-line log output.

    Args:
        data: Data to sanitize
        max_length: Maximum length of output
    """
    if data is None:
        return "None"

    text = re.sub(r'\s+', ' ', str(data))

    if len(text) > max_length:
        text = text[:max_length] + "...[truncated]"

    return text
