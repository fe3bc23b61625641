from enum import Enum

from ..models.mapping_model import SemanticPattern


class SemanticLabel(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    READING = "reading"
    EXAMPLE = "example"
    NOTES = "notes"
    SOURCE = "source"
    IMAGE = "image"
    AUDIO = "audio"
    CATEGORY = "category"
    DIFFICULTY = "difficulty"


# Order matters: earlier patterns claim fields first.
DEFAULT_SEMANTIC_PATTERNS = (
    SemanticPattern(SemanticLabel.PRIMARY.value, ('front', 'question', 'word', 'term', 'kanji', '表', '問題')),
    SemanticPattern(SemanticLabel.SECONDARY.value, ('back', 'answer', 'meaning', 'definition', '裏', '答え')),
    SemanticPattern(SemanticLabel.READING.value, ('reading', 'pronunciation', 'phonetic', 'kana', '読み', '発音')),
    SemanticPattern(SemanticLabel.EXAMPLE.value, ('example', 'sentence', 'usage', 'context', '例文', '使用例')),
    SemanticPattern(SemanticLabel.NOTES.value, ('notes', 'memo', 'hint', 'extra', 'remarks', 'メモ', 'ヒント')),
    SemanticPattern(SemanticLabel.SOURCE.value, ('source', 'reference', 'origin', '出典', '参考')),
    SemanticPattern(SemanticLabel.IMAGE.value, ('image', 'picture', 'photo', 'visual', '画像', '写真')),
    SemanticPattern(SemanticLabel.AUDIO.value, ('audio', 'sound', 'voice', '音声')),
    SemanticPattern(SemanticLabel.CATEGORY.value, ('category', 'type', 'class', 'group', '分類', 'カテゴリ')),
    SemanticPattern(SemanticLabel.DIFFICULTY.value, ('difficulty', 'level', 'grade', '難易度', 'レベル')),
)

# Match confidence tiers
EXACT_MATCH_CONFIDENCE = 1.0
CONTAINS_KEYWORD_CONFIDENCE = 0.8
PARTIAL_KEYWORD_CONFIDENCE = 0.6
FALLBACK_CONFIDENCE = 0.3

# Resolver thresholds (strictly greater than)
FIRST_PASS_THRESHOLD = 0.8
SECOND_PASS_THRESHOLD = 0.5

# Deck sampling
DEFAULT_SAMPLE_SIZE = 5
SAMPLE_TRUNCATE_LENGTH = 50
LONG_SAMPLE_LENGTH = 100
SHORT_SAMPLE_LENGTH = 20

# AnkiConnect / persistence defaults
DEFAULT_ANKI_CONNECT_URL = "http://localhost:8765"
DEFAULT_ANKI_CONNECT_VERSION = 6
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_CONFIG_DIR_NAME = "anki-kashikoi-mcp"
DEFAULT_DECK = "Default"
DEFAULT_NOTE_TYPE = "Basic"
DEFAULT_FIELD_MAPPINGS = {
    SemanticLabel.PRIMARY.value: "Front",
    SemanticLabel.SECONDARY.value: "Back",
}
