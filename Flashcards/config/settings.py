import os
from typing import Optional
from pathlib import Path
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from .constants import (
    DEFAULT_ANKI_CONNECT_URL,
    DEFAULT_ANKI_CONNECT_VERSION,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_CONFIG_DIR_NAME,
    DEFAULT_SAMPLE_SIZE
)


def default_config_path() -> Path:
    """Location of the persisted user configuration file."""
    return Path.home() / ".config" / DEFAULT_CONFIG_DIR_NAME / "config.json"


class Settings(BaseModel):
    """
    Application settings with Pydantic validation.
    Ensures type safety and validates configuration at startup.
    """

    # AnkiConnect
    anki_connect_url: str = Field(default=DEFAULT_ANKI_CONNECT_URL, min_length=1)
    anki_connect_version: int = Field(default=DEFAULT_ANKI_CONNECT_VERSION, ge=1, le=6)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)

    # Persistence
    config_path: Path = Field(default_factory=default_config_path)

    # Deck analysis
    default_sample_size: int = Field(default=DEFAULT_SAMPLE_SIZE, ge=1, le=1000)

    # Logging
    log_level: str = Field(default="INFO")
    json_logs: bool = False
    log_file: Optional[Path] = None

    model_config = {
        'validate_assignment': True,
        'arbitrary_types_allowed': False
    }

    @field_validator('anki_connect_url')
    @classmethod
    def validate_anki_connect_url(cls, v):
        """Validate AnkiConnect URL format"""
        if not (v.startswith('http://') or v.startswith('https://')):
            raise ValueError("AnkiConnect URL must start with http:// or https://")
        return v.rstrip('/')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate logging level name"""
        allowed = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Must be one of {allowed}")
        return v.upper()

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Settings':
        """
        Load settings from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            Validated Settings instance

        Raises:
            ValueError: If settings are invalid
        """
        if env_file and env_file.exists():
            load_dotenv(dotenv_path=env_file)
        else:
            default_env = Path(__file__).parent.parent / ".env"
            if default_env.exists():
                load_dotenv(dotenv_path=default_env)

        config_path = os.getenv("FLASHCARDS_CONFIG_PATH")
        log_file = os.getenv("LOG_FILE")

        return cls(
            anki_connect_url=os.getenv("ANKI_CONNECT_URL", DEFAULT_ANKI_CONNECT_URL),
            anki_connect_version=int(os.getenv("ANKI_CONNECT_VERSION", str(DEFAULT_ANKI_CONNECT_VERSION))),
            request_timeout=float(os.getenv("ANKI_CONNECT_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))),
            config_path=Path(config_path).expanduser() if config_path else default_config_path(),
            default_sample_size=int(os.getenv("DEFAULT_SAMPLE_SIZE", str(DEFAULT_SAMPLE_SIZE))),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("JSON_LOGS", "false").lower() in ("1", "true", "yes"),
            log_file=Path(log_file).expanduser() if log_file else None,
        )

_settings_instance: Optional[Settings] = None

def get_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Get settings instance (singleton pattern).

    Args:
        env_file: Optional path to .env file

    Returns:
        Validated Settings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings.from_env(env_file=env_file)
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
