"""
Configuration manager - loads and saves the user's card defaults as JSON.
"""
import json
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ..config.logging_config import get_logger
from ..config.settings import default_config_path
from ..core.exceptions import ConfigurationError
from ..models.user_config import UserConfig

logger = get_logger(__name__)


class ConfigurationManager:
    """Reads and writes UserConfig at a fixed path."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else default_config_path()

    def get_config_path(self) -> Path:
        return self.config_path

    def load_config(self) -> UserConfig:
        """
        Load the stored configuration.

        A missing, unreadable or invalid file yields the default configuration.
        """
        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("config_unreadable_using_defaults", path=str(self.config_path), error=str(e))
            return UserConfig()

        if not self.validate_config(data):
            logger.warning("config_invalid_using_defaults", path=str(self.config_path))
            return UserConfig()

        return UserConfig.model_validate(data)

    def save_config(self, config: UserConfig) -> None:
        """
        Persist the configuration, creating parent directories as needed.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(
                json.dumps(config.to_json_dict(), indent=2, ensure_ascii=False),
                encoding="utf-8"
            )
        except OSError as e:
            logger.error("config_save_failed", path=str(self.config_path), error=str(e))
            raise ConfigurationError(f"Failed to save configuration: {e}") from e

        logger.info("config_saved", path=str(self.config_path))

    def validate_config(self, data: Any) -> bool:
        """True if data has the stored key layout with valid values."""
        if not isinstance(data, dict):
            return False

        required = ("preferredDeck", "preferredNoteType", "fieldMappings")
        if any(key not in data for key in required):
            return False

        try:
            UserConfig.model_validate(data)
        except ValidationError:
            return False

        return True
