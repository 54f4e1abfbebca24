"""
Manages creation, loading and validation of the JSON settings file.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gmplayer.exceptions import ConfigurationError
from gmplayer.models.config import PLACEHOLDER_EMAIL, PLACEHOLDER_PASSWORD, Settings

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gmplayerrc"


def default_config_file() -> Path:
    return Path.home() / CONFIG_FILE_NAME


class ConfigManager:
    """Handles all operations related to the application's settings file."""

    def __init__(self, config_file_path: Path | None = None):
        self.config_file_path = Path(
            config_file_path or default_config_file()
        ).expanduser()

    @property
    def setup_message(self) -> str:
        return f"Go to {self.config_file_path} and add your email and password"

    def load_settings(self, cli_options: dict[str, Any] | None = None) -> Settings:
        """
        Loads the settings file, applies CLI overrides, and validates it.

        A missing file is created with placeholder credentials first. Either
        way the caller cannot proceed until the user has edited it.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated Settings object.

        Raises:
            ConfigurationError: If the file is missing, still holds placeholders,
            cannot be parsed, or fails validation.
        """
        if not self.config_file_path.is_file():
            self.save_placeholder_settings()
            raise ConfigurationError(self.setup_message)

        try:
            with open(self.config_file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Error parsing settings file '{self.config_file_path}': {e}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Could not read settings file '{self.config_file_path}': {e}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file '{self.config_file_path}' must contain a JSON object."
            )

        if cli_options:
            data.update(cli_options)

        try:
            settings = Settings(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Settings validation failed:\n{e}") from e

        if settings.is_placeholder:
            raise ConfigurationError(self.setup_message)

        log.debug(f"Loaded settings for {settings.email} from {self.config_file_path}")
        return settings

    def save_placeholder_settings(self) -> None:
        """Writes a fresh settings file holding placeholder credentials."""
        settings = {"email": PLACEHOLDER_EMAIL, "password": PLACEHOLDER_PASSWORD}
        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as f:
                json.dump(settings, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Failed to create settings file: {e}") from e
        log.debug(f"Created placeholder settings at {self.config_file_path}")
