"""Configuration management for the natural-language terminal."""

import dataclasses
import json
import os
from typing import Optional

import keyring

from . import config_dir, logger
from .exceptions import ConfigError, KeychainError, ValidationError
from .models import Settings
from .output_explainer import MockExplainer

SETTING_FIELDS = tuple(f.name for f in dataclasses.fields(Settings))


class ConfigManager:
    """Application settings manager."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize ConfigManager.

        Args:
            config_path: Path to config file. Defaults to ~/.config/nl-terminal/config.json
        """
        if config_path is None:
            config_path = str(config_dir / "config.json")

        self.config_path = config_path
        self.settings = self._load_config()

    def _load_config(self) -> Settings:
        """Load configuration from file or create default."""
        if not os.path.exists(self.config_path):
            return Settings()

        try:
            with open(self.config_path, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ConfigError(f"Failed to load config: {e}")

        if not isinstance(data, dict):
            raise ConfigError("Failed to load config: expected a JSON object")

        known = {key: value for key, value in data.items() if key in SETTING_FIELDS}
        try:
            return Settings(**known)
        except (ValidationError, TypeError) as e:
            raise ConfigError(f"Invalid config values: {e}")

    def _save_config(self) -> None:
        """Save configuration to file."""
        try:
            data = {"version": "1.0", **self.settings.to_dict()}
            with open(self.config_path, 'w') as f:
                json.dump(data, f, indent=2)
        except IOError as e:
            raise ConfigError(f"Failed to save config: {e}")

    def get_settings(self) -> Settings:
        """Get a copy of the current settings."""
        return dataclasses.replace(self.settings)

    def update_settings(self, **changes) -> Settings:
        """
        Apply a partial settings update and persist it.

        Args:
            **changes: Settings fields to change.

        Returns:
            The updated settings.

        Raises:
            ValidationError: If a key is unknown or a value is invalid.
        """
        unknown = set(changes) - set(SETTING_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        self.settings = dataclasses.replace(self.settings, **changes)
        self._save_config()
        logger.info(f"설정 변경: {', '.join(sorted(changes))}")
        return self.get_settings()

    def reset(self) -> Settings:
        """Restore default settings."""
        self.settings = Settings()
        self._save_config()
        return self.get_settings()

    def get_api_key(self) -> Optional[str]:
        """
        Get Gemini API key from the system keychain.

        Returns:
            API key string or None if not found.
        """
        try:
            return keyring.get_password(
                self.settings.api_key_service,
                self.settings.api_key_account
            )
        except Exception as e:
            raise KeychainError(f"Failed to get API key from Keychain: {e}")

    def set_api_key(self, api_key: str) -> None:
        """
        Save Gemini API key to the system keychain.

        Args:
            api_key: The API key to store.

        Raises:
            KeychainError: If Keychain access fails.
        """
        if not api_key:
            raise ValueError("API key cannot be empty")

        try:
            keyring.set_password(
                self.settings.api_key_service,
                self.settings.api_key_account,
                api_key
            )
        except Exception as e:
            raise KeychainError(f"Failed to save API key to Keychain: {e}")

    def build_explainer(self):
        """
        Create the output explainer the settings ask for.

        Falls back to MockExplainer when Gemini is selected but no API key
        is stored.
        """
        if self.settings.explainer == "gemini":
            api_key = self.get_api_key()
            if api_key:
                from .gemini_client import GeminiClient
                return GeminiClient(api_key)
            logger.warning("API 키가 없어 기본 설명 모드를 사용합니다")
        return MockExplainer()
