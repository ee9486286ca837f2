"""Uploader settings management for Img2FTPS.

Provides UploaderSettings dataclass and SettingsManager for persistence.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from img2ftps.config.paths import get_settings_path


@dataclass
class UploaderSettings:
    """Uploader settings that persist between sessions."""

    # Remote target, e.g. ftp://server/img
    base_url: str = ""
    username: str = "anonymous"

    # Transfer limits
    concurrency_limit: int = 10
    max_file_size: int = 5_000_000

    # Connection
    passive_mode: bool = True
    timeout: int = 30
    verify_tls: bool = False

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "UploaderSettings":
        """Create settings from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)


class SettingsManager:
    """Manages uploader settings persistence."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            config_path: Optional custom path, defaults to platform standard
        """
        self._config_path = config_path or get_settings_path()
        self._settings: Optional[UploaderSettings] = None

    @property
    def config_path(self) -> Path:
        """Path to settings file."""
        return self._config_path

    def load(self) -> UploaderSettings:
        """
        Load settings from disk.

        Returns:
            UploaderSettings instance (defaults if file not found)
        """
        if self._config_path.exists():
            try:
                with open(self._config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                self._settings = UploaderSettings.from_dict(data)
            except (json.JSONDecodeError, IOError):
                # Invalid or unreadable file, use defaults
                self._settings = UploaderSettings()
        else:
            self._settings = UploaderSettings()

        return self._settings

    def save(self, settings: UploaderSettings) -> None:
        """
        Persist settings to disk.

        Args:
            settings: Settings to save
        """
        self._settings = settings

        self._config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self._config_path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2)

    def reset(self) -> UploaderSettings:
        """
        Reset to default settings.

        Returns:
            Default UploaderSettings instance
        """
        self._settings = UploaderSettings()

        if self._config_path.exists():
            self._config_path.unlink()

        return self._settings

    def update(self, **kwargs) -> UploaderSettings:
        """
        Update specific settings fields.

        Args:
            **kwargs: Field names and new values

        Returns:
            Updated UploaderSettings instance
        """
        if self._settings is None:
            self.load()

        for key, value in kwargs.items():
            if hasattr(self._settings, key):
                setattr(self._settings, key, value)

        self.save(self._settings)
        return self._settings
