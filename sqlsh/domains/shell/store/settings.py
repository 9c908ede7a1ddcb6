"""Settings store for managing application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sqlsh.shared.core.store import JSONFileStore, config_dir

OUTPUT_MODES = ("table", "sql", "csv", "null")


def _resolve_settings_path() -> Path:
    override = os.environ.get("SQLSH_SETTINGS_PATH", "").strip()
    if override:
        return Path(override).expanduser()
    return config_dir() / "settings.json"


@dataclass
class Settings:
    """Typed view over the settings file with defaults applied."""

    output_mode: str = "table"
    pager_threshold: int = 100
    history_limit: int = 500
    log_level: str = "WARNING"
    log_file: str = field(default_factory=lambda: str(config_dir() / "sqlsh.log"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Build settings from raw JSON, ignoring malformed values."""
        settings = cls()
        mode = data.get("output_mode")
        if isinstance(mode, str) and mode.lower() in OUTPUT_MODES:
            settings.output_mode = mode.lower()
        for key in ("pager_threshold", "history_limit"):
            value = data.get(key)
            # bool is an int subclass; reject it explicitly
            if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                setattr(settings, key, value)
        level = data.get("log_level")
        if isinstance(level, str) and level.strip():
            settings.log_level = level.strip().upper()
        log_file = data.get("log_file")
        if isinstance(log_file, str) and log_file.strip():
            settings.log_file = log_file.strip()
        return settings

    def to_dict(self) -> dict[str, Any]:
        return {
            "output_mode": self.output_mode,
            "pager_threshold": self.pager_threshold,
            "history_limit": self.history_limit,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }


class SettingsStore(JSONFileStore):
    """Store for managing application settings.

    Settings are stored as a JSON object in ~/.sqlsh/settings.json
    """

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or _resolve_settings_path())

    def load_all(self) -> dict[str, Any]:
        """Load all settings.

        Returns:
            Dictionary of settings, or empty dict if none exist.
        """
        data = self._read_json()
        return data if isinstance(data, dict) else {}

    def save_all(self, settings: dict[str, Any]) -> None:
        """Save all settings, replacing existing.

        Args:
            settings: Dictionary of settings to save.
        """
        self._write_json(settings)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a specific setting.

        Args:
            key: Setting key.
            default: Default value if key not found.

        Returns:
            Setting value or default.
        """
        return self.load_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a specific setting.

        Args:
            key: Setting key.
            value: Setting value.
        """
        settings = self.load_all()
        settings[key] = value
        self.save_all(settings)

    def load_settings(self) -> Settings:
        """Load settings as a typed object with defaults filled in."""
        return Settings.from_dict(self.load_all())
