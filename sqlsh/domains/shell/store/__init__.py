"""Shell persistence."""

from .settings import OUTPUT_MODES, Settings, SettingsStore

__all__ = ["OUTPUT_MODES", "Settings", "SettingsStore"]
