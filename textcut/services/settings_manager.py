"""Settings manager for application preferences."""

from pathlib import Path
from typing import Any, Optional

from PySide6.QtCore import QSettings

from textcut.utils.config import DATA_DIR, RECOGNIZER_SCRIPT, SPEECH_MODELS_DIRNAME


class SettingsManager:
    """Wrapper around QSettings for type-safe preference management."""

    def __init__(self):
        self._settings = QSettings()

    # ---------------------------------------------------- Speech Recognition

    def get_language_model(self) -> str:
        """Get the name of the last chosen language model ('' if none)."""
        return self._settings.value("speech/language_model", "", str)

    def set_language_model(self, name: str) -> None:
        """Remember the chosen language model."""
        self._settings.setValue("speech/language_model", name)

    def get_zone_only(self) -> bool:
        """Whether only the clip zone is analysed (default: False)."""
        value = self._settings.value("speech/zone_only", False, bool)
        if isinstance(value, str):
            return value.lower() in ("true", "1")
        return bool(value)

    def set_zone_only(self, enabled: bool) -> None:
        """Set whether only the clip zone is analysed."""
        self._settings.setValue("speech/zone_only", enabled)

    def get_model_dir(self) -> Optional[str]:
        """Get the custom speech model directory (None for default)."""
        path = self._settings.value("speech/model_dir", "", str)
        return path if path else None

    def set_model_dir(self, path: Optional[str]) -> None:
        """Set the custom speech model directory (None for default)."""
        self._settings.setValue("speech/model_dir", path or "")

    def get_script_path(self) -> Optional[str]:
        """Get the custom recognizer script path (None for default)."""
        path = self._settings.value("speech/script_path", "", str)
        return path if path else None

    def set_script_path(self, path: Optional[str]) -> None:
        """Set the custom recognizer script path (None for default)."""
        self._settings.setValue("speech/script_path", path or "")

    def effective_model_dir(self) -> Path:
        """Configured model directory, or the default one in the data directory."""
        custom = self.get_model_dir()
        return Path(custom) if custom else DATA_DIR / SPEECH_MODELS_DIRNAME

    def effective_script_path(self) -> Path:
        """Configured recognizer script, or the default one in the data directory."""
        custom = self.get_script_path()
        return Path(custom) if custom else DATA_DIR / RECOGNIZER_SCRIPT

    # ---------------------------------------------------- UI Settings

    def get_ui_language(self) -> str:
        """Get the UI language code (default: en)."""
        return self._settings.value("general/ui_language", "en", str)

    def set_ui_language(self, lang: str) -> None:
        """Set the UI language code ('en', 'ko', etc.)."""
        self._settings.setValue("general/ui_language", lang)

    # ---------------------------------------------------- General Methods

    def reset_to_defaults(self) -> None:
        """Reset all settings to default values."""
        self._settings.clear()

    def sync(self) -> None:
        """Force synchronization of settings to disk."""
        self._settings.sync()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value by key."""
        return self._settings.value(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a setting value by key."""
        self._settings.setValue(key, value)
