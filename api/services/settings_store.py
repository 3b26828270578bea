"""JSON-file store for habitt user settings.

Settings are read once, lazily, and every edit is written back straight away.
Stored values override the defaults key by key; a key whose stored value no
longer validates falls back to its default instead of discarding the file.
Access is serialized with a lock so the API and CLI can share one store.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from ..schemas.habitt import HabitSettings, to_host_keys

logger = logging.getLogger(__name__)


def default_settings_path() -> Path:
    env = os.getenv("HABITT_SETTINGS_PATH")
    if env:
        return Path(env)
    return Path.home() / ".habitt-settings.json"


def merge_stored(stored: Mapping[str, Any]) -> HabitSettings:
    """Overlay stored values on the defaults, skipping keys that fail validation."""
    settings = HabitSettings()
    for key, value in to_host_keys(stored).items():
        try:
            settings = settings.apply({key: value})
        except ValidationError:
            logger.warning("habitt_settings_invalid_key", extra={"key": key})
    return settings


class SettingsStore:
    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._settings: Optional[HabitSettings] = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> HabitSettings:
        try:
            stored = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return HabitSettings()
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            logger.warning("habitt_settings_unreadable", extra={"path": str(self._path)})
            return HabitSettings()
        if not isinstance(stored, dict):
            logger.warning("habitt_settings_unreadable", extra={"path": str(self._path)})
            return HabitSettings()
        return merge_stored(stored)

    def _save(self, settings: HabitSettings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(settings.model_dump(by_alias=True), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info("habitt_settings_saved", extra={"path": str(self._path)})

    def get(self) -> HabitSettings:
        with self._lock:
            if self._settings is None:
                self._settings = self._load()
            return self._settings

    def update(self, patch: Mapping[str, Any]) -> HabitSettings:
        """Apply a partial edit and persist it.

        Raises ``ValidationError`` without touching the stored record when the
        edit is invalid.
        """
        with self._lock:
            current = self._settings if self._settings is not None else self._load()
            updated = current.apply(patch)
            self._save(updated)
            self._settings = updated
            return updated

    def reset(self) -> HabitSettings:
        with self._lock:
            defaults = HabitSettings()
            self._save(defaults)
            self._settings = defaults
            return defaults

    def as_dict(self) -> Dict[str, Any]:
        return self.get().model_dump(by_alias=True)


# Global store used by the API; tests swap it out.
STORE = SettingsStore(default_settings_path())


def get_store() -> SettingsStore:
    return STORE
