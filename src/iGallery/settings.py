"""Persisted user preferences."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .config import SETTINGS_SCHEMA, settings_path
from .errors import DocumentInvalidError, PersistenceError
from .utils.jsonio import read_json, write_json

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "ui.layout": {},
    "ui.last_album": None,
}


class Settings:
    """Dotted-key preference store backed by a small JSON document.

    Passing ``path=None`` keeps the preferences in memory only.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else None
        self._values: Dict[str, Any] = {}
        self.load()

    @classmethod
    def open(cls, path: Optional[Path] = None) -> "Settings":
        """Return settings stored at *path*, defaulting to the library directory."""

        return cls(path if path is not None else settings_path())

    def load(self) -> None:
        """Read the settings file, falling back to defaults when it is unusable."""

        self._values = copy.deepcopy(DEFAULTS)
        if self._path is None or not self._path.exists():
            return
        try:
            payload = read_json(self._path)
        except DocumentInvalidError as exc:
            logger.warning("Ignoring unreadable settings file: %s", exc)
            return
        if not isinstance(payload, dict) or payload.get("schema") != SETTINGS_SCHEMA:
            logger.warning("Ignoring settings file with unexpected layout: %s", self._path)
            return
        values = payload.get("values")
        if isinstance(values, dict):
            self._values.update(values)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._values:
            return copy.deepcopy(self._values[key])
        return default

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* and persist immediately."""

        self._values[key] = copy.deepcopy(value)
        self._save()

    def _save(self) -> None:
        if self._path is None:
            return
        try:
            write_json(self._path, {"schema": SETTINGS_SCHEMA, "values": self._values})
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Unable to write settings {self._path}: {exc}") from exc


__all__ = ["Settings", "DEFAULTS"]
