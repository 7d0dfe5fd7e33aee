"""Storage backends holding the serialised album document.

A backend only moves whole documents: ``read`` returns the last committed
document (or ``None`` when nothing was ever written) and ``write`` replaces
it in a single step.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

from ..config import MAX_BACKUPS
from ..errors import PersistenceError
from ..utils.jsonio import read_json, write_json

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    def read(self) -> Optional[Any]:
        ...

    def write(self, document: Any) -> None:
        ...


class MemoryBackend:
    """Keeps the document in memory; used for tests and throwaway sessions."""

    def __init__(self, document: Optional[Any] = None) -> None:
        self._document = copy.deepcopy(document)
        self.write_count = 0

    def read(self) -> Optional[Any]:
        return copy.deepcopy(self._document)

    def write(self, document: Any) -> None:
        self._document = copy.deepcopy(document)
        self.write_count += 1


class JsonFileBackend:
    """Stores the document as one JSON file replaced atomically per commit."""

    def __init__(
        self,
        path: Path,
        *,
        backup_dir: Path | None = None,
        keep_backups: int = MAX_BACKUPS,
    ) -> None:
        self._path = Path(path)
        self._backup_dir = backup_dir
        self._keep_backups = keep_backups

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Optional[Any]:
        """Return the decoded document, or ``None`` when the file is absent.

        Raises :class:`DocumentInvalidError` for unreadable or malformed files.
        """

        if not self._path.exists():
            return None
        return read_json(self._path)

    def write(self, document: Any) -> None:
        try:
            write_json(
                self._path,
                document,
                backup_dir=self._backup_dir,
                keep_backups=self._keep_backups,
            )
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to write album document %s: %s", self._path, exc)
            raise PersistenceError(f"Unable to write {self._path}: {exc}") from exc


__all__ = ["StorageBackend", "MemoryBackend", "JsonFileBackend"]
