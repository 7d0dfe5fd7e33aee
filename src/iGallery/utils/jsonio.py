"""Helpers for JSON input/output with atomic writes and backups."""

from __future__ import annotations

import json
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..errors import DocumentInvalidError


def read_json(path: Path) -> Any:
    """Read the JSON document stored at *path*."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise DocumentInvalidError(f"JSON file not found: {path}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise DocumentInvalidError(f"Invalid JSON data in {path}") from exc
    except OSError as exc:
        raise DocumentInvalidError(f"Unable to read {path}: {exc}") from exc


def atomic_write_text(path: Path, data: str) -> None:
    """Atomically write *data* into *path*.

    The payload lands in a sibling temporary file which is fsynced and then
    swapped over *path*, so readers only ever observe the old or the new
    document.
    """

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    with tmp_path.open("w", encoding="utf-8") as handle:
        handle.write(data)
        handle.flush()
        os.fsync(handle.fileno())
    # ``Path.replace`` can intermittently fail on Windows while another process
    # briefly holds the destination open, so retry with a short back-off.
    for attempt in range(5):
        try:
            tmp_path.replace(path)
            return
        except PermissionError:
            # Never unlink the destination: aborting must keep the old data.
            if attempt == 4:
                tmp_path.unlink(missing_ok=True)
                raise
            time.sleep(0.05 * (attempt + 1))


def _write_backup(path: Path, backup_dir: Path, keep: int | None) -> None:
    if not path.exists():
        return
    backup_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    backup_path = backup_dir / f"{path.stem}-{timestamp}{path.suffix}"
    backup_path.write_bytes(path.read_bytes())
    if keep is not None:
        backups = sorted(backup_dir.glob(f"{path.stem}-*{path.suffix}"))
        for stale in backups[: max(0, len(backups) - keep)]:
            stale.unlink(missing_ok=True)


def write_json(
    path: Path,
    data: Any,
    *,
    backup_dir: Path | None = None,
    keep_backups: int | None = None,
) -> None:
    """Write *data* into *path* atomically with optional backups.

    ``keep_backups`` bounds the number of files retained in *backup_dir*;
    the oldest copies are pruned first.
    """

    if backup_dir is not None:
        _write_backup(path, backup_dir, keep_backups)
    payload = json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True)
    atomic_write_text(path, payload)
