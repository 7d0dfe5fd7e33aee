"""Static configuration and environment-derived locations."""

from __future__ import annotations

import os
from pathlib import Path

WORK_DIR_NAME = ".igallery"
"""Directory created under the user's home when ``IGALLERY_HOME`` is unset."""

STORE_FILE_NAME = "albums.json"
SETTINGS_FILE_NAME = "settings.json"
BACKUP_DIR_NAME = "backups"

STORE_SCHEMA = "iGallery/albums@1"
SETTINGS_SCHEMA = "iGallery/settings@1"

MAX_BACKUPS = 10
"""Number of rolling document backups kept when backups are enabled."""

SUPPORTED_IMAGE_SUFFIXES = frozenset(
    {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp", ".tif", ".tiff", ".heic"}
)

# Layout ---------------------------------------------------------------------

DEFAULT_VIEWPORT_WIDTH = 1200
"""Width assumed when the UI has not reported its viewport yet."""

# Pixel height bands per layout kind, indexed by photo size.
SIZE_BANDS: dict[str, dict[str, int]] = {
    "masonry": {"small": 160, "medium": 220, "large": 300},
    "grid": {"small": 160, "medium": 220, "large": 300},
    "cards": {"small": 180, "medium": 240, "large": 320},
    "rows": {"small": 200, "medium": 280, "large": 360},
    "filmstrip": {"small": 96, "medium": 128, "large": 180},
}

CARD_CAPTION_HEIGHT = 48
"""Caption strip reserved beneath the image in the cards layout."""

# (minimum viewport width, column count), widest first.
COLUMN_BREAKPOINTS: tuple[tuple[int, int], ...] = (
    (1280, 4),
    (1024, 3),
    (640, 2),
)

ROWS_PER_LINE = 2


def library_root() -> Path:
    """Return the directory holding the album document and settings."""

    override = os.environ.get("IGALLERY_HOME", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / WORK_DIR_NAME


def store_path() -> Path:
    return library_root() / STORE_FILE_NAME


def settings_path() -> Path:
    return library_root() / SETTINGS_FILE_NAME


__all__ = [
    "WORK_DIR_NAME",
    "STORE_FILE_NAME",
    "SETTINGS_FILE_NAME",
    "BACKUP_DIR_NAME",
    "STORE_SCHEMA",
    "SETTINGS_SCHEMA",
    "MAX_BACKUPS",
    "SUPPORTED_IMAGE_SUFFIXES",
    "DEFAULT_VIEWPORT_WIDTH",
    "SIZE_BANDS",
    "CARD_CAPTION_HEIGHT",
    "COLUMN_BREAKPOINTS",
    "ROWS_PER_LINE",
    "library_root",
    "store_path",
    "settings_path",
]
