import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make the package importable without installing it first.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from iGallery.library.store import AlbumStore  # noqa: E402
from iGallery.models.photo import Photo  # noqa: E402


@pytest.fixture
def store() -> AlbumStore:
    """In-memory store, loaded and empty."""

    instance = AlbumStore()
    instance.load()
    return instance


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "library" / "albums.json"


def make_photo(photo_id: str, width: int | None = None, height: int | None = None) -> Photo:
    return Photo(
        id=photo_id,
        name=f"{photo_id}.jpg",
        image_ref=f"https://example.test/{photo_id}.jpg",
        album_id="album-test",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        width=width,
        height=height,
    )
