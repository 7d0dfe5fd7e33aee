"""Turn image files into photos stored inline as ``data:`` URIs."""

from __future__ import annotations

import base64
import logging
import mimetypes
from io import BytesIO
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..config import SUPPORTED_IMAGE_SUFFIXES
from ..errors import InvalidArgumentError
from ..models.photo import Photo
from .store import AlbumStore

logger = logging.getLogger(__name__)


def encode_data_uri(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """Split a base64 ``data:`` URI into its MIME type and payload."""

    if not uri.startswith("data:"):
        raise InvalidArgumentError("Not a data URI")
    header, _, payload = uri.partition(",")
    if not header.endswith(";base64"):
        raise InvalidArgumentError("Only base64 data URIs are supported")
    mime_type = header[len("data:") : -len(";base64")] or "application/octet-stream"
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except ValueError as exc:
        raise InvalidArgumentError(f"Malformed data URI payload: {exc}") from exc


def probe_dimensions(data: bytes) -> Optional[Tuple[int, int]]:
    """Return ``(width, height)`` of the encoded image, or ``None`` if unknown.

    Only the header is parsed; pixel data is never decoded.
    """

    try:
        with Image.open(BytesIO(data)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError, ValueError):
        return None
    if width <= 0 or height <= 0:
        return None
    return int(width), int(height)


def _mime_type_for(path: Path, data: bytes) -> str:
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed:
        return guessed
    try:
        with Image.open(BytesIO(data)) as image:
            if image.format:
                return Image.MIME.get(image.format, "application/octet-stream")
    except (UnidentifiedImageError, OSError, ValueError):
        pass
    return "application/octet-stream"


def is_supported_image(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_IMAGE_SUFFIXES


def import_file(store: AlbumStore, album_id: str, path: Path, *, name: str | None = None) -> Photo:
    """Read *path* and add it to *album_id* as an inline image.

    Raises :class:`InvalidArgumentError` for unsupported or unreadable files.
    """

    path = Path(path)
    if not is_supported_image(path):
        raise InvalidArgumentError(f"Unsupported image type: {path.name}")
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise InvalidArgumentError(f"Unable to read {path}: {exc}") from exc

    size = probe_dimensions(data)
    if size is None:
        logger.warning("Could not determine dimensions of %s", path)
        width = height = None
    else:
        width, height = size
    image_ref = encode_data_uri(data, _mime_type_for(path, data))
    return store.add_photo(album_id, name or path.name, image_ref, width=width, height=height)


def import_files(store: AlbumStore, album_id: str, paths: Iterable[Path]) -> List[Photo]:
    """Import each file in order, skipping the ones that cannot be read.

    Each file is added as soon as it is processed, so a failure on one file
    never discards the photos already added.
    """

    imported: List[Photo] = []
    for path in paths:
        try:
            imported.append(import_file(store, album_id, path))
        except InvalidArgumentError as exc:
            logger.warning("Skipping %s: %s", path, exc)
    logger.info("Imported %d photo(s) into %s", len(imported), album_id)
    return imported


__all__ = [
    "encode_data_uri",
    "decode_data_uri",
    "probe_dimensions",
    "is_supported_image",
    "import_file",
    "import_files",
]
