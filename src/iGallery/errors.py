"""Exception hierarchy shared by the store, layout engine and controllers."""

from __future__ import annotations


class GalleryError(Exception):
    """Base class for every error raised by iGallery."""


class NotFoundError(GalleryError):
    """A referenced album or photo does not exist."""


class AlbumNotFoundError(NotFoundError):
    """The requested album id is not part of the collection."""

    def __init__(self, album_id: str) -> None:
        super().__init__(f"Album not found: {album_id}")
        self.album_id = album_id


class PhotoNotFoundError(NotFoundError):
    """The requested photo id is not part of the collection."""

    def __init__(self, photo_id: str) -> None:
        super().__init__(f"Photo not found: {photo_id}")
        self.photo_id = photo_id


class InvalidArgumentError(GalleryError, ValueError):
    """A caller supplied an empty name or an unknown configuration value."""


class PersistenceError(GalleryError):
    """Reading or writing the durable document failed."""


class DocumentInvalidError(PersistenceError):
    """A persisted JSON document is missing or cannot be decoded."""


__all__ = [
    "GalleryError",
    "NotFoundError",
    "AlbumNotFoundError",
    "PhotoNotFoundError",
    "InvalidArgumentError",
    "PersistenceError",
    "DocumentInvalidError",
]
