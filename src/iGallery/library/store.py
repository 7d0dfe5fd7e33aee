"""Persistent album collection.

:class:`AlbumStore` is the single owner of the canonical album list. Every
public method is one atomic unit: mutations are applied to a private working
copy, the complete document is committed through the backend, and only then
does the working copy replace the in-memory state. Readers always receive
deep copies, so snapshots held by the UI never change underneath it and must
be re-fetched after a mutation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence

from ..config import BACKUP_DIR_NAME, STORE_SCHEMA, store_path
from ..errors import (
    AlbumNotFoundError,
    GalleryError,
    InvalidArgumentError,
    PersistenceError,
    PhotoNotFoundError,
)
from ..models.album import Album
from ..models.photo import Photo
from ..utils.ids import new_id, utc_now
from .backends import JsonFileBackend, MemoryBackend, StorageBackend

logger = logging.getLogger(__name__)

SeedFactory = Callable[[], List[Album]]


def _clean_name(name: object, *, what: str) -> str:
    if not isinstance(name, str):
        raise InvalidArgumentError(f"{what} must be a string, got {type(name).__name__}")
    cleaned = name.strip()
    if not cleaned:
        raise InvalidArgumentError(f"{what} must not be empty")
    return cleaned


def encode_document(albums: Sequence[Album]) -> dict[str, Any]:
    """Return the JSON-ready document for *albums*."""

    return {"schema": STORE_SCHEMA, "albums": [album.to_dict() for album in albums]}


def decode_document(document: Any) -> List[Album]:
    """Parse a persisted document into albums.

    Both the current ``{"schema": ..., "albums": [...]}`` shape and the legacy
    bare list of camelCase album records are accepted. Photos whose stored
    owner disagrees with their containing album are re-owned by that album,
    and duplicate ids are dropped; each repair is logged. Structural problems
    raise ``KeyError``, ``TypeError`` or ``ValueError``.
    """

    if document is None:
        return []
    if isinstance(document, list):
        records = document
    elif isinstance(document, dict):
        schema = document.get("schema")
        if schema is not None and schema != STORE_SCHEMA:
            raise ValueError(f"Unsupported album document schema: {schema!r}")
        records = document.get("albums", [])
        if not isinstance(records, list):
            raise TypeError("'albums' must be a list")
    else:
        raise TypeError(f"Unexpected album document type: {type(document).__name__}")

    albums: List[Album] = []
    album_ids: set[str] = set()
    photo_ids: set[str] = set()
    for record in records:
        album = Album.from_dict(record)
        if album.id in album_ids:
            logger.warning("Dropping duplicate album id %s while loading", album.id)
            continue
        album_ids.add(album.id)

        kept: List[Photo] = []
        for raw, photo in zip(record.get("photos") or [], album.photos):
            stored_owner = raw.get("album_id", raw.get("albumId"))
            if stored_owner is not None and stored_owner != album.id:
                logger.warning(
                    "Photo %s claimed album %s but is stored in %s; re-owning",
                    photo.id,
                    stored_owner,
                    album.id,
                )
            if photo.id in photo_ids:
                logger.warning("Dropping duplicate photo id %s while loading", photo.id)
                continue
            photo_ids.add(photo.id)
            kept.append(photo)
        album.photos = kept
        albums.append(album)
    return albums


class AlbumStore:
    """Own the album/photo collection and commit every change durably."""

    def __init__(
        self,
        backend: StorageBackend | None = None,
        *,
        seed: SeedFactory | None = None,
    ) -> None:
        self._backend: StorageBackend = backend if backend is not None else MemoryBackend()
        self._seed = seed
        self._albums: List[Album] = []
        self._issued_ids: set[str] = set()
        self._loaded = False

    @classmethod
    def open(
        cls,
        path: Path | None = None,
        *,
        backups: bool = False,
        seed: SeedFactory | None = None,
    ) -> "AlbumStore":
        """Create a store backed by the JSON file at *path* and load it.

        Without *path* the document lives in the library directory, see
        :func:`iGallery.config.library_root`.
        """

        path = Path(path) if path is not None else store_path()
        backup_dir = path.parent / BACKUP_DIR_NAME if backups else None
        store = cls(JsonFileBackend(path, backup_dir=backup_dir), seed=seed)
        store.load()
        return store

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self) -> int:
        """(Re)read the collection from the backend and return the album count.

        A document that cannot be read or parsed never propagates: the store
        falls back to the seed collection (or an empty one) and logs why.
        """

        try:
            albums = decode_document(self._backend.read())
        except (PersistenceError, KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Unable to load album collection, starting fresh: %s", exc)
            albums = self._seed() if self._seed is not None else []

        self._albums = [album.copy() for album in albums]
        self._issued_ids = {album.id for album in self._albums}
        for album in self._albums:
            self._issued_ids.update(album.photo_ids())
        self._loaded = True
        logger.debug("Loaded %d album(s)", len(self._albums))
        return len(self._albums)

    def flush(self) -> None:
        """Rewrite the current collection through the backend."""

        self._ensure_loaded()
        self._commit(self._albums)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_albums(self) -> List[Album]:
        """Return every album in storage order."""

        self._ensure_loaded()
        return [album.copy() for album in self._albums]

    def get_album(self, album_id: str) -> Album:
        self._ensure_loaded()
        return self._find_album(self._albums, album_id).copy()

    def list_photos(self, album_id: str) -> List[Photo]:
        self._ensure_loaded()
        album = self._find_album(self._albums, album_id)
        return [photo.copy() for photo in album.photos]

    def get_photo(self, photo_id: str) -> Photo:
        self._ensure_loaded()
        for album in self._albums:
            photo = album.find_photo(photo_id)
            if photo is not None:
                return photo.copy()
        raise PhotoNotFoundError(photo_id)

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._albums)

    def __contains__(self, album_id: object) -> bool:
        self._ensure_loaded()
        return any(album.id == album_id for album in self._albums)

    # ------------------------------------------------------------------
    # Album mutations
    # ------------------------------------------------------------------
    def create_album(self, name: str) -> Album:
        """Append a new empty album named *name* and return it."""

        cleaned = _clean_name(name, what="Album name")
        self._ensure_loaded()
        album = Album(id=self._next_id("album"), name=cleaned, created_at=utc_now())
        working = self._working_copy()
        working.append(album)
        self._commit(working)
        logger.info("Created album %s (%s)", album.id, cleaned)
        return album.copy()

    def rename_album(self, album_id: str, name: str) -> Album:
        cleaned = _clean_name(name, what="Album name")
        self._ensure_loaded()
        working = self._working_copy()
        album = self._find_album(working, album_id)
        album.name = cleaned
        self._commit(working)
        return album.copy()

    def delete_album(self, album_id: str) -> bool:
        """Remove the album and every photo it owns.

        Returns ``False`` when no album with *album_id* exists, so repeated
        calls are harmless.
        """

        self._ensure_loaded()
        working = [album for album in self._working_copy() if album.id != album_id]
        if len(working) == len(self._albums):
            return False
        self._commit(working)
        logger.info("Deleted album %s", album_id)
        return True

    # ------------------------------------------------------------------
    # Photo mutations
    # ------------------------------------------------------------------
    def add_photo(
        self,
        album_id: str,
        name: str,
        image_ref: str,
        *,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> Photo:
        """Append a photo to *album_id* and return it."""

        if not isinstance(image_ref, str) or not image_ref:
            raise InvalidArgumentError("Photo image reference must be a non-empty string")
        if not isinstance(name, str):
            raise InvalidArgumentError("Photo name must be a string")
        self._ensure_loaded()
        working = self._working_copy()
        album = self._find_album(working, album_id)
        photo = Photo(
            id=self._next_id("photo"),
            name=name,
            image_ref=image_ref,
            album_id=album.id,
            created_at=utc_now(),
            width=width if width and width > 0 else None,
            height=height if height and height > 0 else None,
        )
        album.photos.append(photo)
        self._commit(working)
        return photo.copy()

    def delete_photos(self, album_id: str, photo_ids: Iterable[str]) -> bool:
        """Remove every listed photo from *album_id* in one commit.

        Ids that are not in the album are ignored; only a missing album is an
        error. Returns ``True`` once the request has been applied.
        """

        targets = set(photo_ids)
        self._ensure_loaded()
        working = self._working_copy()
        album = self._find_album(working, album_id)
        remaining = [photo for photo in album.photos if photo.id not in targets]
        removed = len(album.photos) - len(remaining)
        if removed:
            album.photos = remaining
            self._commit(working)
        logger.debug(
            "Deleted %d of %d requested photo(s) from %s", removed, len(targets), album_id
        )
        return True

    def move_photo(self, photo_id: str, from_album_id: str, to_album_id: str) -> Optional[Photo]:
        """Relocate a photo to another album in a single commit.

        The photo is re-created in the destination under a new id and removed
        from the source; observers see it in exactly one album before and
        after. Returns the new photo, or ``None`` when *photo_id* is not in
        the source album. Moving within the same album returns the photo
        unchanged.
        """

        self._ensure_loaded()
        working = self._working_copy()
        source = self._find_album(working, from_album_id)
        destination = self._find_album(working, to_album_id)
        photo = source.find_photo(photo_id)
        if photo is None:
            return None
        if source is destination:
            return photo.copy()

        moved = Photo(
            id=self._next_id("photo"),
            name=photo.name,
            image_ref=photo.image_ref,
            album_id=destination.id,
            created_at=utc_now(),
            width=photo.width,
            height=photo.height,
        )
        destination.photos.append(moved)
        source.photos = [item for item in source.photos if item.id != photo_id]
        self._commit(working)
        logger.debug("Moved photo %s from %s to %s as %s", photo_id, source.id, destination.id, moved.id)
        return moved.copy()

    def move_photos(
        self, photo_ids: Iterable[str], from_album_id: str, to_album_id: str
    ) -> List[Photo]:
        """Move several photos one at a time.

        Each individual move is atomic but the batch is not: when a move
        fails, the photos moved before it stay moved and the error
        propagates. Ids missing from the source are skipped.
        """

        moved: List[Photo] = []
        for photo_id in photo_ids:
            result = self.move_photo(photo_id, from_album_id, to_album_id)
            if result is not None:
                moved.append(result)
        return moved

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _working_copy(self) -> List[Album]:
        return [album.copy() for album in self._albums]

    @staticmethod
    def _find_album(albums: Sequence[Album], album_id: str) -> Album:
        for album in albums:
            if album.id == album_id:
                return album
        raise AlbumNotFoundError(album_id)

    def _next_id(self, prefix: str) -> str:
        identifier = new_id(prefix, self._issued_ids)
        self._issued_ids.add(identifier)
        return identifier

    def _commit(self, working: List[Album]) -> None:
        document = encode_document(working)
        try:
            self._backend.write(document)
        except GalleryError:
            raise
        except OSError as exc:
            logger.error("Failed to commit album collection: %s", exc)
            raise PersistenceError(f"Unable to persist albums: {exc}") from exc
        self._albums = working
        logger.debug("Committed %d album(s)", len(working))


__all__ = ["AlbumStore", "decode_document", "encode_document"]
