"""Facade tying the album store, layout engine and selection controller together.

Every mutation follows the same flow: the store commits and returns fresh
state, the layout engine recomputes the arrangement from the refreshed photo
list, and the selection controller reconciles against that list.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional

from PySide6.QtCore import QObject, Signal

from ..core.layout import Arrangement, LayoutConfig, compute_layout
from ..errors import AlbumNotFoundError, InvalidArgumentError
from ..library import importer
from ..library.store import AlbumStore
from ..models.album import Album
from ..models.photo import Photo
from ..settings import Settings
from ..utils.logging import get_logger
from .ui.controllers.selection_controller import SelectionController

logger = logging.getLogger(__name__)

# Runtime geometry reported by the view; never persisted.
_TRANSIENT_LAYOUT_KEYS = ("viewport_width",)


class GalleryFacade(QObject):
    """Expose album operations and the current gallery arrangement to the UI."""

    albumsChanged = Signal()
    albumOpened = Signal(str)
    albumClosed = Signal()
    layoutChanged = Signal()

    def __init__(
        self,
        store: AlbumStore,
        settings: Optional[Settings] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        get_logger()
        self._store = store
        self._settings = settings if settings is not None else Settings()
        self._album_id: Optional[str] = None
        self._photos: List[Photo] = []
        self._layout_config = self._restore_layout_config()
        self._arrangement = compute_layout([], self._layout_config)

        self.selection = SelectionController(store, self)
        self.selection.refreshRequested.connect(self.refresh)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def store(self) -> AlbumStore:
        return self._store

    def current_album_id(self) -> Optional[str]:
        return self._album_id

    def photos(self) -> List[Photo]:
        return list(self._photos)

    def arrangement(self) -> Arrangement:
        return self._arrangement

    def layout_config(self) -> LayoutConfig:
        return self._layout_config

    def list_albums(self) -> List[Album]:
        return self._store.list_albums()

    # ------------------------------------------------------------------
    # Album operations
    # ------------------------------------------------------------------
    def create_album(self, name: str) -> Album:
        album = self._store.create_album(name)
        self.albumsChanged.emit()
        return album

    def rename_album(self, album_id: str, name: str) -> Album:
        album = self._store.rename_album(album_id, name)
        self.albumsChanged.emit()
        return album

    def delete_album(self, album_id: str) -> bool:
        removed = self._store.delete_album(album_id)
        if not removed:
            return False
        if album_id == self._album_id:
            self.close_album()
        if self._settings.get("ui.last_album") == album_id:
            self._settings.set("ui.last_album", None)
        self.albumsChanged.emit()
        return True

    def open_album(self, album_id: str) -> Album:
        """Make *album_id* the gallery's current album.

        Raises :class:`AlbumNotFoundError` when the album does not exist.
        """

        album = self._store.get_album(album_id)
        self._album_id = album.id
        self.selection.bind_album(album.id, album.photos)
        if self._settings.get("ui.last_album") != album.id:
            self._settings.set("ui.last_album", album.id)
        self._apply_photos(album.photos)
        self.albumOpened.emit(album.id)
        return album

    def restore_last_album(self) -> Optional[Album]:
        album_id = self._settings.get("ui.last_album")
        if not album_id:
            return None
        try:
            return self.open_album(album_id)
        except AlbumNotFoundError:
            logger.info("Last opened album %s no longer exists", album_id)
            self._settings.set("ui.last_album", None)
            return None

    def close_album(self) -> None:
        if self._album_id is None:
            return
        self._album_id = None
        self.selection.bind_album(None)
        self._apply_photos([])
        self.albumClosed.emit()

    # ------------------------------------------------------------------
    # Photo operations on the current album
    # ------------------------------------------------------------------
    def add_photo(
        self,
        name: str,
        image_ref: str,
        *,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> Photo:
        photo = self._store.add_photo(
            self._require_album(), name, image_ref, width=width, height=height
        )
        self.refresh()
        self.albumsChanged.emit()
        return photo

    def import_files(self, paths: Iterable[Path]) -> List[Photo]:
        imported = importer.import_files(self._store, self._require_album(), paths)
        if imported:
            self.refresh()
            self.albumsChanged.emit()
        return imported

    def delete_selected(self) -> bool:
        result = self.selection.commit_delete_selected()
        self.albumsChanged.emit()
        return result

    def move_selected(self, target_album_id: str) -> List[Photo]:
        try:
            return self.selection.commit_move_selected(target_album_id)
        finally:
            self.albumsChanged.emit()

    def delete_all(self) -> bool:
        result = self.selection.commit_delete_all()
        self.albumsChanged.emit()
        return result

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def set_layout_config(self, config: Optional[LayoutConfig] = None, **changes: Any) -> LayoutConfig:
        """Replace the layout configuration (or tweak fields) and re-arrange.

        Invalid values raise :class:`InvalidArgumentError` and leave the
        current configuration in place.
        """

        base = config if config is not None else self._layout_config
        updated = base.with_changes(**changes) if changes else base
        if updated == self._layout_config:
            return updated
        self._apply_layout_config(updated)
        self._persist_layout_config()
        return updated

    def set_viewport_width(self, width: float) -> None:
        if width == self._layout_config.viewport_width:
            return
        self._apply_layout_config(self._layout_config.with_changes(viewport_width=width))

    def refresh(self) -> None:
        """Re-read the current album and rebuild the arrangement."""

        if self._album_id is None:
            self._apply_photos([])
            return
        try:
            photos = self._store.list_photos(self._album_id)
        except AlbumNotFoundError:
            logger.info("Current album %s was removed", self._album_id)
            self.close_album()
            return
        self._apply_photos(photos)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_album(self) -> str:
        if self._album_id is None:
            raise InvalidArgumentError("No album is open")
        return self._album_id

    def _apply_photos(self, photos: Iterable[Photo]) -> None:
        self._photos = list(photos)
        self._relayout()
        self.selection.reconcile(self._photos)

    def _relayout(self) -> None:
        self._arrangement = compute_layout(self._photos, self._layout_config)
        self.layoutChanged.emit()

    def _apply_layout_config(self, config: LayoutConfig) -> None:
        # Arrange first so a failure leaves the previous state untouched.
        arrangement = compute_layout(self._photos, config)
        self._layout_config = config
        self._arrangement = arrangement
        self.layoutChanged.emit()

    def _restore_layout_config(self) -> LayoutConfig:
        stored = self._settings.get("ui.layout", {})
        if not isinstance(stored, dict):
            stored = {}
        values = {key: value for key, value in stored.items() if key not in _TRANSIENT_LAYOUT_KEYS}
        try:
            return LayoutConfig.from_mapping(values)
        except (InvalidArgumentError, TypeError) as exc:
            logger.warning("Ignoring invalid stored layout preferences: %s", exc)
            return LayoutConfig()

    def _persist_layout_config(self) -> None:
        values = self._layout_config.to_mapping()
        for key in _TRANSIENT_LAYOUT_KEYS:
            values.pop(key, None)
        if self._settings.get("ui.layout") != values:
            self._settings.set("ui.layout", values)


__all__ = ["GalleryFacade"]
