"""Controller dedicated to multi-selection mode and viewer position."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from PySide6.QtCore import QObject, Signal

from ....errors import AlbumNotFoundError, InvalidArgumentError
from ....library.store import AlbumStore
from ....models.photo import Photo

logger = logging.getLogger(__name__)

_DIRECTIONS = {"prev": -1, "next": 1}


class SelectionController(QObject):
    """Track the selection set and the viewed photo for the bound album.

    The controller only ever holds snapshots of the album's photo list. After
    each bulk mutation it re-reads the album from the store and reconciles
    its state so that no selected id or viewer reference outlives the photo
    it points to.
    """

    selectionModeChanged = Signal(bool)
    selectionChanged = Signal()
    viewerChanged = Signal()
    refreshRequested = Signal()

    def __init__(self, store: AlbumStore, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._store = store
        self._album_id: Optional[str] = None
        self._photos: List[Photo] = []
        self._active = False
        self._selected: set[str] = set()
        self._viewer_photo_id: Optional[str] = None
        self._viewer_index = 0

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    def is_active(self) -> bool:
        """Return ``True`` when multi-selection mode is currently enabled."""

        return self._active

    def album_id(self) -> Optional[str]:
        return self._album_id

    def photos(self) -> List[Photo]:
        return list(self._photos)

    def selected_ids(self) -> set[str]:
        return set(self._selected)

    def selection_count(self) -> int:
        return len(self._selected)

    def is_selected(self, photo_id: str) -> bool:
        return photo_id in self._selected

    def viewer_photo_id(self) -> Optional[str]:
        return self._viewer_photo_id

    def viewer_index(self) -> int:
        return self._viewer_index

    def is_viewer_open(self) -> bool:
        return self._viewer_photo_id is not None

    def viewer_photo(self) -> Optional[Photo]:
        if self._viewer_photo_id is None:
            return None
        return self._photos[self._viewer_index]

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------
    def bind_album(self, album_id: Optional[str], photos: Sequence[Photo] = ()) -> None:
        """Switch to another album, dropping any selection and closing the viewer."""

        self.exit_selection_mode()
        self.close_viewer()
        self._album_id = album_id
        self._photos = list(photos)

    # ------------------------------------------------------------------
    # Selection mode
    # ------------------------------------------------------------------
    def enter_selection_mode(self) -> None:
        if self._active:
            return
        self.close_viewer()
        self._active = True
        self.selectionModeChanged.emit(True)

    def exit_selection_mode(self) -> None:
        """Leave selection mode; the selection is cleared even if already inactive."""

        self._clear_selection()
        if not self._active:
            return
        self._active = False
        self.selectionModeChanged.emit(False)

    def set_selection_mode(self, enabled: bool) -> None:
        if enabled:
            self.enter_selection_mode()
        else:
            self.exit_selection_mode()

    def toggle_selection(self, photo_id: str) -> bool:
        """Flip membership of *photo_id*; returns ``False`` when ignored.

        Toggling outside selection mode, or toggling an id that is not in the
        current photo list, is tolerated as a no-op.
        """

        if not self._active:
            logger.debug("Ignoring toggle of %s outside selection mode", photo_id)
            return False
        if not any(photo.id == photo_id for photo in self._photos):
            return False
        if photo_id in self._selected:
            self._selected.discard(photo_id)
        else:
            self._selected.add(photo_id)
        self.selectionChanged.emit()
        return True

    def select_all(self) -> None:
        if not self._active:
            return
        everything = {photo.id for photo in self._photos}
        if everything == self._selected:
            return
        self._selected = everything
        self.selectionChanged.emit()

    # ------------------------------------------------------------------
    # Viewer
    # ------------------------------------------------------------------
    def open_viewer(self, photo: Photo, index: int) -> bool:
        """Show *photo* in the viewer; ignored while selection mode is active.

        When *index* does not point at *photo* (the list changed since the
        caller read it) the photo's current position is used instead.
        """

        if self._active:
            return False
        position = index
        if not 0 <= position < len(self._photos) or self._photos[position].id != photo.id:
            position = self._index_of(photo.id)
            if position is None:
                return False
        self._viewer_photo_id = photo.id
        self._viewer_index = position
        self.viewerChanged.emit()
        return True

    def close_viewer(self) -> None:
        if self._viewer_photo_id is None:
            return
        self._viewer_photo_id = None
        self._viewer_index = 0
        self.viewerChanged.emit()

    def navigate_viewer(self, direction: str) -> Optional[int]:
        """Step the viewer to the previous or next photo, wrapping around.

        Returns the new index, or ``None`` when the viewer is closed or the
        list is empty.
        """

        step = _DIRECTIONS.get(direction)
        if step is None:
            raise InvalidArgumentError(f"Unknown viewer direction {direction!r}")
        length = len(self._photos)
        if length == 0 or self._viewer_photo_id is None:
            return None
        self._viewer_index = (self._viewer_index + step + length) % length
        self._viewer_photo_id = self._photos[self._viewer_index].id
        self.viewerChanged.emit()
        return self._viewer_index

    # ------------------------------------------------------------------
    # Bulk mutations
    # ------------------------------------------------------------------
    def commit_delete_selected(self) -> bool:
        """Delete the selected photos, then leave selection mode."""

        album_id = self._require_album()
        targets = self._ordered_selection()
        result = True
        if targets:
            result = self._store.delete_photos(album_id, targets)
            logger.info("Deleted %d selected photo(s) from %s", len(targets), album_id)
        self.exit_selection_mode()
        self._refresh_from_store()
        return result

    def commit_move_selected(self, target_album_id: str) -> List[Photo]:
        """Move the selected photos into *target_album_id*, one by one.

        The batch is not atomic. If a move fails, the photos moved before it
        stay in the target album; the controller still reconciles against
        the store and then re-raises, leaving the unmoved photos selected.
        """

        album_id = self._require_album()
        targets = self._ordered_selection()
        try:
            moved = self._store.move_photos(targets, album_id, target_album_id)
        except Exception:
            logger.warning("Moving selection from %s to %s stopped early", album_id, target_album_id)
            self._refresh_from_store()
            raise
        logger.info("Moved %d photo(s) from %s to %s", len(moved), album_id, target_album_id)
        self.exit_selection_mode()
        self._refresh_from_store()
        return moved

    def commit_delete_all(self) -> bool:
        """Delete every photo in the bound album."""

        album_id = self._require_album()
        everything = [photo.id for photo in self._store.list_photos(album_id)]
        result = self._store.delete_photos(album_id, everything)
        logger.info("Deleted all %d photo(s) from %s", len(everything), album_id)
        self.exit_selection_mode()
        self._refresh_from_store()
        return result

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------
    def reconcile(self, photos: Iterable[Photo]) -> None:
        """Adopt *photos* as the current list and repair dangling references.

        Selected ids that vanished are dropped. The viewer follows its photo
        to a new index; if the photo itself vanished the viewer shows the
        photo that now occupies its slot (clamped to the last one), or closes
        when the list is empty.
        """

        self._photos = list(photos)
        present = [photo.id for photo in self._photos]
        present_set = set(present)

        stale = self._selected - present_set
        if stale:
            self._selected -= stale
            self.selectionChanged.emit()

        if self._viewer_photo_id is None:
            return
        previous = (self._viewer_photo_id, self._viewer_index)
        if self._viewer_photo_id in present_set:
            self._viewer_index = present.index(self._viewer_photo_id)
        elif not present:
            self.close_viewer()
            return
        else:
            self._viewer_index = min(self._viewer_index, len(present) - 1)
            self._viewer_photo_id = present[self._viewer_index]
        if previous != (self._viewer_photo_id, self._viewer_index):
            self.viewerChanged.emit()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_album(self) -> str:
        if self._album_id is None:
            raise InvalidArgumentError("No album is bound to the selection controller")
        return self._album_id

    def _ordered_selection(self) -> List[str]:
        # Album order keeps batch moves deterministic; ids the snapshot no
        # longer knows are passed through for the store to ignore.
        ordered = [photo.id for photo in self._photos if photo.id in self._selected]
        return ordered + sorted(self._selected.difference(ordered))

    def _index_of(self, photo_id: str) -> Optional[int]:
        for position, photo in enumerate(self._photos):
            if photo.id == photo_id:
                return position
        return None

    def _clear_selection(self) -> None:
        if not self._selected:
            return
        self._selected.clear()
        self.selectionChanged.emit()

    def _refresh_from_store(self) -> None:
        album_id = self._album_id
        try:
            photos = self._store.list_photos(album_id) if album_id is not None else []
        except AlbumNotFoundError:
            logger.info("Album %s disappeared; clearing gallery state", album_id)
            photos = []
        self.reconcile(photos)
        self.refreshRequested.emit()


__all__ = ["SelectionController"]
