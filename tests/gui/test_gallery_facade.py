from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for facade tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtCore", reason="QtCore not available", exc_type=ImportError)

from iGallery.core.layout import LayoutConfig, LayoutKind
from iGallery.errors import AlbumNotFoundError, InvalidArgumentError
from iGallery.gui.facade import GalleryFacade
from iGallery.library.store import AlbumStore
from iGallery.settings import Settings


@pytest.fixture
def facade(store: AlbumStore) -> GalleryFacade:
    return GalleryFacade(store)


def test_open_album_lays_out_its_photos(facade: GalleryFacade, store: AlbumStore) -> None:
    album = facade.create_album("Trips")
    for name in ("a", "b", "c"):
        store.add_photo(album.id, name, f"ref-{name}")

    opened: list[str] = []
    facade.albumOpened.connect(opened.append)
    facade.open_album(album.id)

    assert opened == [album.id]
    assert facade.arrangement().photo_ids() == store.get_album(album.id).photo_ids()
    assert facade.selection.album_id() == album.id


def test_open_missing_album_raises(facade: GalleryFacade) -> None:
    with pytest.raises(AlbumNotFoundError):
        facade.open_album("missing")


def test_add_photo_refreshes_arrangement(facade: GalleryFacade) -> None:
    album = facade.create_album("Trips")
    facade.open_album(album.id)
    layouts: list[bool] = []
    facade.layoutChanged.connect(lambda: layouts.append(True))

    photo = facade.add_photo("p.jpg", "ref", width=4, height=3)

    assert facade.arrangement().photo_ids() == [photo.id]
    assert layouts


def test_add_photo_requires_open_album(facade: GalleryFacade) -> None:
    with pytest.raises(InvalidArgumentError):
        facade.add_photo("p.jpg", "ref")


def test_delete_selected_updates_arrangement_and_selection(facade: GalleryFacade) -> None:
    album = facade.create_album("Trips")
    facade.open_album(album.id)
    p1 = facade.add_photo("P1", "r1")
    p2 = facade.add_photo("P2", "r2")
    p3 = facade.add_photo("P3", "r3")

    facade.selection.enter_selection_mode()
    facade.selection.toggle_selection(p1.id)
    facade.selection.toggle_selection(p3.id)
    facade.delete_selected()

    assert facade.arrangement().photo_ids() == [p2.id]
    assert facade.selection.selected_ids() == set()
    assert facade.selection.is_active() is False


def test_move_selected_updates_both_albums(facade: GalleryFacade, store: AlbumStore) -> None:
    source = facade.create_album("Source")
    target = facade.create_album("Target")
    facade.open_album(source.id)
    p1 = facade.add_photo("P1", "r1")
    p2 = facade.add_photo("P2", "r2")

    facade.selection.enter_selection_mode()
    facade.selection.toggle_selection(p1.id)
    facade.move_selected(target.id)

    assert facade.arrangement().photo_ids() == [p2.id]
    assert [photo.name for photo in store.get_album(target.id).photos] == ["P1"]


def test_deleting_open_album_closes_gallery(facade: GalleryFacade) -> None:
    album = facade.create_album("Trips")
    facade.open_album(album.id)
    photo = facade.add_photo("p.jpg", "ref")
    facade.selection.open_viewer(photo, 0)
    closed: list[bool] = []
    facade.albumClosed.connect(lambda: closed.append(True))

    assert facade.delete_album(album.id) is True

    assert closed == [True]
    assert facade.current_album_id() is None
    assert facade.arrangement().cells == ()
    assert facade.selection.is_viewer_open() is False
    assert facade.delete_album(album.id) is False


def test_changing_layout_keeps_order_and_persists(tmp_path: Path, store: AlbumStore) -> None:
    settings = Settings(tmp_path / "settings.json")
    facade = GalleryFacade(store, settings)
    album = facade.create_album("Trips")
    facade.open_album(album.id)
    ids = [facade.add_photo(f"P{index}", f"r{index}").id for index in range(5)]

    for kind in LayoutKind:
        facade.set_layout_config(layout_kind=kind)
        assert facade.arrangement().kind is kind
        assert facade.arrangement().photo_ids() == ids

    facade.set_viewport_width(700)
    restored = GalleryFacade(store, Settings(tmp_path / "settings.json"))
    assert restored.layout_config().layout_kind is LayoutKind.FILMSTRIP
    # Viewport width is runtime geometry and is not persisted.
    assert restored.layout_config().viewport_width == LayoutConfig().viewport_width


def test_invalid_layout_change_keeps_previous_config(facade: GalleryFacade) -> None:
    before = facade.layout_config()
    with pytest.raises(InvalidArgumentError):
        facade.set_layout_config(layout_kind="spiral")
    assert facade.layout_config() == before


def test_too_narrow_layout_change_leaves_state_and_settings_alone(tmp_path: Path, store: AlbumStore) -> None:
    settings = Settings(tmp_path / "settings.json")
    facade = GalleryFacade(store, settings)
    album = facade.create_album("Trips")
    facade.open_album(album.id)
    facade.add_photo("P0", "r0", width=4, height=3)
    facade.set_layout_config(layout_kind=LayoutKind.GRID)
    before = facade.layout_config()
    arrangement = facade.arrangement()
    stored = settings.get("ui.layout")

    with pytest.raises(InvalidArgumentError):
        facade.set_layout_config(gap_x=before.viewport_width * 2)
    with pytest.raises(InvalidArgumentError):
        facade.set_viewport_width(before.gap_x / 2)

    assert facade.layout_config() == before
    assert facade.arrangement() == arrangement
    assert Settings(tmp_path / "settings.json").get("ui.layout") == stored


def test_bad_stored_layout_falls_back_to_defaults(store: AlbumStore) -> None:
    settings = Settings()
    settings.set("ui.layout", {"layout_kind": "spiral", "gap_x": -4})

    facade = GalleryFacade(store, settings)

    assert facade.layout_config() == LayoutConfig()


def test_restore_last_album(store: AlbumStore) -> None:
    settings = Settings()
    first = GalleryFacade(store, settings)
    album = first.create_album("Trips")
    first.open_album(album.id)

    second = GalleryFacade(store, settings)
    restored = second.restore_last_album()

    assert restored is not None and restored.id == album.id
    store.delete_album(album.id)
    assert GalleryFacade(store, settings).restore_last_album() is None
    assert settings.get("ui.last_album") is None
