from __future__ import annotations

import pytest

from iGallery.errors import (
    AlbumNotFoundError,
    InvalidArgumentError,
    NotFoundError,
    PersistenceError,
    PhotoNotFoundError,
)
from iGallery.library.backends import MemoryBackend
from iGallery.library.store import AlbumStore


def _all_photo_ids(store: AlbumStore) -> list[str]:
    return [photo.id for album in store.list_albums() for photo in album.photos]


def test_create_album_appends_with_fresh_identity(store: AlbumStore) -> None:
    first = store.create_album("Trips")
    second = store.create_album("  Family  ")

    albums = store.list_albums()
    assert [album.id for album in albums] == [first.id, second.id]
    assert albums[1].name == "Family"
    assert first.id != second.id
    assert first.photos == []
    assert first.created_at.tzinfo is not None


@pytest.mark.parametrize("name", ["", "   ", "\n\t"])
def test_create_album_rejects_blank_names(store: AlbumStore, name: str) -> None:
    with pytest.raises(InvalidArgumentError):
        store.create_album(name)
    assert store.list_albums() == []


def test_album_names_need_not_be_unique(store: AlbumStore) -> None:
    store.create_album("Trips")
    store.create_album("Trips")
    assert [album.name for album in store.list_albums()] == ["Trips", "Trips"]


def test_album_count_tracks_creates_minus_successful_deletes(store: AlbumStore) -> None:
    created = [store.create_album(f"Album {index}") for index in range(5)]
    successful = 0
    for album in (created[0], created[3], created[0]):
        successful += int(store.delete_album(album.id))

    assert successful == 2
    assert len(store.list_albums()) == 5 - successful
    assert len(store) == 3


def test_delete_album_is_idempotent(store: AlbumStore) -> None:
    album = store.create_album("Trips")
    assert store.delete_album(album.id) is True
    assert store.delete_album(album.id) is False
    assert album.id not in store


def test_delete_album_cascades_to_its_photos(store: AlbumStore) -> None:
    trips = store.create_album("Trips")
    other = store.create_album("Other")
    owned = [store.add_photo(trips.id, f"p{index}.jpg", f"ref-{index}").id for index in range(3)]
    kept = store.add_photo(other.id, "keep.jpg", "ref-keep")

    store.delete_album(trips.id)

    remaining = _all_photo_ids(store)
    assert remaining == [kept.id]
    for photo_id in owned:
        with pytest.raises(PhotoNotFoundError):
            store.get_photo(photo_id)


def test_get_album_missing_raises_not_found(store: AlbumStore) -> None:
    with pytest.raises(AlbumNotFoundError) as excinfo:
        store.get_album("missing")
    assert isinstance(excinfo.value, NotFoundError)
    assert excinfo.value.album_id == "missing"


def test_rename_missing_album_leaves_collection_unchanged(store: AlbumStore) -> None:
    store.create_album("Trips")
    before = [album.to_dict() for album in store.list_albums()]

    with pytest.raises(NotFoundError):
        store.rename_album("x", "Renamed")

    assert [album.to_dict() for album in store.list_albums()] == before


def test_rename_album_replaces_name_in_place(store: AlbumStore) -> None:
    first = store.create_album("First")
    second = store.create_album("Second")

    renamed = store.rename_album(first.id, "Renamed")

    assert renamed.id == first.id
    assert [album.name for album in store.list_albums()] == ["Renamed", "Second"]
    assert store.get_album(second.id).name == "Second"


def test_rename_album_rejects_blank_name(store: AlbumStore) -> None:
    album = store.create_album("Trips")
    with pytest.raises(InvalidArgumentError):
        store.rename_album(album.id, "  ")
    assert store.get_album(album.id).name == "Trips"


def test_add_photo_appends_in_insertion_order(store: AlbumStore) -> None:
    album = store.create_album("Trips")
    photos = [store.add_photo(album.id, name, f"ref-{name}") for name in ("a", "b", "c")]

    snapshot = store.get_album(album.id)
    assert snapshot.photo_ids() == [photo.id for photo in photos]
    assert all(photo.album_id == album.id for photo in snapshot.photos)
    assert snapshot.cover is not None and snapshot.cover.id == photos[0].id
    assert snapshot.photo_count == 3


def test_add_photo_to_missing_album_raises(store: AlbumStore) -> None:
    with pytest.raises(AlbumNotFoundError):
        store.add_photo("missing", "a.jpg", "ref")


def test_add_photo_requires_image_reference(store: AlbumStore) -> None:
    album = store.create_album("Trips")
    with pytest.raises(InvalidArgumentError):
        store.add_photo(album.id, "a.jpg", "")


def test_snapshots_are_independent_of_the_store(store: AlbumStore) -> None:
    album = store.create_album("Trips")
    store.add_photo(album.id, "a.jpg", "ref-a")

    snapshot = store.list_albums()
    snapshot[0].name = "Mutated"
    snapshot[0].photos.clear()

    fresh = store.get_album(album.id)
    assert fresh.name == "Trips"
    assert fresh.photo_count == 1


def test_identities_stay_unique_under_rapid_creation(store: AlbumStore) -> None:
    album = store.create_album("Burst")
    ids = {store.add_photo(album.id, f"{index}.jpg", "ref").id for index in range(500)}
    assert len(ids) == 500
    assert album.id not in ids


def test_delete_photos_ignores_unknown_ids(store: AlbumStore) -> None:
    album = store.create_album("Trips")
    p1 = store.add_photo(album.id, "p1.jpg", "ref-1")
    p2 = store.add_photo(album.id, "p2.jpg", "ref-2")
    p3 = store.add_photo(album.id, "p3.jpg", "ref-3")

    assert store.delete_photos(album.id, [p1.id, "ghost", p3.id, "photo-unknown"]) is True

    assert store.get_album(album.id).photo_ids() == [p2.id]


def test_delete_photos_missing_album_raises(store: AlbumStore) -> None:
    with pytest.raises(AlbumNotFoundError):
        store.delete_photos("missing", ["a"])


def test_delete_photos_only_touches_the_named_album(store: AlbumStore) -> None:
    first = store.create_album("First")
    second = store.create_album("Second")
    foreign = store.add_photo(second.id, "x.jpg", "ref-x")

    store.delete_photos(first.id, [foreign.id])

    assert store.get_album(second.id).photo_ids() == [foreign.id]


def test_move_photo_relocates_under_new_identity(store: AlbumStore) -> None:
    source = store.create_album("A")
    target = store.create_album("B")
    photo = store.add_photo(source.id, "p.jpg", "ref-p", width=40, height=30)

    moved = store.move_photo(photo.id, source.id, target.id)

    assert moved is not None
    assert moved.id != photo.id
    assert (moved.name, moved.image_ref) == (photo.name, photo.image_ref)
    assert (moved.width, moved.height) == (40, 30)
    assert moved.album_id == target.id
    assert store.get_album(source.id).photos == []
    assert store.get_album(target.id).photo_ids() == [moved.id]


def test_move_there_and_back_restores_photo(store: AlbumStore) -> None:
    album_a = store.create_album("A")
    album_b = store.create_album("B")
    photo = store.add_photo(album_a.id, "p.jpg", "ref-p")

    moved = store.move_photo(photo.id, album_a.id, album_b.id)
    assert moved is not None
    # Never visible in both albums at once.
    assert _all_photo_ids(store).count(moved.id) == 1
    assert photo.id not in _all_photo_ids(store)

    restored = store.move_photo(moved.id, album_b.id, album_a.id)

    assert restored is not None
    in_a = [(item.name, item.image_ref) for item in store.get_album(album_a.id).photos]
    assert in_a == [("p.jpg", "ref-p")]
    assert store.get_album(album_b.id).photos == []


def test_move_photo_not_in_source_returns_none(store: AlbumStore) -> None:
    album_a = store.create_album("A")
    album_b = store.create_album("B")
    elsewhere = store.add_photo(album_b.id, "p.jpg", "ref")

    assert store.move_photo(elsewhere.id, album_a.id, album_b.id) is None
    assert store.get_album(album_b.id).photo_ids() == [elsewhere.id]


def test_move_photo_missing_album_raises(store: AlbumStore) -> None:
    album = store.create_album("A")
    photo = store.add_photo(album.id, "p.jpg", "ref")
    with pytest.raises(AlbumNotFoundError):
        store.move_photo(photo.id, album.id, "missing")
    assert store.get_album(album.id).photo_ids() == [photo.id]


def test_move_within_same_album_is_a_no_op(store: AlbumStore) -> None:
    album = store.create_album("A")
    photo = store.add_photo(album.id, "p.jpg", "ref")

    result = store.move_photo(photo.id, album.id, album.id)

    assert result is not None and result.id == photo.id
    assert store.get_album(album.id).photo_ids() == [photo.id]


class _FailAfterBackend(MemoryBackend):
    """Accepts ``limit`` writes and fails every write after that."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self._limit = limit

    def write(self, document) -> None:
        if self.write_count >= self._limit:
            raise PersistenceError("quota exceeded")
        super().write(document)


def test_failed_commit_leaves_state_unchanged() -> None:
    backend = _FailAfterBackend(limit=2)
    store = AlbumStore(backend)
    album = store.create_album("Trips")
    photo = store.add_photo(album.id, "p.jpg", "ref")

    with pytest.raises(PersistenceError):
        store.rename_album(album.id, "Renamed")
    with pytest.raises(PersistenceError):
        store.delete_album(album.id)

    snapshot = store.get_album(album.id)
    assert snapshot.name == "Trips"
    assert snapshot.photo_ids() == [photo.id]


def test_batch_move_is_not_atomic() -> None:
    backend = _FailAfterBackend(limit=6)
    store = AlbumStore(backend)
    source = store.create_album("A")
    target = store.create_album("B")
    photos = [store.add_photo(source.id, f"{name}.jpg", name) for name in ("p1", "p2", "p3")]

    # Writes so far: 2 albums + 3 photos; the first move is the sixth write.
    with pytest.raises(PersistenceError):
        store.move_photos([photo.id for photo in photos], source.id, target.id)

    assert store.get_album(source.id).photo_ids() == [photos[1].id, photos[2].id]
    assert [item.name for item in store.get_album(target.id).photos] == ["p1.jpg"]


def test_operations_load_lazily_from_backend() -> None:
    backend = MemoryBackend()
    writer = AlbumStore(backend)
    album = writer.create_album("Trips")

    reader = AlbumStore(backend)
    assert reader.is_loaded is False
    assert reader.get_album(album.id).name == "Trips"
    assert reader.is_loaded is True
