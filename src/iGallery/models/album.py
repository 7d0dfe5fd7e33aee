"""Album record: a named, ordered container of photos."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..utils.ids import format_timestamp, parse_timestamp
from .photo import Photo


@dataclass(slots=True)
class Album:
    """Represents an album together with the photos it owns."""

    id: str
    name: str
    created_at: datetime
    photos: List[Photo] = field(default_factory=list)

    @property
    def photo_count(self) -> int:
        return len(self.photos)

    @property
    def cover(self) -> Optional[Photo]:
        """Return the photo shown on the album card (the first one)."""

        return self.photos[0] if self.photos else None

    def photo_ids(self) -> List[str]:
        return [photo.id for photo in self.photos]

    def find_photo(self, photo_id: str) -> Optional[Photo]:
        for photo in self.photos:
            if photo.id == photo_id:
                return photo
        return None

    def copy(self) -> "Album":
        """Return a deep copy that shares nothing mutable with ``self``."""

        return Album(
            id=self.id,
            name=self.name,
            created_at=self.created_at,
            photos=[photo.copy() for photo in self.photos],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": format_timestamp(self.created_at),
            "photos": [photo.to_dict() for photo in self.photos],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Album":
        album_id = data["id"]
        if not isinstance(album_id, str) or not album_id:
            raise ValueError(f"Invalid album id: {album_id!r}")
        photos_raw = data.get("photos") or []
        if not isinstance(photos_raw, list):
            raise TypeError(f"Album {album_id} photos must be a list")
        created_raw = data.get("created_at", data.get("createdAt"))
        return cls(
            id=album_id,
            name=str(data.get("name", "")),
            created_at=parse_timestamp(created_raw),
            photos=[Photo.from_dict(item, album_id=album_id) for item in photos_raw],
        )
