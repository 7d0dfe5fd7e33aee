"""Photo record owned by exactly one album."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..utils.ids import format_timestamp, parse_timestamp


def _optional_dimension(value: object) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


@dataclass(slots=True)
class Photo:
    """A single image reference plus display metadata."""

    id: str
    name: str
    image_ref: str
    album_id: str
    created_at: datetime
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def aspect_ratio(self) -> Optional[float]:
        """Return ``width / height`` when the intrinsic size is known."""

        if self.width and self.height:
            return self.width / self.height
        return None

    def copy(self) -> "Photo":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "image_ref": self.image_ref,
            "album_id": self.album_id,
            "created_at": format_timestamp(self.created_at),
        }
        if self.width is not None and self.height is not None:
            payload["width"] = self.width
            payload["height"] = self.height
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, album_id: str) -> "Photo":
        """Build a photo from its persisted form.

        Legacy documents use ``url``/``albumId``/``createdAt``; both spellings
        are accepted. Raises ``KeyError``, ``TypeError`` or ``ValueError`` for
        records that cannot be interpreted.
        """

        photo_id = data["id"]
        if not isinstance(photo_id, str) or not photo_id:
            raise ValueError(f"Invalid photo id: {photo_id!r}")
        image_ref = data.get("image_ref", data.get("url"))
        if not isinstance(image_ref, str):
            raise ValueError(f"Photo {photo_id} has no image reference")
        created_raw = data.get("created_at", data.get("createdAt"))
        return cls(
            id=photo_id,
            name=str(data.get("name", "")),
            image_ref=image_ref,
            album_id=album_id,
            created_at=parse_timestamp(created_raw),
            width=_optional_dimension(data.get("width")),
            height=_optional_dimension(data.get("height")),
        )
