"""Configuration accepted by the gallery layout engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from ...config import COLUMN_BREAKPOINTS, DEFAULT_VIEWPORT_WIDTH, ROWS_PER_LINE
from ...errors import InvalidArgumentError


class LayoutKind(str, Enum):
    MASONRY = "masonry"
    GRID = "grid"
    CARDS = "cards"
    ROWS = "rows"
    FILMSTRIP = "filmstrip"


class PhotoSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class AspectRatio(str, Enum):
    ORIGINAL = "original"
    SQUARE = "square"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @property
    def ratio(self) -> Optional[float]:
        """Width over height forced by this option, ``None`` for original."""

        return _ASPECT_RATIOS[self]


class HoverEffect(str, Enum):
    ZOOM = "zoom"
    INFO = "info"
    NONE = "none"


_ASPECT_RATIOS: Dict[AspectRatio, Optional[float]] = {
    AspectRatio.ORIGINAL: None,
    AspectRatio.SQUARE: 1.0,
    AspectRatio.PORTRAIT: 3.0 / 4.0,
    AspectRatio.LANDSCAPE: 4.0 / 3.0,
}

_E = TypeVar("_E", bound=Enum)

# camelCase spellings accepted by :meth:`LayoutConfig.from_mapping`.
_ALIASES = {
    "layoutKind": "layout_kind",
    "gapX": "gap_x",
    "gapY": "gap_y",
    "photoSize": "photo_size",
    "aspectRatio": "aspect_ratio",
    "hoverEffect": "hover_effect",
    "viewportWidth": "viewport_width",
}


def _coerce_enum(enum_type: Type[_E], value: object, field_name: str) -> _E:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise InvalidArgumentError(
            f"Invalid {field_name} {value!r}; expected one of: {allowed}"
        ) from None


def _coerce_number(value: object, field_name: str, *, minimum: float, inclusive: bool) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{field_name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidArgumentError(f"{field_name} must be finite, got {value!r}")
    if number < minimum or (not inclusive and number == minimum):
        bound = ">=" if inclusive else ">"
        raise InvalidArgumentError(f"{field_name} must be {bound} {minimum:g}, got {value!r}")
    return number


def columns_for_width(viewport_width: float) -> int:
    """Return the column count used at *viewport_width* (responsive breakpoints)."""

    for min_width, columns in COLUMN_BREAKPOINTS:
        if viewport_width >= min_width:
            return columns
    return 1


@dataclass(frozen=True)
class LayoutConfig:
    """Immutable description of how a photo list should be arranged.

    ``columns`` of ``None`` derives the column count from ``viewport_width``.
    Every field is validated on construction; invalid values raise
    :class:`InvalidArgumentError`.
    """

    layout_kind: LayoutKind = LayoutKind.MASONRY
    gap_x: float = 16.0
    gap_y: float = 16.0
    photo_size: PhotoSize = PhotoSize.MEDIUM
    aspect_ratio: AspectRatio = AspectRatio.ORIGINAL
    hover_effect: HoverEffect = HoverEffect.ZOOM
    viewport_width: float = float(DEFAULT_VIEWPORT_WIDTH)
    columns: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "layout_kind", _coerce_enum(LayoutKind, self.layout_kind, "layout_kind"))
        object.__setattr__(self, "photo_size", _coerce_enum(PhotoSize, self.photo_size, "photo_size"))
        object.__setattr__(
            self, "aspect_ratio", _coerce_enum(AspectRatio, self.aspect_ratio, "aspect_ratio")
        )
        object.__setattr__(
            self, "hover_effect", _coerce_enum(HoverEffect, self.hover_effect, "hover_effect")
        )
        object.__setattr__(self, "gap_x", _coerce_number(self.gap_x, "gap_x", minimum=0, inclusive=True))
        object.__setattr__(self, "gap_y", _coerce_number(self.gap_y, "gap_y", minimum=0, inclusive=True))
        object.__setattr__(
            self,
            "viewport_width",
            _coerce_number(self.viewport_width, "viewport_width", minimum=0, inclusive=False),
        )
        if self.columns is not None:
            if isinstance(self.columns, bool) or not isinstance(self.columns, int) or self.columns < 1:
                raise InvalidArgumentError(f"columns must be a positive integer, got {self.columns!r}")
        # Rows always use two columns, so every kind must fit at least that many.
        widest = max(self.resolved_columns(), ROWS_PER_LINE)
        if self.viewport_width - self.gap_x * (widest - 1) <= 0:
            raise InvalidArgumentError(
                f"viewport_width {self.viewport_width:g} is too narrow for "
                f"{widest} column(s) with gap_x {self.gap_x:g}"
            )

    def resolved_columns(self) -> int:
        if self.columns is not None:
            return self.columns
        return columns_for_width(self.viewport_width)

    def with_changes(self, **changes: Any) -> "LayoutConfig":
        return replace(self, **changes)

    def to_mapping(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            data[item.name] = value.value if isinstance(value, Enum) else value
        return data

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LayoutConfig":
        """Build a config from a plain mapping, ignoring unknown keys."""

        known = {item.name for item in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)


__all__ = [
    "LayoutKind",
    "PhotoSize",
    "AspectRatio",
    "HoverEffect",
    "LayoutConfig",
    "columns_for_width",
]
