"""Gallery layout engine: photo list plus configuration to positioned cells."""

from .config import (
    AspectRatio,
    HoverEffect,
    LayoutConfig,
    LayoutKind,
    PhotoSize,
    columns_for_width,
)
from .engine import compute_layout
from .geometry import Arrangement, LayoutCell

__all__ = [
    "AspectRatio",
    "Arrangement",
    "HoverEffect",
    "LayoutCell",
    "LayoutConfig",
    "LayoutKind",
    "PhotoSize",
    "columns_for_width",
    "compute_layout",
]
