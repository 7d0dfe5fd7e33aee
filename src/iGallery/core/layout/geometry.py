"""Output records produced by the layout engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .config import HoverEffect, LayoutKind


@dataclass(frozen=True)
class LayoutCell:
    """Position of one photo inside the arrangement, in pixels.

    ``caption_height`` is the strip at the bottom of the cell reserved for
    text; the image occupies the remaining ``height - caption_height``.
    """

    photo_id: str
    index: int
    x: float
    y: float
    width: float
    height: float
    row: int
    column: int
    caption_height: float = 0.0

    @property
    def image_height(self) -> float:
        return self.height - self.caption_height


@dataclass(frozen=True)
class Arrangement:
    """Render instructions for a photo list: one cell per photo, in order."""

    kind: LayoutKind
    cells: Tuple[LayoutCell, ...]
    content_width: float
    content_height: float
    columns: int
    scroll_axis: str
    hover_effect: HoverEffect

    def photo_ids(self) -> List[str]:
        return [cell.photo_id for cell in self.cells]

    def __len__(self) -> int:
        return len(self.cells)

    def cell_for(self, photo_id: str) -> LayoutCell | None:
        for cell in self.cells:
            if cell.photo_id == photo_id:
                return cell
        return None


__all__ = ["LayoutCell", "Arrangement"]
