"""One pure placement function per layout kind."""

from __future__ import annotations

from typing import Callable, Dict, List, NamedTuple, Optional, Protocol, Sequence

from ...config import CARD_CAPTION_HEIGHT, ROWS_PER_LINE, SIZE_BANDS
from ...errors import InvalidArgumentError
from .config import LayoutConfig, LayoutKind
from .geometry import LayoutCell


class PhotoLike(Protocol):
    id: str

    @property
    def aspect_ratio(self) -> Optional[float]:
        ...


class Placement(NamedTuple):
    cells: List[LayoutCell]
    content_width: float
    content_height: float
    columns: int


Strategy = Callable[[Sequence[PhotoLike], LayoutConfig], Placement]


def _band(config: LayoutConfig) -> float:
    return float(SIZE_BANDS[config.layout_kind.value][config.photo_size.value])


def _intrinsic_ratio(photo: PhotoLike) -> Optional[float]:
    ratio = getattr(photo, "aspect_ratio", None)
    if isinstance(ratio, (int, float)) and ratio > 0:
        return float(ratio)
    return None


def _column_width(config: LayoutConfig, columns: int) -> float:
    usable = config.viewport_width - config.gap_x * (columns - 1)
    if usable <= 0:
        raise InvalidArgumentError(
            f"viewport_width {config.viewport_width:g} is too narrow for "
            f"{columns} column(s) with gap_x {config.gap_x:g}"
        )
    return usable / columns


def _stacked_height(rows: int, cell_height: float, gap_y: float) -> float:
    if rows <= 0:
        return 0.0
    return rows * cell_height + (rows - 1) * gap_y


def _uniform_height(config: LayoutConfig, cell_width: float) -> float:
    """Height shared by every cell of a uniform layout."""

    forced = config.aspect_ratio.ratio
    if forced is None:
        return _band(config)
    return cell_width / forced


def _masonry_fallback_height(index: int, base: float) -> float:
    # Varied heights keep the columns staggered when no dimensions are known.
    if index % 3 == 0:
        return base * 1.5
    if index % 5 == 0:
        return base * 2.0
    return base


def layout_masonry(photos: Sequence[PhotoLike], config: LayoutConfig) -> Placement:
    """Fill equal-width columns round-robin, left to right, top to bottom."""

    columns = config.resolved_columns()
    column_width = _column_width(config, columns)
    base = _band(config)
    forced = config.aspect_ratio.ratio
    offsets = [0.0] * columns

    cells: List[LayoutCell] = []
    for index, photo in enumerate(photos):
        column = index % columns
        ratio = forced if forced is not None else _intrinsic_ratio(photo)
        if ratio is not None:
            height = column_width / ratio
        else:
            height = _masonry_fallback_height(index, base)
        y = offsets[column]
        cells.append(
            LayoutCell(
                photo_id=photo.id,
                index=index,
                x=column * (column_width + config.gap_x),
                y=y,
                width=column_width,
                height=height,
                row=index // columns,
                column=column,
            )
        )
        offsets[column] = y + height + config.gap_y

    content_height = max(offsets) - config.gap_y if cells else 0.0
    return Placement(cells, config.viewport_width, max(0.0, content_height), columns)


def _layout_uniform_grid(
    photos: Sequence[PhotoLike], config: LayoutConfig, caption_height: float
) -> Placement:
    columns = config.resolved_columns()
    cell_width = _column_width(config, columns)
    cell_height = _uniform_height(config, cell_width) + caption_height

    cells: List[LayoutCell] = []
    for index, photo in enumerate(photos):
        row, column = divmod(index, columns)
        cells.append(
            LayoutCell(
                photo_id=photo.id,
                index=index,
                x=column * (cell_width + config.gap_x),
                y=row * (cell_height + config.gap_y),
                width=cell_width,
                height=cell_height,
                row=row,
                column=column,
                caption_height=caption_height,
            )
        )
    rows = -(-len(cells) // columns)
    return Placement(
        cells, config.viewport_width, _stacked_height(rows, cell_height, config.gap_y), columns
    )


def layout_grid(photos: Sequence[PhotoLike], config: LayoutConfig) -> Placement:
    return _layout_uniform_grid(photos, config, 0.0)


def layout_cards(photos: Sequence[PhotoLike], config: LayoutConfig) -> Placement:
    return _layout_uniform_grid(photos, config, float(CARD_CAPTION_HEIGHT))


def layout_rows(photos: Sequence[PhotoLike], config: LayoutConfig) -> Placement:
    """Group photos in rows of two that split the row width evenly.

    A trailing row holding a single photo stretches it across the full width.
    """

    cells: List[LayoutCell] = []
    y = 0.0
    for start in range(0, len(photos), ROWS_PER_LINE):
        chunk = photos[start : start + ROWS_PER_LINE]
        cell_width = _column_width(config, len(chunk))
        cell_height = _uniform_height(config, _column_width(config, ROWS_PER_LINE))
        row = start // ROWS_PER_LINE
        for offset, photo in enumerate(chunk):
            cells.append(
                LayoutCell(
                    photo_id=photo.id,
                    index=start + offset,
                    x=offset * (cell_width + config.gap_x),
                    y=y,
                    width=cell_width,
                    height=cell_height,
                    row=row,
                    column=offset,
                )
            )
        y += cell_height + config.gap_y

    content_height = y - config.gap_y if cells else 0.0
    return Placement(cells, config.viewport_width, content_height, ROWS_PER_LINE)


def layout_filmstrip(photos: Sequence[PhotoLike], config: LayoutConfig) -> Placement:
    """Place every photo on one horizontally scrolling row of fixed height."""

    height = _band(config)
    forced = config.aspect_ratio.ratio
    cells: List[LayoutCell] = []
    x = 0.0
    for index, photo in enumerate(photos):
        ratio = forced if forced is not None else _intrinsic_ratio(photo)
        width = height * ratio if ratio is not None else height
        cells.append(
            LayoutCell(
                photo_id=photo.id,
                index=index,
                x=x,
                y=0.0,
                width=width,
                height=height,
                row=0,
                column=index,
            )
        )
        x += width + config.gap_x

    content_width = x - config.gap_x if cells else 0.0
    return Placement(cells, content_width, height if cells else 0.0, max(1, len(cells)))


STRATEGIES: Dict[LayoutKind, Strategy] = {
    LayoutKind.MASONRY: layout_masonry,
    LayoutKind.GRID: layout_grid,
    LayoutKind.CARDS: layout_cards,
    LayoutKind.ROWS: layout_rows,
    LayoutKind.FILMSTRIP: layout_filmstrip,
}


__all__ = [
    "PhotoLike",
    "Placement",
    "Strategy",
    "STRATEGIES",
    "layout_masonry",
    "layout_grid",
    "layout_cards",
    "layout_rows",
    "layout_filmstrip",
]
