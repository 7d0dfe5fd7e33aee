"""Entry point of the gallery layout engine.

:func:`compute_layout` is a pure function of its two arguments: it keeps no
state between calls, never mutates the photos it receives, and always
returns exactly one cell per photo in input order. Only the geometry of the
cells depends on the configuration.
"""

from __future__ import annotations

from typing import Mapping, Sequence, Union

from .config import LayoutConfig, LayoutKind
from .geometry import Arrangement
from .strategies import STRATEGIES, PhotoLike

_SCROLL_AXIS = {LayoutKind.FILMSTRIP: "horizontal"}


def compute_layout(
    photos: Sequence[PhotoLike],
    config: Union[LayoutConfig, Mapping[str, object], None] = None,
) -> Arrangement:
    """Arrange *photos* according to *config*.

    *config* may be a :class:`LayoutConfig`, a plain mapping accepted by
    :meth:`LayoutConfig.from_mapping`, or ``None`` for the defaults. Invalid
    values raise :class:`~iGallery.errors.InvalidArgumentError`.
    """

    if config is None:
        config = LayoutConfig()
    elif not isinstance(config, LayoutConfig):
        config = LayoutConfig.from_mapping(config)

    strategy = STRATEGIES[config.layout_kind]
    placement = strategy(tuple(photos), config)
    return Arrangement(
        kind=config.layout_kind,
        cells=tuple(placement.cells),
        content_width=placement.content_width,
        content_height=placement.content_height,
        columns=placement.columns,
        scroll_axis=_SCROLL_AXIS.get(config.layout_kind, "vertical"),
        hover_effect=config.hover_effect,
    )


__all__ = ["compute_layout"]
