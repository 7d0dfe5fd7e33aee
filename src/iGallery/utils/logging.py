"""Logging helpers for iGallery."""

from __future__ import annotations

import logging
import os
from typing import Optional

_LOGGER: Optional[logging.Logger] = None


def _resolve_level() -> int:
    name = os.environ.get("IGALLERY_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it on first use.

    Modules log through ``logging.getLogger(__name__)``; their records
    propagate to this logger so a single handler serves the whole package.
    """

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("iGallery")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(_resolve_level())
    return _LOGGER


logger = get_logger()
