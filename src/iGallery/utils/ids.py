"""Identifier and timestamp helpers."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Container


def new_id(prefix: str, taken: Container[str] = ()) -> str:
    """Return ``"<prefix>-<uuid4 hex>"`` not present in *taken*."""

    while True:
        candidate = f"{prefix}-{uuid.uuid4().hex}"
        if candidate not in taken:
            return candidate


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Serialise *value* as ISO-8601 text with a ``Z`` suffix for UTC."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: object) -> datetime:
    """Parse ISO-8601 text (or epoch milliseconds) into an aware ``datetime``.

    Raises ``ValueError`` when *value* cannot be interpreted.
    """

    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        # Epoch milliseconds, as written by JavaScript ``Date.now()``.
        try:
            return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError) as exc:
            raise ValueError(f"Timestamp out of range: {value!r}") from exc
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = f"{normalized[:-1]}+00:00"
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
