from __future__ import annotations

from datetime import datetime, timezone

import pytest

from iGallery.utils.ids import format_timestamp, parse_timestamp


def test_epoch_milliseconds_are_parsed_as_utc() -> None:
    parsed = parse_timestamp(1_700_000_000_000)
    assert parsed == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert format_timestamp(parsed).endswith("Z")


@pytest.mark.parametrize("value", [1e20, -1e20, float("inf"), float("nan"), True, "yesterday"])
def test_unusable_timestamps_raise_value_error(value: object) -> None:
    with pytest.raises(ValueError):
        parse_timestamp(value)
