from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from kube_credential.core.time import format_iso, is_canonical_iso, now_utc_iso


def test_format_iso_uses_millisecond_z_form() -> None:
    moment = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
    assert format_iso(moment) == "2024-01-02T03:04:05.678Z"


def test_format_iso_converts_to_utc() -> None:
    moment = datetime(2024, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_iso(moment) == "2024-01-01T00:00:00.000Z"


def test_now_utc_iso_round_trips() -> None:
    assert is_canonical_iso(now_utc_iso())


@pytest.mark.parametrize(
    "value",
    ["2024-01-01T00:00:00.000Z", "1999-12-31T23:59:59.999Z"],
)
def test_canonical_values_accepted(value: str) -> None:
    assert is_canonical_iso(value)


@pytest.mark.parametrize(
    "value",
    [
        "2024-01-01",  # no time, no zone
        "2024-01-01T00:00:00Z",  # no milliseconds
        "2024-01-01T00:00:00.000+00:00",  # offset instead of Z
        "2024-01-01T00:00:00.000",  # naive
        "2024-13-01T00:00:00.000Z",  # month out of range
        "not a date",
    ],
)
def test_non_canonical_values_rejected(value: str) -> None:
    assert not is_canonical_iso(value)
