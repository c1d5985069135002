from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.models import Coordinate
from core.services.sync_policy import decide_sync, should_sync_date, should_sync_location

T = datetime(2020, 1, 1, 10, 0, 0)
HERE = Coordinate(35.0, 139.0)


@pytest.mark.parametrize(
    "new, current, expected",
    [
        (T, T + timedelta(seconds=0.5), False),
        (T, T + timedelta(seconds=1.5), True),
        (T, T - timedelta(seconds=1.5), True),
        (T, T + timedelta(seconds=1.0), False),
        (T, None, True),
        (None, T, True),
        (None, None, False),
    ],
)
def test_should_sync_date(new, current, expected: bool) -> None:
    assert should_sync_date(new, current) is expected


@pytest.mark.parametrize(
    "new, current, expected",
    [
        (HERE, Coordinate(35.000005, 139.0), False),
        (HERE, Coordinate(35.0, 139.000005), False),
        (HERE, Coordinate(35.00002, 139.0), True),
        (HERE, Coordinate(35.0, 138.99998), True),
        (HERE, None, True),
        (None, HERE, True),
        (None, None, False),
    ],
)
def test_should_sync_location(new, current, expected: bool) -> None:
    assert should_sync_location(new, current) is expected


def test_custom_tolerances() -> None:
    assert should_sync_date(T, T + timedelta(seconds=5), tolerance=10.0) is False
    assert should_sync_location(HERE, Coordinate(35.5, 139.0), tolerance=1.0) is False


def test_decide_sync_returns_both_flags() -> None:
    assert decide_sync(T, T, HERE, None) == (False, True)


@pytest.mark.parametrize(
    "new, current, expected",
    [
        (T, T.astimezone(), False),
        (T.astimezone(), T, False),
        (T, T.astimezone() + timedelta(seconds=1.5), True),
        (T.astimezone(timezone.utc), T, False),
        (T.astimezone(timezone(timedelta(hours=9))), T.astimezone(timezone.utc), False),
    ],
)
def test_should_sync_date_mixes_naive_and_aware(new, current, expected: bool) -> None:
    assert should_sync_date(new, current) is expected
