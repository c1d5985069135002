from __future__ import annotations

from typing import Any

import pytest

from core import coordinates
from core.models import Coordinate


def test_encode_uses_reference_letters() -> None:
    gps = coordinates.encode(Coordinate(-35.0, 139.0))
    assert gps == {
        "LatitudeRef": "S",
        "Latitude": 35.0,
        "LongitudeRef": "E",
        "Longitude": 139.0,
    }


def test_decode_restores_signed_pair() -> None:
    original = Coordinate(-35.0, 139.0)
    assert coordinates.decode(coordinates.encode(original)) == original


def test_west_longitude_and_altitude() -> None:
    gps = coordinates.encode(Coordinate(40.7, -74.0, altitude=-3.5))
    assert gps["LongitudeRef"] == "W"
    assert gps["Longitude"] == 74.0
    assert gps["AltitudeRef"] == 1
    assert gps["Altitude"] == 3.5
    decoded = coordinates.decode(gps)
    assert decoded == Coordinate(40.7, -74.0, altitude=-3.5)


def test_decode_accepts_lowercase_refs() -> None:
    gps = {"Latitude": 1.5, "LatitudeRef": "s", "Longitude": 2.5, "LongitudeRef": "w"}
    assert coordinates.decode(gps) == Coordinate(-1.5, -2.5)


@pytest.mark.parametrize(
    "gps",
    [
        None,
        {},
        {"Latitude": 35.0, "LatitudeRef": "N", "Longitude": 139.0},
        {"Latitude": 35.0, "LatitudeRef": "X", "Longitude": 139.0, "LongitudeRef": "E"},
        {"Latitude": "35", "LatitudeRef": "N", "Longitude": 139.0, "LongitudeRef": "E"},
        {"Latitude": 95.0, "LatitudeRef": "N", "Longitude": 139.0, "LongitudeRef": "E"},
        {"Latitude": 35.0, "LatitudeRef": "N", "Longitude": 181.0, "LongitudeRef": "E"},
        {"Latitude": True, "LatitudeRef": "N", "Longitude": 139.0, "LongitudeRef": "E"},
    ],
)
def test_decode_malformed_is_none(gps: Any) -> None:
    assert coordinates.decode(gps) is None
