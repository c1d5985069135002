"""Conversion between signed coordinates and the GPS namespace dictionary.

The GPS namespace stores magnitudes with reference letters (N/S, E/W) rather
than signed degrees. Decoding is lenient about letter case but strict about
presence: a dictionary missing any horizontal key yields None.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core.models import Coordinate
from core.namespaces import (
    GPS_ALTITUDE,
    GPS_ALTITUDE_REF,
    GPS_LATITUDE,
    GPS_LATITUDE_REF,
    GPS_LONGITUDE,
    GPS_LONGITUDE_REF,
)


def encode(coord: Coordinate) -> dict[str, Any]:
    """Return a GPS namespace dictionary for `coord`."""
    gps: dict[str, Any] = {
        GPS_LATITUDE_REF: "N" if coord.latitude >= 0 else "S",
        GPS_LATITUDE: abs(coord.latitude),
        GPS_LONGITUDE_REF: "E" if coord.longitude >= 0 else "W",
        GPS_LONGITUDE: abs(coord.longitude),
    }
    if coord.altitude is not None:
        gps[GPS_ALTITUDE_REF] = 0 if coord.altitude >= 0 else 1
        gps[GPS_ALTITUDE] = abs(coord.altitude)
    return gps


def _magnitude(value: Any, limit: float) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    magnitude = float(value)
    if magnitude != magnitude or abs(magnitude) > limit:  # NaN or out of range
        return None
    return abs(magnitude)


def _ref(value: Any, allowed: tuple[str, str]) -> str | None:
    if not isinstance(value, str):
        return None
    letter = value.strip().upper()
    return letter if letter in allowed else None


def _altitude(gps: Mapping[str, Any]) -> float | None:
    value = gps.get(GPS_ALTITUDE)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    below_sea_level = gps.get(GPS_ALTITUDE_REF) in (1, "1", b"\x01")
    return -abs(float(value)) if below_sea_level else abs(float(value))


def decode(gps: Mapping[str, Any] | None) -> Coordinate | None:
    """Return the signed coordinate stored in `gps`, or None if incomplete."""
    if not isinstance(gps, Mapping):
        return None
    latitude = _magnitude(gps.get(GPS_LATITUDE), 90.0)
    longitude = _magnitude(gps.get(GPS_LONGITUDE), 180.0)
    lat_ref = _ref(gps.get(GPS_LATITUDE_REF), ("N", "S"))
    lon_ref = _ref(gps.get(GPS_LONGITUDE_REF), ("E", "W"))
    if latitude is None or longitude is None or lat_ref is None or lon_ref is None:
        return None
    return Coordinate(
        latitude=-latitude if lat_ref == "S" else latitude,
        longitude=-longitude if lon_ref == "W" else longitude,
        altitude=_altitude(gps),
    )
