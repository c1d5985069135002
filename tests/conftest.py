from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

NOW = datetime(2024, 5, 6, 7, 8, 9)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_snapshot() -> dict[str, Any]:
    """Snapshot resembling an iPhone capture with location and Live Photo pairing."""
    return {
        "PixelWidth": 4032,
        "PixelHeight": 3024,
        "ProfileName": "Display P3",
        "Orientation": 6,
        "{TIFF}": {
            "Make": "Apple",
            "Model": "iPhone 13",
            "Artist": "A",
            "Software": "17.1",
            "DateTime": "2020:01:01 10:00:00",
        },
        "{Exif}": {
            "DateTimeOriginal": "2020:01:01 10:00:00",
            "DateTimeDigitized": "2020:01:01 10:00:00",
            "FNumber": 1.8,
            "ExposureTime": 0.008,
            "ISOSpeedRatings": [50],
            "FocalLength": 5.1,
            "LensMake": "Apple",
        },
        "{GPS}": {
            "Latitude": 35.0,
            "LatitudeRef": "N",
            "Longitude": 139.0,
            "LongitudeRef": "E",
        },
        "{MakerApple}": {"17": "PAIRING-ID-123", "11": b"\x00\x01binary"},
    }
