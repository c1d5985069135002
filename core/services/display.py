"""Human-readable rendering of display entries.

Values are rendered the way photographers read them: `1/125s`, `f/1.8`,
`35mm`, `+0.7 EV`, and enumerated EXIF codes by name.
"""

from __future__ import annotations

from datetime import datetime
import math
from typing import Any

from core.metadata import DisplayEntry, Metadata, Section
from core.models import Coordinate
from core.namespaces import MetadataField
from core.rational import DEFAULT_EPSILON, Rational
from core.snapshot import parse_exif_datetime

FIELD_LABELS: dict[MetadataField, str] = {
    MetadataField.MAKE: "Make",
    MetadataField.MODEL: "Model",
    MetadataField.SOFTWARE: "Software",
    MetadataField.FILE_DATE: "Modified",
    MetadataField.ARTIST: "Artist",
    MetadataField.COPYRIGHT: "Copyright",
    MetadataField.LENS_MAKE: "Lens Make",
    MetadataField.LENS_MODEL: "Lens Model",
    MetadataField.APERTURE: "Aperture",
    MetadataField.SHUTTER: "Shutter Speed",
    MetadataField.ISO: "ISO",
    MetadataField.FOCAL_LENGTH: "Focal Length",
    MetadataField.FOCAL_LENGTH_35: "Focal Length (35mm)",
    MetadataField.EXPOSURE_BIAS: "Exposure Bias",
    MetadataField.EXPOSURE_PROGRAM: "Exposure Program",
    MetadataField.METERING_MODE: "Metering Mode",
    MetadataField.WHITE_BALANCE: "White Balance",
    MetadataField.FLASH: "Flash",
    MetadataField.DATE_TIME_ORIGINAL: "Date",
    MetadataField.LOCATION: "Location",
    MetadataField.PIXEL_WIDTH: "Width",
    MetadataField.PIXEL_HEIGHT: "Height",
    MetadataField.PROFILE_NAME: "Color Profile",
}

ENUM_NAMES: dict[MetadataField, dict[int, str]] = {
    MetadataField.EXPOSURE_PROGRAM: {
        0: "Not Defined",
        1: "Manual",
        2: "Normal Program",
        3: "Aperture Priority",
        4: "Shutter Priority",
        5: "Creative Program",
        6: "Action Program",
        7: "Portrait Mode",
        8: "Landscape Mode",
    },
    MetadataField.METERING_MODE: {
        0: "Unknown",
        1: "Average",
        2: "Center-weighted Average",
        3: "Spot",
        4: "Multi-spot",
        5: "Pattern",
        6: "Partial",
        255: "Other",
    },
    MetadataField.WHITE_BALANCE: {0: "Auto", 1: "Manual"},
    MetadataField.FLASH: {
        0: "No Flash",
        1: "Fired",
        5: "Fired, Return Not Detected",
        7: "Fired, Return Detected",
        8: "On, Did Not Fire",
        9: "On, Fired",
        16: "Off, Did Not Fire",
        24: "Auto, Did Not Fire",
        25: "Auto, Fired",
        32: "No Flash Function",
    },
}

SECTION_TITLES: dict[Section, str] = {
    Section.BASIC_INFO: "Basic Info",
    Section.GEAR: "Gear",
    Section.EXPOSURE: "Exposure",
    Section.FILE_INFO: "File Info",
    Section.COPYRIGHT: "Copyright",
}


def format_number(value: float) -> str:
    """Render integral floats without decimals and others with one decimal."""
    if float(value).is_integer():
        return f"{value:.0f}"
    return f"{value:.1f}"


def format_exposure_bias(value: float) -> str:
    if value == 0:
        return "0 EV"
    return ("+" if value > 0 else "") + format_number(value) + " EV"


def format_shutter(value: float, epsilon: float = DEFAULT_EPSILON) -> str:
    """Render an exposure time as `num/den` when below one second."""
    if value > 0 and math.isfinite(value):
        rational = Rational.approximate(value, epsilon)
        if rational.is_proper:
            return str(rational)
    return format_number(value) if float(value).is_integer() else str(value)


def format_date(value: datetime) -> str:
    return f"{value:%b} {value.day}, {value:%Y %H:%M}"


def _plain(value: Any) -> str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_number(value) if value.is_integer() else str(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(_plain(v) for v in value)
    return str(value)


def format_value(field: MetadataField, value: Any, epsilon: float = DEFAULT_EPSILON) -> str:
    """Return display text for `value` stored under `field`."""
    if isinstance(value, Coordinate):
        return f"{value.latitude:.4f}, {value.longitude:.4f}"

    names = ENUM_NAMES.get(field)
    if names is not None and isinstance(value, int) and value in names:
        return names[value]

    if field is MetadataField.DATE_TIME_ORIGINAL:
        parsed = value if isinstance(value, datetime) else parse_exif_datetime(value)
        if parsed is not None:
            return format_date(parsed)

    if field is MetadataField.EXPOSURE_BIAS and isinstance(value, (int, float)):
        return format_exposure_bias(float(value))

    if field is MetadataField.SHUTTER and isinstance(value, (int, float)):
        return format_shutter(float(value), epsilon) + "s"
    if field is MetadataField.APERTURE:
        return "f/" + _plain(value)
    if field in (MetadataField.FOCAL_LENGTH, MetadataField.FOCAL_LENGTH_35):
        return _plain(value) + "mm"
    return _plain(value)


def describe(
    metadata: Metadata, epsilon: float = DEFAULT_EPSILON
) -> list[tuple[str, list[tuple[str, str]]]]:
    """Return (section title, [(label, text)]) rows for every display section."""
    rows: list[tuple[str, list[tuple[str, str]]]] = []
    for section in metadata.sections:
        rows.append(
            (
                SECTION_TITLES[section.section],
                [_row(entry, epsilon) for entry in section.entries],
            )
        )
    return rows


def _row(entry: DisplayEntry, epsilon: float) -> tuple[str, str]:
    return FIELD_LABELS[entry.field], format_value(entry.field, entry.value, epsilon)
