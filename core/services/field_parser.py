"""Conversion between edit-form text and typed edits.

Forms hand over raw text (or picker integers, dates and coordinates). Empty
or unparseable input means "remove the field", which is expressed with the
`DELETE` sentinel rather than an empty string.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
import math
from typing import Any

from core.models import DELETE, UNCHANGED, Coordinate, Edit
from core.namespaces import MetadataField
from core.services.display import format_number, format_shutter

TEXT_FIELDS = frozenset(
    {
        MetadataField.MAKE,
        MetadataField.MODEL,
        MetadataField.LENS_MAKE,
        MetadataField.LENS_MODEL,
        MetadataField.ARTIST,
        MetadataField.COPYRIGHT,
        MetadataField.SOFTWARE,
    }
)
PICKER_FIELDS = frozenset(
    {
        MetadataField.EXPOSURE_PROGRAM,
        MetadataField.METERING_MODE,
        MetadataField.WHITE_BALANCE,
        MetadataField.FLASH,
    }
)
READ_ONLY_FIELDS = frozenset(
    {
        MetadataField.PIXEL_WIDTH,
        MetadataField.PIXEL_HEIGHT,
        MetadataField.PROFILE_NAME,
        MetadataField.FILE_DATE,
    }
)

MAX_LENGTHS: dict[MetadataField, int] = {
    MetadataField.ISO: 10,
    MetadataField.FOCAL_LENGTH_35: 10,
    MetadataField.APERTURE: 10,
    MetadataField.FOCAL_LENGTH: 10,
    MetadataField.EXPOSURE_BIAS: 10,
    MetadataField.SHUTTER: 15,
    MetadataField.ARTIST: 64,
    MetadataField.MAKE: 64,
    MetadataField.MODEL: 64,
    MetadataField.LENS_MAKE: 64,
    MetadataField.LENS_MODEL: 64,
    MetadataField.COPYRIGHT: 200,
}
DEFAULT_MAX_LENGTH = 100


def _to_float(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    # "inf", "nan" and overflowing exponents are not storable values
    return value if math.isfinite(value) else None


def _to_int(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


def parse_shutter(text: str) -> float | None:
    """Parse `1/125` or `0.5` into seconds; None when invalid."""
    if "/" in text:
        parts = text.split("/")
        if len(parts) != 2:
            return None
        num, den = _to_float(parts[0]), _to_float(parts[1])
        if num is None or den is None or den == 0:
            return None
        value = num / den
        return value if math.isfinite(value) else None
    return _to_float(text)


def parse_edit(field: MetadataField, raw: Any, now: datetime | None = None) -> Edit:
    """Convert one form value into an edit for `field`."""
    if field in READ_ONLY_FIELDS:
        return UNCHANGED
    if raw is None:
        return DELETE

    if field is MetadataField.DATE_TIME_ORIGINAL:
        if not isinstance(raw, datetime):
            return DELETE
        # A capture date in the future is clamped to the present
        limit = now or datetime.now(raw.tzinfo)
        if raw.tzinfo is not None and limit.tzinfo is None:
            limit = limit.astimezone(raw.tzinfo)
        elif raw.tzinfo is None and limit.tzinfo is not None:
            limit = limit.astimezone().replace(tzinfo=None)
        return Edit.set_to(min(raw, limit))
    if field is MetadataField.LOCATION:
        return Edit.set_to(raw) if isinstance(raw, Coordinate) else DELETE
    if field in PICKER_FIELDS:
        value = raw if isinstance(raw, int) else _to_int(str(raw).strip())
        return DELETE if value is None else Edit.set_to(value)

    text = str(raw).strip()
    if not text:
        return DELETE
    if field in TEXT_FIELDS:
        return Edit.set_to(text)

    parsed: Any
    if field is MetadataField.SHUTTER:
        parsed = parse_shutter(text)
    elif field is MetadataField.ISO:
        iso = _to_int(text)
        parsed = None if iso is None else [iso]
    elif field is MetadataField.FOCAL_LENGTH_35:
        parsed = _to_int(text)
    elif field is MetadataField.EXPOSURE_BIAS:
        parsed = _to_float(text.replace("+", ""))
    else:
        parsed = _to_float(text)
    return DELETE if parsed is None else Edit.set_to(parsed)


def prepare_edits(
    form: Mapping[MetadataField, Any], now: datetime | None = None
) -> dict[MetadataField, Edit]:
    """Convert a whole form into an edit batch, skipping read-only fields."""
    edits: dict[MetadataField, Edit] = {}
    for field, raw in form.items():
        edit = parse_edit(field, raw, now)
        if edit is not UNCHANGED:
            edits[field] = edit
    return edits


def form_text(field: MetadataField, value: Any) -> str | None:
    """Return the editable text for a stored value, or None when absent."""
    if value is None:
        return None
    if field is MetadataField.SHUTTER and isinstance(value, (int, float)):
        return format_shutter(float(value))
    if field is MetadataField.EXPOSURE_BIAS and isinstance(value, (int, float)):
        text = format_number(float(value))
        return "+" + text if value > 0 else text
    if field in (MetadataField.APERTURE, MetadataField.FOCAL_LENGTH) and isinstance(
        value, (int, float)
    ):
        return format_number(float(value))
    if field is MetadataField.ISO:
        if isinstance(value, (list, tuple)):
            return str(value[0]) if value else None
        return str(value)
    if field is MetadataField.FOCAL_LENGTH_35 and isinstance(value, float):
        return str(int(value))
    return str(value)


def validate_input(field: MetadataField, text: str) -> bool:
    """Return True if `text` is acceptable content for the `field` input."""
    if not text:
        return True
    if len(text) > MAX_LENGTHS.get(field, DEFAULT_MAX_LENGTH):
        return False

    if field in (MetadataField.ISO, MetadataField.FOCAL_LENGTH_35):
        return text.isdigit() and text.isascii()
    if field in (MetadataField.APERTURE, MetadataField.FOCAL_LENGTH):
        return set(text) <= set("0123456789.") and text.count(".") <= 1
    if field is MetadataField.SHUTTER:
        return (
            set(text) <= set("0123456789./")
            and text.count("/") <= 1
            and text.count(".") <= 1
        )
    if field is MetadataField.EXPOSURE_BIAS:
        if not set(text) <= set("0123456789.+-"):
            return False
        if text.count(".") > 1:
            return False
        signs = text.count("+") + text.count("-")
        if signs > 1:
            return False
        return signs == 0 or text[0] in "+-"
    return True
