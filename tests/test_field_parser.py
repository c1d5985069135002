from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from core.models import DELETE, UNCHANGED, Coordinate, Edit
from core.namespaces import MetadataField
from core.services.field_parser import (
    form_text,
    parse_edit,
    parse_shutter,
    prepare_edits,
    validate_input,
)

NOW = datetime(2024, 5, 6, 7, 8, 9)


@pytest.mark.parametrize(
    "text, expected",
    [("1/125", 0.008), ("0.5", 0.5), ("2", 2.0), ("1/0", None), ("1/2/3", None), ("x", None)],
)
def test_parse_shutter(text: str, expected: float | None) -> None:
    assert parse_shutter(text) == expected


@pytest.mark.parametrize(
    "field, raw, expected",
    [
        (MetadataField.PIXEL_WIDTH, "100", UNCHANGED),
        (MetadataField.FILE_DATE, "2020:01:01 00:00:00", UNCHANGED),
        (MetadataField.MAKE, None, DELETE),
        (MetadataField.MAKE, "   ", DELETE),
        (MetadataField.MAKE, "  Canon ", Edit.set_to("Canon")),
        (MetadataField.ISO, "200", Edit.set_to([200])),
        (MetadataField.ISO, "abc", DELETE),
        (MetadataField.FOCAL_LENGTH_35, "26", Edit.set_to(26)),
        (MetadataField.EXPOSURE_BIAS, "+0.7", Edit.set_to(0.7)),
        (MetadataField.EXPOSURE_BIAS, "-1", Edit.set_to(-1.0)),
        (MetadataField.APERTURE, "1.8", Edit.set_to(1.8)),
        (MetadataField.SHUTTER, "1/125", Edit.set_to(0.008)),
        (MetadataField.SHUTTER, "1/0", DELETE),
        (MetadataField.METERING_MODE, 5, Edit.set_to(5)),
        (MetadataField.FLASH, "16", Edit.set_to(16)),
        (MetadataField.FLASH, "on", DELETE),
        (MetadataField.LOCATION, Coordinate(1.0, 2.0), Edit.set_to(Coordinate(1.0, 2.0))),
        (MetadataField.LOCATION, "1,2", DELETE),
        (MetadataField.DATE_TIME_ORIGINAL, "2020-01-01", DELETE),
    ],
)
def test_parse_edit(field: MetadataField, raw: Any, expected: Edit) -> None:
    assert parse_edit(field, raw, NOW) == expected


def test_future_capture_date_is_clamped() -> None:
    edit = parse_edit(MetadataField.DATE_TIME_ORIGINAL, datetime(2030, 1, 1), NOW)
    assert edit == Edit.set_to(NOW)
    past = datetime(2001, 2, 3, 4, 5, 6)
    assert parse_edit(MetadataField.DATE_TIME_ORIGINAL, past, NOW) == Edit.set_to(past)


def test_prepare_edits_skips_read_only() -> None:
    edits = prepare_edits(
        {
            MetadataField.PIXEL_WIDTH: "4032",
            MetadataField.ARTIST: "",
            MetadataField.MODEL: "X100V",
        },
        NOW,
    )
    assert edits == {
        MetadataField.ARTIST: DELETE,
        MetadataField.MODEL: Edit.set_to("X100V"),
    }


@pytest.mark.parametrize(
    "field, value, expected",
    [
        (MetadataField.SHUTTER, 0.008, "1/125"),
        (MetadataField.EXPOSURE_BIAS, 0.7, "+0.7"),
        (MetadataField.EXPOSURE_BIAS, -0.7, "-0.7"),
        (MetadataField.EXPOSURE_BIAS, 0, "0"),
        (MetadataField.APERTURE, 1.8, "1.8"),
        (MetadataField.FOCAL_LENGTH, 26.0, "26"),
        (MetadataField.ISO, [50], "50"),
        (MetadataField.ISO, [], None),
        (MetadataField.FOCAL_LENGTH_35, 26.0, "26"),
        (MetadataField.MAKE, "Apple", "Apple"),
        (MetadataField.MAKE, None, None),
    ],
)
def test_form_text(field: MetadataField, value: Any, expected: str | None) -> None:
    assert form_text(field, value) == expected


@pytest.mark.parametrize(
    "field, text, ok",
    [
        (MetadataField.ISO, "", True),
        (MetadataField.ISO, "400", True),
        (MetadataField.ISO, "4.0", False),
        (MetadataField.ISO, "12345678901", False),
        (MetadataField.APERTURE, "1.8", True),
        (MetadataField.APERTURE, "1.8.1", False),
        (MetadataField.SHUTTER, "1/125", True),
        (MetadataField.SHUTTER, "1//125", False),
        (MetadataField.EXPOSURE_BIAS, "+0.7", True),
        (MetadataField.EXPOSURE_BIAS, "-1", True),
        (MetadataField.EXPOSURE_BIAS, "1-", False),
        (MetadataField.EXPOSURE_BIAS, "+-1", False),
        (MetadataField.ARTIST, "a" * 64, True),
        (MetadataField.ARTIST, "a" * 65, False),
        (MetadataField.COPYRIGHT, "c" * 200, True),
    ],
)
def test_validate_input(field: MetadataField, text: str, ok: bool) -> None:
    assert validate_input(field, text) is ok


def test_capture_date_clamp_mixes_naive_and_aware() -> None:
    tokyo = timezone(timedelta(hours=9))
    past_aware = datetime(2020, 1, 1, tzinfo=tokyo)
    assert parse_edit(MetadataField.DATE_TIME_ORIGINAL, past_aware, NOW) == Edit.set_to(past_aware)

    future_aware = datetime(2030, 1, 1, tzinfo=tokyo)
    clamped = parse_edit(MetadataField.DATE_TIME_ORIGINAL, future_aware, NOW).value
    assert clamped == NOW.astimezone(tokyo)
    assert clamped.tzinfo is tokyo

    aware_now = NOW.astimezone(timezone.utc)
    clamped_naive = parse_edit(MetadataField.DATE_TIME_ORIGINAL, datetime(2030, 1, 1), aware_now)
    assert clamped_naive.value == NOW
    assert clamped_naive.value.tzinfo is None


@pytest.mark.parametrize("text", ["inf", "-inf", "nan", "1e400", "1/1e-400", "1e308/1e-308"])
def test_non_finite_numbers_become_deletes(text: str) -> None:
    assert parse_edit(MetadataField.SHUTTER, text, NOW) == DELETE
    assert parse_edit(MetadataField.APERTURE, text, NOW) == DELETE
