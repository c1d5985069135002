from __future__ import annotations

import copy
from datetime import datetime
from typing import Any

import pytest

from core.metadata import Metadata, Section
from core.models import AssetOverrides, Coordinate
from core.namespaces import MetadataField


def test_sections_follow_layout(sample_snapshot: dict[str, Any]) -> None:
    metadata = Metadata(sample_snapshot)
    assert [s.section for s in metadata.sections] == [
        Section.BASIC_INFO,
        Section.GEAR,
        Section.EXPOSURE,
        Section.FILE_INFO,
        Section.COPYRIGHT,
    ]
    gear = metadata.sections[1]
    assert [e.field for e in gear.entries] == [
        MetadataField.MAKE,
        MetadataField.MODEL,
        MetadataField.LENS_MAKE,
    ]


def test_empty_sections_are_omitted() -> None:
    metadata = Metadata({"{TIFF}": {"Make": "Apple"}})
    assert len(metadata.sections) == 1
    assert metadata.sections[0].section is Section.GEAR


def test_empty_snapshot_has_no_sections() -> None:
    metadata = Metadata({})
    assert metadata.sections == ()
    assert metadata.raw_gps is None
    assert metadata.date_time_original is None


def test_raw_gps_decoded(sample_snapshot: dict[str, Any]) -> None:
    metadata = Metadata(sample_snapshot)
    assert metadata.raw_gps == Coordinate(35.0, 139.0)
    assert metadata.value(MetadataField.LOCATION) == Coordinate(35.0, 139.0)


def test_overrides_applied_to_copy_only(sample_snapshot: dict[str, Any]) -> None:
    before = copy.deepcopy(sample_snapshot)
    overrides = AssetOverrides(
        capture_date=datetime(2021, 2, 3, 4, 5, 6),
        location=Coordinate(-33.9, 151.2),
    )
    metadata = Metadata(sample_snapshot, overrides)

    exif = metadata.properties["{Exif}"]
    assert exif["DateTimeOriginal"] == "2021:02:03 04:05:06"
    assert exif["DateTimeDigitized"] == "2021:02:03 04:05:06"
    assert metadata.raw_gps == Coordinate(-33.9, 151.2)
    assert metadata.properties["{GPS}"]["LatitudeRef"] == "S"
    assert sample_snapshot == before


def test_override_location_adds_basic_info_section() -> None:
    metadata = Metadata({}, AssetOverrides(location=Coordinate(1.0, 2.0)))
    assert metadata.sections[0].section is Section.BASIC_INFO
    assert metadata.sections[0].entries[0].value == Coordinate(1.0, 2.0)


def test_properties_returns_independent_copy(sample_snapshot: dict[str, Any]) -> None:
    metadata = Metadata(sample_snapshot)
    props = metadata.properties
    props["{TIFF}"]["Make"] = "Changed"
    assert metadata.value(MetadataField.MAKE) == "Apple"


def test_metadata_is_immutable(sample_snapshot: dict[str, Any]) -> None:
    metadata = Metadata(sample_snapshot)
    with pytest.raises(AttributeError):
        metadata.foo = 1  # type: ignore[attr-defined]


def test_value_lookup(sample_snapshot: dict[str, Any]) -> None:
    metadata = Metadata(sample_snapshot)
    assert metadata.value(MetadataField.PIXEL_WIDTH) == 4032
    assert metadata.value(MetadataField.ISO) == [50]
    assert metadata.value(MetadataField.COPYRIGHT) is None
    assert metadata.date_time_original == datetime(2020, 1, 1, 10, 0, 0)


def test_custom_layout() -> None:
    layout = ((Section.EXPOSURE, (MetadataField.ISO,)),)
    snapshot = {"{Exif}": {"ISOSpeedRatings": [100]}, "{TIFF}": {"Make": "X"}}
    metadata = Metadata(snapshot, None, layout)
    assert len(metadata.sections) == 1
    assert list(metadata.entries())[0].value == [100]
