"""Section-grouped metadata model built from a property snapshot.

`Metadata` is constructed once per read (and again after every successful
write). Library overrides for capture date and location are folded into a
copy of the snapshot first, so every later transformation starts from the
values the library considers authoritative.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from core import coordinates
from core.models import AssetOverrides, Coordinate, PropertySnapshot
from core.namespaces import MetadataField, Namespace, route
from core.snapshot import (
    copy_snapshot,
    format_exif_datetime,
    get_namespace,
    parse_exif_datetime,
    set_routed,
)


class Section(Enum):
    """Display grouping for metadata fields."""

    BASIC_INFO = "BASIC INFO"
    GEAR = "GEAR"
    EXPOSURE = "EXPOSURE"
    FILE_INFO = "FILE INFO"
    COPYRIGHT = "COPYRIGHT"


SectionLayout = Sequence[tuple[Section, Sequence[MetadataField]]]

DEFAULT_SECTION_LAYOUT: SectionLayout = (
    (Section.BASIC_INFO, (MetadataField.DATE_TIME_ORIGINAL, MetadataField.LOCATION)),
    (
        Section.GEAR,
        (
            MetadataField.MAKE,
            MetadataField.MODEL,
            MetadataField.LENS_MAKE,
            MetadataField.LENS_MODEL,
        ),
    ),
    (
        Section.EXPOSURE,
        (
            MetadataField.APERTURE,
            MetadataField.SHUTTER,
            MetadataField.ISO,
            MetadataField.FOCAL_LENGTH,
            MetadataField.FOCAL_LENGTH_35,
            MetadataField.EXPOSURE_BIAS,
            MetadataField.EXPOSURE_PROGRAM,
            MetadataField.METERING_MODE,
            MetadataField.WHITE_BALANCE,
            MetadataField.FLASH,
        ),
    ),
    (
        Section.FILE_INFO,
        (MetadataField.PIXEL_WIDTH, MetadataField.PIXEL_HEIGHT, MetadataField.PROFILE_NAME),
    ),
    (Section.COPYRIGHT, (MetadataField.ARTIST, MetadataField.COPYRIGHT)),
)


@dataclass(frozen=True)
class DisplayEntry:
    """One resolved field ready for presentation."""

    field: MetadataField
    value: Any


@dataclass(frozen=True)
class DisplaySection:
    section: Section
    entries: tuple[DisplayEntry, ...]


def apply_overrides(
    snapshot: Mapping[str, Any], overrides: AssetOverrides | None
) -> PropertySnapshot:
    """Return a copy of `snapshot` with library overrides written in."""
    result = copy_snapshot(snapshot)
    if overrides is None:
        return result
    if overrides.capture_date is not None:
        set_routed(
            result,
            route(MetadataField.DATE_TIME_ORIGINAL),
            format_exif_datetime(overrides.capture_date),
        )
    if overrides.location is not None:
        result[Namespace.GPS.value] = coordinates.encode(overrides.location)
    return result


def _lookup(snapshot: Mapping[str, Any], key: str) -> Any:
    for ns in (Namespace.EXIF, Namespace.TIFF):
        value = get_namespace(snapshot, ns).get(key)
        if value is not None:
            return value
    return snapshot.get(key)


def build_sections(
    snapshot: Mapping[str, Any], gps: Coordinate | None, layout: SectionLayout
) -> tuple[DisplaySection, ...]:
    """Resolve `layout` against `snapshot`, omitting sections with no values."""
    sections: list[DisplaySection] = []
    for section, fields in layout:
        entries: list[DisplayEntry] = []
        for fld in fields:
            if fld is MetadataField.LOCATION:
                if gps is not None:
                    entries.append(DisplayEntry(fld, gps))
                continue
            value = _lookup(snapshot, route(fld).key)
            if value is not None:
                entries.append(DisplayEntry(fld, value))
        if entries:
            sections.append(DisplaySection(section, tuple(entries)))
    return tuple(sections)


class Metadata:
    """Immutable view over one image's properties.

    Attributes:
        properties: Snapshot with overrides applied (a private copy).
        raw_gps: Coordinate decoded from the GPS namespace, if complete.
        sections: Display groups, used for presentation only.
    """

    __slots__ = ("_properties", "_raw_gps", "_sections")

    def __init__(
        self,
        snapshot: Mapping[str, Any] | None,
        overrides: AssetOverrides | None = None,
        layout: SectionLayout = DEFAULT_SECTION_LAYOUT,
    ) -> None:
        props = apply_overrides(snapshot or {}, overrides)
        gps = coordinates.decode(props.get(Namespace.GPS.value))
        object.__setattr__(self, "_properties", props)
        object.__setattr__(self, "_raw_gps", gps)
        object.__setattr__(self, "_sections", build_sections(props, gps, layout))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Metadata is immutable")

    @property
    def properties(self) -> PropertySnapshot:
        """Return a copy of the snapshot; the instance's own copy is never exposed."""
        return copy_snapshot(self._properties)

    @property
    def raw_gps(self) -> Coordinate | None:
        return self._raw_gps

    @property
    def sections(self) -> tuple[DisplaySection, ...]:
        return self._sections

    @property
    def date_time_original(self) -> datetime | None:
        exif = get_namespace(self._properties, Namespace.EXIF)
        return parse_exif_datetime(exif.get(route(MetadataField.DATE_TIME_ORIGINAL).key))

    def value(self, field: MetadataField) -> Any:
        """Return the stored value for `field` (location yields `raw_gps`)."""
        if field is MetadataField.LOCATION:
            return self._raw_gps
        rt = route(field)
        if rt.namespace is Namespace.TOP_LEVEL:
            return self._properties.get(rt.key)
        return get_namespace(self._properties, rt.namespace).get(rt.key)

    def entries(self) -> Iterable[DisplayEntry]:
        for section in self._sections:
            yield from section.entries
