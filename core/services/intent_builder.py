"""Update-intent construction from a metadata snapshot and a batch of edits.

Every function here is pure: it reads a `Metadata`, works on a private copy
of its snapshot and returns a fresh `UpdateIntent`. Routing comes from
`core.namespaces.route`; nothing in this module names a namespace key for a
user-editable field directly.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from loguru import logger

from core import coordinates
from core.metadata import Metadata
from core.models import (
    DELETE,
    Coordinate,
    Edit,
    EditKind,
    FieldValue,
    PropertySnapshot,
    UpdateIntent,
)
from core.namespaces import ORIENTATION, PHYSICAL_KEYS, MetadataField, Namespace, route
from core.snapshot import delete_routed, format_exif_datetime, parse_exif_datetime, set_routed

DEFAULT_SOFTWARE = "PhotoMeta"

EditBatch = Mapping[MetadataField, "Edit | FieldValue"]


def _as_edit(value: Edit | FieldValue) -> Edit:
    return value if isinstance(value, Edit) else Edit.set_to(value)


def _storable(field: MetadataField, value: Any) -> Any:
    """Convert an edit value to what the namespace stores."""
    if isinstance(value, datetime):
        return format_exif_datetime(value)
    if isinstance(value, Coordinate):
        raise TypeError(f"Coordinate values are only valid for {MetadataField.LOCATION.value}")
    if field is MetadataField.ISO and isinstance(value, int) and not isinstance(value, bool):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


def apply_batch(
    metadata: Metadata,
    edits: EditBatch,
    *,
    software: str = DEFAULT_SOFTWARE,
    now: datetime | None = None,
) -> UpdateIntent:
    """Apply `edits` to the metadata snapshot and return the resulting intent.

    Deletions remove keys (and their paired keys). Deleting the
    location drops the GPS namespace entirely. Afterwards the TIFF software
    tag is stamped unless the batch edits it, the TIFF file date is always set
    to `now`, and codec-derived physical attributes are stripped. The private
    Apple namespace is never touched.

    Args:
        metadata: Source metadata.
        edits: Field -> `Edit` or bare value (shorthand for a set).
        software: Product identifier stamped into TIFF software.
        now: Modification timestamp; defaults to the current local time.
    """
    props: PropertySnapshot = metadata.properties
    library_date = metadata.date_time_original
    library_location = metadata.raw_gps
    software_edited = False

    for field, raw in edits.items():
        edit = _as_edit(raw)
        if edit.kind is EditKind.UNCHANGED:
            continue
        rt = route(field)
        if field is MetadataField.SOFTWARE:
            software_edited = True

        if rt.is_location:
            if edit.is_delete:
                props.pop(Namespace.GPS.value, None)
                library_location = None
            elif isinstance(edit.value, Coordinate):
                props[Namespace.GPS.value] = coordinates.encode(edit.value)
                library_location = edit.value
            else:
                raise TypeError(f"Location edits require a Coordinate, got {edit.value!r}")
            continue

        if edit.is_delete:
            delete_routed(props, rt)
        else:
            set_routed(props, rt, _storable(field, edit.value))

        if field is MetadataField.DATE_TIME_ORIGINAL:
            if edit.is_delete:
                library_date = None
            elif isinstance(edit.value, datetime):
                library_date = edit.value
            else:
                library_date = parse_exif_datetime(edit.value)

    stamp = now or datetime.now()
    if not software_edited:
        set_routed(props, route(MetadataField.SOFTWARE), software)
    set_routed(props, route(MetadataField.FILE_DATE), format_exif_datetime(stamp))

    for key in PHYSICAL_KEYS:
        props.pop(key, None)

    logger.debug(
        "Built update intent: {} edit(s), namespaces={}",
        len(edits),
        sorted(k for k, v in props.items() if isinstance(v, dict)),
    )
    return UpdateIntent(
        new_snapshot=props,
        force_reencode=False,
        library_date=library_date,
        library_location=library_location,
    )


def clear_all_except_orientation(metadata: Metadata) -> UpdateIntent:
    """Drop every namespace and top-level key except the orientation.

    Wholesale removal cannot be expressed as a partial block patch, so the
    intent always demands a full re-encode. The library keeps its capture date
    and loses its location.
    """
    props = metadata.properties
    cleared: PropertySnapshot = {}
    if ORIENTATION in props:
        cleared[ORIENTATION] = props[ORIENTATION]
    logger.debug("Clearing metadata; kept keys={}", list(cleared))
    return UpdateIntent(
        new_snapshot=cleared,
        force_reencode=True,
        library_date=metadata.date_time_original,
        library_location=None,
    )


def clear_field(
    metadata: Metadata,
    field: MetadataField,
    *,
    software: str = DEFAULT_SOFTWARE,
    now: datetime | None = None,
) -> UpdateIntent:
    """Remove a single field (e.g. the timestamp or the location)."""
    return apply_batch(metadata, {field: DELETE}, software=software, now=now)


def write_time_original(metadata: Metadata, date: datetime, **kwargs: Any) -> UpdateIntent:
    return apply_batch(metadata, {MetadataField.DATE_TIME_ORIGINAL: date}, **kwargs)


def delete_time_original(metadata: Metadata, **kwargs: Any) -> UpdateIntent:
    return clear_field(metadata, MetadataField.DATE_TIME_ORIGINAL, **kwargs)


def write_location(metadata: Metadata, location: Coordinate, **kwargs: Any) -> UpdateIntent:
    return apply_batch(metadata, {MetadataField.LOCATION: location}, **kwargs)


def delete_location(metadata: Metadata, **kwargs: Any) -> UpdateIntent:
    return clear_field(metadata, MetadataField.LOCATION, **kwargs)
