"""Core domain models for property snapshots, coordinates, edits and intents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union

# A top-level property dictionary: namespace name -> namespace dict, plus scalars.
PropertySnapshot = dict[str, Any]


@dataclass(frozen=True)
class Coordinate:
    """A signed geographic position in decimal degrees."""

    latitude: float
    longitude: float
    altitude: float | None = None


FieldValue = Union[str, int, float, list[int], datetime, Coordinate]


@dataclass(frozen=True)
class AssetOverrides:
    """Library-asset values that take priority over embedded metadata."""

    capture_date: datetime | None = None
    location: Coordinate | None = None


class EditKind(Enum):
    UNCHANGED = "unchanged"
    SET = "set"
    DELETE = "delete"


@dataclass(frozen=True)
class Edit:
    """One entry of an edit batch.

    Attributes:
        kind: Whether the field is left alone, set, or removed.
        value: New value, only meaningful for `EditKind.SET`.
    """

    kind: EditKind
    value: Any = None

    @classmethod
    def set_to(cls, value: FieldValue) -> Edit:
        return cls(EditKind.SET, value)

    @property
    def is_delete(self) -> bool:
        return self.kind is EditKind.DELETE


# Deletion sentinel: distinct from an absent key and from an empty value.
DELETE = Edit(EditKind.DELETE)
UNCHANGED = Edit(EditKind.UNCHANGED)


@dataclass(frozen=True)
class UpdateIntent:
    """Result of a metadata transformation.

    Attributes:
        new_snapshot: Complete property dictionary the writer must embed.
        force_reencode: True when a targeted metadata block rewrite is not enough.
        library_date: Capture date the library asset should hold afterwards.
        library_location: Location the library asset should hold afterwards.
    """

    new_snapshot: PropertySnapshot = field(default_factory=dict)
    force_reencode: bool = False
    library_date: datetime | None = None
    library_location: Coordinate | None = None


class ImageFormat(Enum):
    """Container formats the engine distinguishes for the save policy."""

    JPEG = "jpeg"
    HEIC = "heic"
    PNG = "png"
    TIFF = "tiff"
    WEBP = "webp"
    GIF = "gif"
    RAW = "raw"

    @property
    def is_raw(self) -> bool:
        return self is ImageFormat.RAW
