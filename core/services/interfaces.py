"""Core service interfaces and shared data structures.

This module defines the dataclasses passed between the engine and its
external collaborators (snapshot reader, asset library, image writer) and
the save plan produced by the format policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from core.models import AssetOverrides, Coordinate, ImageFormat, PropertySnapshot, UpdateIntent


@dataclass
class SourceImage:
    """A still image as loaded by a snapshot reader.

    Attributes:
        path: Source file path.
        snapshot: Property snapshot parsed from the container.
        image_format: Detected container format.
    """

    path: str
    snapshot: PropertySnapshot
    image_format: ImageFormat


@dataclass
class SavePlan:
    """Planned write of an update intent.

    Attributes:
        intent: The intent to hand to the writer.
        source_format: Container format of the source.
        target_format: Container format the writer must produce.
        full_reencode: Whether pixels must be re-encoded rather than block-patched.
        output_path: Destination path, with the extension adjusted to the target.
        sync_date: Whether the library capture date must be rewritten.
        sync_location: Whether the library location must be rewritten.
    """

    intent: UpdateIntent
    source_format: ImageFormat
    target_format: ImageFormat
    full_reencode: bool
    output_path: str
    sync_date: bool = False
    sync_location: bool = False


@dataclass
class LibraryState:
    """Date and location the library currently holds for an asset."""

    capture_date: datetime | None = None
    location: Coordinate | None = None
    is_live_photo: bool = False


class ISnapshotReader:
    """Interface for loading a property snapshot from a container."""

    def read(self, path: str) -> SourceImage:
        """Parse `path`; raise `ReadFailedError` or `UnsupportedMediaTypeError`."""
        raise NotImplementedError


class IAssetLibrary:
    """Interface for the photo library that owns asset-level date/location."""

    def get_state(self, asset_id: str) -> LibraryState:
        """Return the library's current date/location for `asset_id`."""
        raise NotImplementedError

    def get_overrides(self, asset_id: str) -> AssetOverrides:
        """Return the values that take priority over embedded metadata."""
        state = self.get_state(asset_id)
        return AssetOverrides(capture_date=state.capture_date, location=state.location)

    def apply_sync(
        self,
        asset_id: str,
        capture_date: datetime | None,
        location: Coordinate | None,
        plan: SavePlan,
    ) -> None:
        """Rewrite the fields flagged in `plan`; others must be left as they are."""
        raise NotImplementedError
