"""Facade tying the snapshot reader, library overrides, intent builder and save policy."""

from __future__ import annotations

from datetime import datetime

from loguru import logger

from core.errors import MetadataError
from core.metadata import Metadata
from core.models import AssetOverrides, Coordinate, UpdateIntent
from core.namespaces import MetadataField
from core.services import display, intent_builder
from core.services.intent_builder import EditBatch
from core.services.interfaces import IAssetLibrary, ISnapshotReader, SavePlan, SourceImage
from core.services.save_policy import plan_save
from infrastructure.settings import JsonSettings, load_settings


class MetadataService:
    """Loads metadata for an image and turns user actions into update intents.

    The service holds no per-image state; each call takes the `Metadata` it
    should work from and returns a new intent.
    """

    def __init__(
        self,
        reader: ISnapshotReader,
        settings: JsonSettings | None = None,
        library: IAssetLibrary | None = None,
    ) -> None:
        self._reader = reader
        self._settings = settings or load_settings()
        self._library = library

    @property
    def software(self) -> str:
        return self._settings.software

    def load(
        self,
        path: str,
        overrides: AssetOverrides | None = None,
        asset_id: str | None = None,
    ) -> tuple[Metadata, SourceImage]:
        """Read `path` and build its `Metadata`.

        Overrides come from the argument, or from the library when `asset_id`
        is given and a library is configured.
        """
        try:
            source = self._reader.read(path)
        except MetadataError as ex:
            logger.error("Failed to load metadata from {}: {}", path, ex)
            raise
        if overrides is None and asset_id is not None and self._library is not None:
            overrides = self._library.get_overrides(asset_id)
        metadata = Metadata(source.snapshot, overrides, self._settings.section_layout())
        logger.info(
            "Loaded metadata for {} ({} section(s), gps={})",
            path,
            len(metadata.sections),
            metadata.raw_gps is not None,
        )
        return metadata, source

    def describe(self, metadata: Metadata) -> list[tuple[str, list[tuple[str, str]]]]:
        """Display rows for `metadata`, using the configured rational epsilon."""
        return display.describe(metadata, self._settings.rational_epsilon)

    def update_metadata(
        self, metadata: Metadata, edits: EditBatch, now: datetime | None = None
    ) -> UpdateIntent:
        logger.info("Applying {} metadata edit(s)", len(edits))
        return intent_builder.apply_batch(metadata, edits, software=self.software, now=now)

    def update_timestamp(
        self, metadata: Metadata, date: datetime, now: datetime | None = None
    ) -> UpdateIntent:
        logger.info("Updating capture date to {}", date)
        return intent_builder.write_time_original(
            metadata, date, software=self.software, now=now
        )

    def remove_timestamp(self, metadata: Metadata, now: datetime | None = None) -> UpdateIntent:
        logger.info("Removing capture date")
        return intent_builder.delete_time_original(metadata, software=self.software, now=now)

    def update_location(
        self, metadata: Metadata, location: Coordinate, now: datetime | None = None
    ) -> UpdateIntent:
        logger.info("Updating location to {:.5f}, {:.5f}", location.latitude, location.longitude)
        return intent_builder.write_location(metadata, location, software=self.software, now=now)

    def remove_location(self, metadata: Metadata, now: datetime | None = None) -> UpdateIntent:
        logger.info("Removing location")
        return intent_builder.delete_location(metadata, software=self.software, now=now)

    def remove_field(
        self, metadata: Metadata, field: MetadataField, now: datetime | None = None
    ) -> UpdateIntent:
        logger.info("Removing field {}", field.value)
        return intent_builder.clear_field(metadata, field, software=self.software, now=now)

    def remove_all(self, metadata: Metadata) -> UpdateIntent:
        logger.info("Removing all metadata except orientation")
        return intent_builder.clear_all_except_orientation(metadata)

    def plan_save(
        self,
        intent: UpdateIntent,
        source: SourceImage,
        asset_id: str | None = None,
    ) -> SavePlan:
        """Plan the write of `intent` for `source`.

        Without a library (or asset id) nothing is compared, so both sync
        flags reflect only whether the intent carries a value.
        """
        state = None
        if asset_id is not None and self._library is not None:
            state = self._library.get_state(asset_id)
        return plan_save(
            intent,
            source.path,
            source.image_format,
            is_live_photo=state.is_live_photo if state else False,
            current_date=state.capture_date if state else None,
            current_location=state.location if state else None,
            date_tolerance=self._settings.date_tolerance,
            location_tolerance=self._settings.location_tolerance,
        )

    def sync_library(self, asset_id: str, plan: SavePlan) -> bool:
        """Push the intent's date/location to the library when the plan asks for it.

        Returns True if the library was asked to change anything.
        """
        if self._library is None:
            logger.debug("No asset library configured; skipping sync for {}", asset_id)
            return False
        if not (plan.sync_date or plan.sync_location):
            logger.debug("Library already up to date for {}", asset_id)
            return False
        self._library.apply_sync(
            asset_id, plan.intent.library_date, plan.intent.library_location, plan
        )
        logger.info(
            "Synced library asset {} (date={}, location={})",
            asset_id,
            plan.sync_date,
            plan.sync_location,
        )
        return True
