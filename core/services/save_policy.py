"""Output container policy for metadata writes.

RAW containers are never written back; their edits land in the baseline
photographic format (JPEG). Every other format is written as itself, which
lets the writer patch the metadata block without touching pixel data unless
the intent demands a full re-encode.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from loguru import logger

from core.models import Coordinate, ImageFormat, UpdateIntent
from core.services.interfaces import SavePlan
from core.services.sync_policy import (
    DATE_TOLERANCE_SECONDS,
    LOCATION_TOLERANCE_DEGREES,
    decide_sync,
)

BASELINE_FORMAT = ImageFormat.JPEG

RAW_EXTENSIONS = {
    ".dng",
    ".cr2",
    ".cr3",
    ".crw",
    ".nef",
    ".nrw",
    ".arw",
    ".srf",
    ".sr2",
    ".raf",
    ".orf",
    ".rw2",
    ".pef",
    ".srw",
    ".x3f",
    ".3fr",
    ".iiq",
}

_EXTENSIONS: dict[str, ImageFormat] = {
    ".jpg": ImageFormat.JPEG,
    ".jpeg": ImageFormat.JPEG,
    ".jpe": ImageFormat.JPEG,
    ".heic": ImageFormat.HEIC,
    ".heif": ImageFormat.HEIC,
    ".hif": ImageFormat.HEIC,
    ".png": ImageFormat.PNG,
    ".tif": ImageFormat.TIFF,
    ".tiff": ImageFormat.TIFF,
    ".webp": ImageFormat.WEBP,
    ".gif": ImageFormat.GIF,
    **{ext: ImageFormat.RAW for ext in RAW_EXTENSIONS},
}

# Pillow's `Image.format` names; iPhone JPEGs open as MPO
_PILLOW_FORMATS: dict[str, ImageFormat] = {
    "JPEG": ImageFormat.JPEG,
    "MPO": ImageFormat.JPEG,
    "HEIF": ImageFormat.HEIC,
    "PNG": ImageFormat.PNG,
    "TIFF": ImageFormat.TIFF,
    "WEBP": ImageFormat.WEBP,
    "GIF": ImageFormat.GIF,
}

_PREFERRED_EXTENSION: dict[ImageFormat, str] = {
    ImageFormat.JPEG: ".jpg",
    ImageFormat.HEIC: ".heic",
    ImageFormat.PNG: ".png",
    ImageFormat.TIFF: ".tiff",
    ImageFormat.WEBP: ".webp",
    ImageFormat.GIF: ".gif",
    ImageFormat.RAW: ".dng",
}


def format_from_extension(path: str) -> ImageFormat | None:
    """Return the container format implied by the suffix of `path`."""
    return _EXTENSIONS.get(Path(path).suffix.lower())


def format_from_pillow(name: str | None) -> ImageFormat | None:
    """Map a Pillow format name (e.g. "JPEG", "MPO") to an `ImageFormat`."""
    if not name:
        return None
    return _PILLOW_FORMATS.get(name.upper())


def target_format(source_format: ImageFormat, is_live_photo: bool = False) -> ImageFormat:
    """Return the container the writer must produce for `source_format`.

    `is_live_photo` is recorded for auditing only; it does not change the
    decision.
    """
    target = BASELINE_FORMAT if source_format.is_raw else source_format
    logger.debug(
        "Format policy: source={} live_photo={} -> target={}",
        source_format.value,
        is_live_photo,
        target.value,
    )
    return target


def requires_full_reencode(
    intent: UpdateIntent, source_format: ImageFormat, is_live_photo: bool = False
) -> bool:
    """True when the intent forces it or the container format changes."""
    return intent.force_reencode or target_format(source_format, is_live_photo) != source_format


def output_path(path: str, target: ImageFormat) -> str:
    """Return `path` with its extension adjusted when it does not match `target`."""
    p = Path(path)
    if format_from_extension(path) == target:
        return str(p)
    return str(p.with_suffix(_PREFERRED_EXTENSION[target]))


def plan_save(
    intent: UpdateIntent,
    source_path: str,
    source_format: ImageFormat,
    *,
    is_live_photo: bool = False,
    current_date: datetime | None = None,
    current_location: Coordinate | None = None,
    date_tolerance: float = DATE_TOLERANCE_SECONDS,
    location_tolerance: float = LOCATION_TOLERANCE_DEGREES,
) -> SavePlan:
    """Combine format policy and sync decisions into a `SavePlan`."""
    target = target_format(source_format, is_live_photo)
    sync_date, sync_location = decide_sync(
        intent.library_date,
        current_date,
        intent.library_location,
        current_location,
        date_tolerance=date_tolerance,
        location_tolerance=location_tolerance,
    )
    plan = SavePlan(
        intent=intent,
        source_format=source_format,
        target_format=target,
        full_reencode=intent.force_reencode or target != source_format,
        output_path=output_path(source_path, target),
        sync_date=sync_date,
        sync_location=sync_location,
    )
    logger.info(
        "Save plan for {}: {} -> {} (full_reencode={}, sync_date={}, sync_location={})",
        source_path,
        source_format.value,
        target.value,
        plan.full_reencode,
        sync_date,
        sync_location,
    )
    return plan
