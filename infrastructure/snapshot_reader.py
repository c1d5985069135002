"""Pillow-backed property snapshot reader.

Builds the ImageIO-style snapshot the engine works on (`{TIFF}`, `{Exif}`,
`{GPS}`, `{IPTC}` plus top-level pixel size, orientation and colour profile)
from an image file. HEIC/HEIF is decoded through pillow-heif when installed;
RAW containers Pillow cannot open fall back to rawpy for their dimensions.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any

from loguru import logger
from PIL import ExifTags, Image, ImageCms, IptcImagePlugin
from PIL.TiffImagePlugin import IFDRational

from core.errors import ReadFailedError, UnsupportedMediaTypeError
from core.models import ImageFormat, PropertySnapshot
from core.namespaces import ORIENTATION, PIXEL_HEIGHT, PIXEL_WIDTH, PROFILE_NAME, Namespace
from core.services.interfaces import ISnapshotReader, SourceImage
from core.services.save_policy import format_from_extension, format_from_pillow

try:  # pragma: no cover - optional dependency
    from pillow_heif import register_heif_opener  # type: ignore

    register_heif_opener()
    PIL_HEIF_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    PIL_HEIF_AVAILABLE = False

# Optional rawpy for RAW containers Pillow cannot decode
try:  # pragma: no cover - optional dependency
    import rawpy  # type: ignore

    RAWPY_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    RAWPY_AVAILABLE = False

VIDEO_EXTENSIONS = {".mp4", ".mov", ".m4v", ".webm", ".avi", ".mkv", ".3gp"}

_TAG_EXIF_IFD = 0x8769
_TAG_GPS_IFD = 0x8825
_TAG_ORIENTATION = 0x0112
_TAG_MAKER_NOTE = 0x927C

# Pillow tag names that differ from the ImageIO key names
_RENAMED = {
    "FocalLengthIn35mmFilm": "FocalLenIn35mmFilm",
    "ExifImageWidth": "PixelXDimension",
    "ExifImageHeight": "PixelYDimension",
}

_IPTC_KEYS = {
    (2, 5): "ObjectName",
    (2, 25): "Keywords",
    (2, 80): "Byline",
    (2, 116): "CopyrightNotice",
    (2, 120): "Caption/Abstract",
}

_DMS_KEYS = {"Latitude", "Longitude", "DestLatitude", "DestLongitude"}


def _convert(value: Any) -> Any:
    """Convert Pillow tag values to plain Python values; None drops the tag."""
    if isinstance(value, IFDRational):
        if value.denominator == 1:
            return int(value.numerator)
        return float(value)
    if isinstance(value, bytes):
        text = value.rstrip(b"\x00").decode("utf-8", errors="replace")
        return text if text.isprintable() else None
    if isinstance(value, str):
        return value.rstrip("\x00").strip()
    if isinstance(value, (tuple, list)):
        items = [_convert(v) for v in value]
        return [v for v in items if v is not None]
    return value


def dms_to_degrees(value: Any) -> float | None:
    """Convert a (degrees, minutes, seconds) triple to decimal degrees."""
    if isinstance(value, (int, float, IFDRational)):
        return float(value)
    if not isinstance(value, (tuple, list)) or not value:
        return None
    try:
        parts = [float(v) for v in value] + [0.0, 0.0]
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    return parts[0] + parts[1] / 60.0 + parts[2] / 3600.0


def _tag_dict(tags: Any, names: dict[int, str], skip: set[int]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for tag_id, raw in tags.items():
        if tag_id in skip:
            continue
        name = names.get(tag_id)
        if name is None:
            continue
        value = _convert(raw)
        if value is None or value == "" or value == []:
            continue
        result[_RENAMED.get(name, name)] = value
    return result


def gps_namespace(gps_ifd: Any) -> dict[str, Any]:
    """Map a Pillow GPS IFD to `{GPS}` keys with decimal-degree magnitudes."""
    result: dict[str, Any] = {}
    for tag_id, raw in gps_ifd.items():
        name = ExifTags.GPSTAGS.get(tag_id)
        if name is None:
            continue
        key = name[3:] if name.startswith("GPS") else name
        if key in _DMS_KEYS:
            value: Any = dms_to_degrees(raw)
        elif key == "AltitudeRef" and isinstance(raw, bytes):
            value = raw[0] if raw else 0
        else:
            value = _convert(raw)
        if value is None or value == "":
            continue
        result[key] = value
    return result


def _iptc_dict(im: Image.Image) -> dict[str, Any]:
    try:
        info = IptcImagePlugin.getiptcinfo(im)
    except (OSError, SyntaxError, ValueError) as ex:
        logger.debug("IPTC read failed: {}", ex)
        return {}
    result: dict[str, Any] = {}
    for record, key in _IPTC_KEYS.items():
        raw = (info or {}).get(record)
        if raw is None:
            continue
        if isinstance(raw, list):
            result[key] = [v.decode("utf-8", errors="replace") for v in raw]
        else:
            result[key] = raw.decode("utf-8", errors="replace")
    return result


def _profile_name(im: Image.Image) -> str | None:
    icc = im.info.get("icc_profile")
    if not icc:
        return None
    try:
        profile = ImageCms.ImageCmsProfile(BytesIO(icc))
        return ImageCms.getProfileDescription(profile).strip() or None
    except (OSError, ImageCms.PyCMSError) as ex:
        logger.debug("ICC profile parse failed: {}", ex)
        return None


def snapshot_from_image(im: Image.Image) -> PropertySnapshot:
    """Build a property snapshot from an open Pillow image."""
    snapshot: PropertySnapshot = {PIXEL_WIDTH: im.width, PIXEL_HEIGHT: im.height}
    exif = im.getexif()

    orientation = exif.get(_TAG_ORIENTATION)
    if orientation is not None:
        snapshot[ORIENTATION] = int(orientation)

    tiff = _tag_dict(
        exif, ExifTags.TAGS, {_TAG_EXIF_IFD, _TAG_GPS_IFD, _TAG_ORIENTATION}
    )
    exif_ifd = _tag_dict(exif.get_ifd(_TAG_EXIF_IFD), ExifTags.TAGS, {_TAG_MAKER_NOTE})
    iso = exif_ifd.get("ISOSpeedRatings")
    if isinstance(iso, int):
        exif_ifd["ISOSpeedRatings"] = [iso]
    gps = gps_namespace(exif.get_ifd(_TAG_GPS_IFD))
    iptc = _iptc_dict(im)

    for ns, values in (
        (Namespace.TIFF, tiff),
        (Namespace.EXIF, exif_ifd),
        (Namespace.GPS, gps),
        (Namespace.IPTC, iptc),
    ):
        if values:
            snapshot[ns.value] = values

    profile = _profile_name(im)
    if profile:
        snapshot[PROFILE_NAME] = profile
    return snapshot


class PillowSnapshotReader(ISnapshotReader):
    """Reads still images from disk into property snapshots."""

    def read(self, path: str) -> SourceImage:
        ext = Path(path).suffix.lower()
        if ext in VIDEO_EXTENSIONS:
            raise UnsupportedMediaTypeError(f"Not a still image: {path}", path=path)
        by_ext = format_from_extension(path)

        try:
            with Image.open(path) as im:
                image_format = ImageFormat.RAW if by_ext is ImageFormat.RAW else (
                    format_from_pillow(im.format) or by_ext
                )
                if image_format is None:
                    raise UnsupportedMediaTypeError(
                        f"Unsupported container {im.format}: {path}", path=path
                    )
                snapshot = snapshot_from_image(im)
        except UnsupportedMediaTypeError:
            raise
        except (OSError, SyntaxError, ValueError) as ex:
            if by_ext is ImageFormat.RAW:
                return SourceImage(path, self._read_raw(path, ex), ImageFormat.RAW)
            logger.error("Snapshot read failed for {}: {}", path, ex)
            raise ReadFailedError(str(ex), path=path) from ex

        logger.info(
            "Read snapshot from {} ({}, {} namespaces)",
            path,
            image_format.value,
            sum(1 for v in snapshot.values() if isinstance(v, dict)),
        )
        return SourceImage(path, snapshot, image_format)

    def _read_raw(self, path: str, cause: Exception) -> PropertySnapshot:
        """Fallback for RAW files: dimensions only, via rawpy."""
        if not RAWPY_AVAILABLE:
            logger.error("RAW read failed for {} and rawpy is unavailable: {}", path, cause)
            raise ReadFailedError(str(cause), path=path) from cause
        try:
            with rawpy.imread(path) as raw:  # type: ignore[attr-defined]
                sizes = raw.sizes
                return {PIXEL_WIDTH: int(sizes.width), PIXEL_HEIGHT: int(sizes.height)}
        except (OSError, rawpy.LibRawError) as ex:  # type: ignore[attr-defined]
            logger.error("rawpy read failed for {}: {}", path, ex)
            raise ReadFailedError(str(ex), path=path) from ex
