"""Namespace names, the closed field vocabulary and the field routing table.

Every other module asks `route()` where a field lives. Key names follow the
ImageIO property conventions so that written snapshots are readable by other
tools without translation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Namespace(str, Enum):
    """Top-level keys of the namespace dictionaries inside a snapshot."""

    EXIF = "{Exif}"
    TIFF = "{TIFF}"
    GPS = "{GPS}"
    IPTC = "{IPTC}"
    APPLE = "{MakerApple}"
    # Scalars stored directly on the snapshot (no nested dictionary)
    TOP_LEVEL = ""


# Top-level scalar keys
PIXEL_WIDTH = "PixelWidth"
PIXEL_HEIGHT = "PixelHeight"
PROFILE_NAME = "ProfileName"
ORIENTATION = "Orientation"

# Codec-derived attributes; the writer recomputes them.
PHYSICAL_KEYS: tuple[str, ...] = (PIXEL_WIDTH, PIXEL_HEIGHT, PROFILE_NAME)

# GPS namespace keys
GPS_LATITUDE = "Latitude"
GPS_LATITUDE_REF = "LatitudeRef"
GPS_LONGITUDE = "Longitude"
GPS_LONGITUDE_REF = "LongitudeRef"
GPS_ALTITUDE = "Altitude"
GPS_ALTITUDE_REF = "AltitudeRef"

# EXIF date-time string layout
EXIF_DATETIME_FMT = "%Y:%m:%d %H:%M:%S"


class MetadataField(Enum):
    """Closed set of fields the engine knows how to read and write."""

    MAKE = "make"
    MODEL = "model"
    SOFTWARE = "software"
    FILE_DATE = "file-date"
    ARTIST = "artist"
    COPYRIGHT = "copyright"
    LENS_MAKE = "lens-make"
    LENS_MODEL = "lens-model"
    APERTURE = "aperture"
    SHUTTER = "shutter"
    ISO = "iso"
    FOCAL_LENGTH = "focal-length"
    FOCAL_LENGTH_35 = "focal-length-35"
    EXPOSURE_BIAS = "exposure-bias"
    EXPOSURE_PROGRAM = "exposure-program"
    METERING_MODE = "metering-mode"
    WHITE_BALANCE = "white-balance"
    FLASH = "flash"
    DATE_TIME_ORIGINAL = "date-time-original"
    LOCATION = "location"
    PIXEL_WIDTH = "pixel-width"
    PIXEL_HEIGHT = "pixel-height"
    PROFILE_NAME = "profile-name"


@dataclass(frozen=True)
class FieldRoute:
    """Where a field is stored and what else moves with it.

    Attributes:
        namespace: Namespace that owns the primary key.
        key: Primary key inside that namespace.
        paired_keys: Keys in the same namespace that always carry the same value.
        mirrors: (namespace, key) pairs in other namespaces written alongside on set.
    """

    namespace: Namespace
    key: str
    paired_keys: tuple[str, ...] = ()
    mirrors: tuple[tuple[Namespace, str], ...] = ()

    @property
    def is_location(self) -> bool:
        return self.namespace is Namespace.GPS


_ROUTES: dict[MetadataField, FieldRoute] = {
    MetadataField.MAKE: FieldRoute(Namespace.TIFF, "Make"),
    MetadataField.MODEL: FieldRoute(Namespace.TIFF, "Model"),
    MetadataField.SOFTWARE: FieldRoute(Namespace.TIFF, "Software"),
    MetadataField.FILE_DATE: FieldRoute(Namespace.TIFF, "DateTime"),
    MetadataField.ARTIST: FieldRoute(
        Namespace.TIFF, "Artist", mirrors=((Namespace.IPTC, "Byline"),)
    ),
    MetadataField.COPYRIGHT: FieldRoute(
        Namespace.TIFF, "Copyright", mirrors=((Namespace.IPTC, "CopyrightNotice"),)
    ),
    MetadataField.DATE_TIME_ORIGINAL: FieldRoute(
        Namespace.EXIF, "DateTimeOriginal", paired_keys=("DateTimeDigitized",)
    ),
    MetadataField.LOCATION: FieldRoute(Namespace.GPS, "Location"),
    MetadataField.LENS_MAKE: FieldRoute(Namespace.EXIF, "LensMake"),
    MetadataField.LENS_MODEL: FieldRoute(Namespace.EXIF, "LensModel"),
    MetadataField.APERTURE: FieldRoute(Namespace.EXIF, "FNumber"),
    MetadataField.SHUTTER: FieldRoute(Namespace.EXIF, "ExposureTime"),
    MetadataField.ISO: FieldRoute(Namespace.EXIF, "ISOSpeedRatings"),
    MetadataField.FOCAL_LENGTH: FieldRoute(Namespace.EXIF, "FocalLength"),
    MetadataField.FOCAL_LENGTH_35: FieldRoute(Namespace.EXIF, "FocalLenIn35mmFilm"),
    MetadataField.EXPOSURE_BIAS: FieldRoute(Namespace.EXIF, "ExposureBiasValue"),
    MetadataField.EXPOSURE_PROGRAM: FieldRoute(Namespace.EXIF, "ExposureProgram"),
    MetadataField.METERING_MODE: FieldRoute(Namespace.EXIF, "MeteringMode"),
    MetadataField.WHITE_BALANCE: FieldRoute(Namespace.EXIF, "WhiteBalance"),
    MetadataField.FLASH: FieldRoute(Namespace.EXIF, "Flash"),
    MetadataField.PIXEL_WIDTH: FieldRoute(Namespace.TOP_LEVEL, PIXEL_WIDTH),
    MetadataField.PIXEL_HEIGHT: FieldRoute(Namespace.TOP_LEVEL, PIXEL_HEIGHT),
    MetadataField.PROFILE_NAME: FieldRoute(Namespace.TOP_LEVEL, PROFILE_NAME),
}


def route(field: MetadataField) -> FieldRoute:
    """Return the storage route for `field`; fields not listed go to EXIF."""
    return _ROUTES.get(field) or FieldRoute(Namespace.EXIF, field.value)

