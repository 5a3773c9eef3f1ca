"""EXIF metadata extraction (capture date and embedded GPS) via Pillow.

This reader uses best-effort parsing and never raises on unsupported or broken
files: `read` returns None for anything Pillow cannot open, and a
`PhotoMetadata` with empty fields when the image has no usable tags.
"""

from __future__ import annotations

from datetime import datetime
import math
from typing import Any

from loguru import logger
from PIL import Image, UnidentifiedImageError

from core.services.interfaces import PhotoMetadata

EXIF_DT_FMT = "%Y:%m:%d %H:%M:%S"

TAG_DATETIME = 306
TAG_DATETIME_ORIGINAL = 36867
IFD_EXIF = 0x8769
IFD_GPS = 0x8825

GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4


def parse_exif_datetime(value: Any) -> datetime | None:
    """Parse an EXIF date string such as "2021:07:14 18:02:33"; None on failure."""
    if not value:
        return None
    val_str = str(value).strip().rstrip("\x00")
    try:
        # Common EXIF format: "YYYY:MM:DD HH:MM:SS"
        if len(val_str) >= 19 and val_str[4] == ":" and val_str[7] == ":":
            return datetime.strptime(val_str[:19], EXIF_DT_FMT)
        return datetime.fromisoformat(val_str.replace("/", "-"))
    except (ValueError, TypeError):
        logger.debug("Unparseable EXIF date: {!r}", val_str)
        return None


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        # Legacy (numerator, denominator) pairs
        num, den = value
        return float(num) / float(den)


def dms_to_degrees(dms: Any, ref: Any) -> float | None:
    """Convert EXIF degrees/minutes/seconds and an N/S/E/W ref to decimal degrees."""
    if not dms or not ref:
        return None
    try:
        degrees = _to_float(dms[0]) + _to_float(dms[1]) / 60.0 + _to_float(dms[2]) / 3600.0
    except (TypeError, ValueError, IndexError, ZeroDivisionError):
        logger.debug("Invalid GPS DMS value: {!r}", dms)
        return None
    if not math.isfinite(degrees):
        logger.debug("Non-finite GPS DMS value: {!r}", dms)
        return None
    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")
    if str(ref).strip().upper() in ("S", "W"):
        degrees = -degrees
    return degrees


class ExifMetadataReader:
    """`MetadataReader` backed by Pillow's EXIF support."""

    def read(self, path: str) -> PhotoMetadata | None:
        """Return capture date and embedded GPS for `path`, or None if not an image."""
        try:
            with Image.open(path) as im:
                exif = im.getexif()
                exif_ifd = exif.get_ifd(IFD_EXIF)
                gps_ifd = exif.get_ifd(IFD_GPS)
                capture = parse_exif_datetime(
                    exif_ifd.get(TAG_DATETIME_ORIGINAL) or exif.get(TAG_DATETIME)
                )
                lat = dms_to_degrees(gps_ifd.get(GPS_LATITUDE), gps_ifd.get(GPS_LATITUDE_REF))
                lon = dms_to_degrees(gps_ifd.get(GPS_LONGITUDE), gps_ifd.get(GPS_LONGITUDE_REF))
        except UnidentifiedImageError:
            return None
        except (OSError, ValueError, TypeError, SyntaxError, Image.DecompressionBombError) as ex:
            logger.debug("EXIF read failed for {}: {}", path, ex)
            return None

        if lat is None or lon is None:
            lat = lon = None
        return PhotoMetadata(capture_date=capture, latitude=lat, longitude=lon)
