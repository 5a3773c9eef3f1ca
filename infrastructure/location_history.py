"""Google location history (Takeout JSON) parsing.

Supports both export flavours: the legacy one with `timestampMs` and the newer
`Records.json` with ISO-8601 `timestamp` values. Coordinates are stored as
integers scaled by 1e7.
"""

from __future__ import annotations

from datetime import datetime
import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.models import LocationFix

E7 = 1e7


class LocationHistoryError(Exception):
    """Raised when a location history file cannot be read or understood."""


def _to_local_naive(dt: datetime) -> datetime:
    # EXIF capture dates carry no zone and are local camera time
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def parse_timestamp(entry: dict[str, Any]) -> datetime | None:
    """Return the entry's timestamp as naive local time, or None if absent/invalid."""
    raw_ms = entry.get("timestampMs")
    if raw_ms is not None:
        try:
            return datetime.fromtimestamp(int(raw_ms) / 1000.0)
        except (TypeError, ValueError, OverflowError, OSError):
            return None
    raw = entry.get("timestamp")
    if isinstance(raw, str) and raw:
        try:
            return _to_local_naive(datetime.fromisoformat(raw.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def parse_entry(entry: Any) -> LocationFix | None:
    """Convert one JSON entry into a `LocationFix`; None when incomplete."""
    if not isinstance(entry, dict):
        return None
    when = parse_timestamp(entry)
    lat_e7 = entry.get("latitudeE7")
    lon_e7 = entry.get("longitudeE7")
    if when is None or lat_e7 is None or lon_e7 is None:
        return None
    try:
        lat = int(lat_e7) / E7
        lon = int(lon_e7) / E7
        accuracy = float(entry.get("accuracy", 0) or 0)
    except (TypeError, ValueError):
        return None
    # Older exports overflow for negative coordinates
    if lat > 90:
        lat -= 2**32 / E7
    if lon > 180:
        lon -= 2**32 / E7
    return LocationFix(timestamp=when, latitude=lat, longitude=lon, accuracy=accuracy)


class GoogleLocationHistoryParser:
    """`LocationLogParser` for Google Takeout location history files."""

    def parse(self, path: str) -> list[LocationFix]:
        """Read `path` and return its fixes sorted ascending by timestamp.

        Raises:
            LocationHistoryError: If the file is unreadable, not JSON, or has
                no `locations` array.
        """
        file_path = Path(path)
        try:
            with file_path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as ex:
            raise LocationHistoryError(f"Cannot read location history {path}: {ex}") from ex
        except json.JSONDecodeError as ex:
            raise LocationHistoryError(f"Invalid JSON in {path}: {ex}") from ex

        entries = data.get("locations") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise LocationHistoryError(f"No 'locations' array in {path}")

        fixes: list[LocationFix] = []
        skipped = 0
        for entry in entries:
            fix = parse_entry(entry)
            if fix is None:
                skipped += 1
                continue
            fixes.append(fix)

        fixes.sort(key=lambda f: f.timestamp)
        if skipped:
            logger.debug("Skipped {} incomplete location entries in {}", skipped, path)
        logger.info("Loaded {} location fixes from {}", len(fixes), path)
        return fixes
