"""Nearest-in-time matching of photos against a location log.

The log must be sorted ascending by timestamp. Matching is a binary search
followed by a comparison of the two bracketing fixes.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from core.models import Coordinate, LocationFix, Photo


@dataclass
class LocationMatch:
    """A fix chosen for a photo.

    Attributes:
        photo: The photo that will receive the coordinate.
        fix: Closest fix in time.
        gap: Absolute time difference between photo and fix.
    """

    photo: Photo
    fix: LocationFix
    gap: timedelta


def _timestamp(fix: LocationFix) -> datetime:
    return fix.timestamp


def find_closest(log: Sequence[LocationFix], when: datetime) -> LocationFix | None:
    """Return the fix closest in time to `when`; ties go to the earliest fix."""
    if not log:
        return None

    idx = bisect_left(log, when, key=_timestamp)
    if idx == 0:
        return log[0]
    if idx == len(log):
        return log[bisect_left(log, log[-1].timestamp, key=_timestamp)]

    after = log[idx]
    before = log[bisect_left(log, log[idx - 1].timestamp, key=_timestamp)]
    if when - before.timestamp <= after.timestamp - when:
        return before
    return after


def match(
    photo_time: datetime,
    log: Sequence[LocationFix],
    max_time_gap: timedelta | None = None,
) -> Coordinate | None:
    """Coordinate of the closest fix, or None if the log is empty or too far away."""
    fix = find_closest(log, photo_time)
    if fix is None:
        return None
    if max_time_gap is not None and abs(fix.timestamp - photo_time) > max_time_gap:
        return None
    return fix.coordinate


class LocationMatcher:
    """Finds location fixes for photos lacking a coordinate."""

    def __init__(self, max_time_gap: timedelta | None = None) -> None:
        """Create a matcher.

        Args:
            max_time_gap: Reject fixes further away in time than this. None
                accepts any fix, however distant.
        """
        self._max_time_gap = max_time_gap

    def match_photos(
        self, photos: Iterable[Photo], log: Sequence[LocationFix]
    ) -> list[LocationMatch]:
        """Compute matches without touching the photos.

        Photos that already carry a coordinate or have no capture date are
        skipped.
        """
        matches: list[LocationMatch] = []
        if not log:
            return matches

        skipped_gap = 0
        for photo in photos:
            if photo.has_location or photo.capture_date is None:
                continue
            fix = find_closest(log, photo.capture_date)
            if fix is None:
                continue
            gap = abs(fix.timestamp - photo.capture_date)
            if self._max_time_gap is not None and gap > self._max_time_gap:
                skipped_gap += 1
                continue
            logger.debug(
                "{} @ {} -> fix {} ({}, {}) accuracy={}",
                photo.file_name,
                photo.capture_date,
                fix.timestamp,
                fix.latitude,
                fix.longitude,
                fix.accuracy,
            )
            matches.append(LocationMatch(photo=photo, fix=fix, gap=gap))

        if skipped_gap:
            logger.info("{} photos had no fix within {}", skipped_gap, self._max_time_gap)
        return matches
