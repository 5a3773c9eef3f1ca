"""Collaborator interfaces and shared data structures.

The core never reads files or resolves place names itself; it talks to these
protocols. Default implementations live in `infrastructure`.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from core.models import LocationFix, Place


@dataclass
class PhotoMetadata:
    """Metadata extracted from an image file.

    Attributes:
        capture_date: Capture time, or None when the image carries none.
        latitude: Embedded GPS latitude, if any.
        longitude: Embedded GPS longitude, if any.
    """

    capture_date: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None


class MetadataReader(Protocol):
    """Reads capture metadata from image files."""

    def read(self, path: str) -> PhotoMetadata | None:
        """Return metadata for `path`, or None if it is not a readable image.

        Must not raise for unsupported files.
        """
        raise NotImplementedError


class DirectoryWalker(Protocol):
    """Enumerates candidate files under a directory."""

    def walk(self, root: str) -> Iterator[str]:
        """Lazily yield file paths found under `root`."""
        raise NotImplementedError


class LocationLogParser(Protocol):
    """Parses a location history file into fixes."""

    def parse(self, path: str) -> list[LocationFix]:
        """Return fixes sorted ascending by timestamp."""
        raise NotImplementedError


class PlaceLookup(Protocol):
    """Resolves a coordinate to a place name."""

    def lookup(self, latitude: float, longitude: float) -> Place | None:
        """Return the place at (latitude, longitude), or None when not found."""
        raise NotImplementedError
