"""Core domain models for photos, location fixes and clusters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import NamedTuple

UNKNOWN_LABEL = "unknown"


class Coordinate(NamedTuple):
    """A (latitude, longitude) pair in decimal degrees."""

    latitude: float
    longitude: float

    def format(self) -> str:
        return f"{self.latitude:.5f}, {self.longitude:.5f}"


@dataclass(frozen=True)
class LocationFix:
    """A single timestamped GPS observation.

    `accuracy` is the radius of uncertainty in meters.
    """

    timestamp: datetime
    latitude: float
    longitude: float
    accuracy: float = 0.0

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class Place:
    """A reverse-geocoded place name."""

    name: str
    country: str | None = None


@dataclass
class Photo:
    """A photo discovered during a scan.

    Coordinate and place are write-once: once set they are never overwritten
    within a run.
    """

    file_path: str
    capture_date: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
    location_accuracy: float | None = None
    place: Place | None = None
    place_checked: bool = False

    @property
    def file_name(self) -> str:
        return Path(self.file_path).name

    @property
    def coordinate(self) -> Coordinate | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)

    @property
    def has_location(self) -> bool:
        return self.coordinate is not None

    def set_location(self, fix: LocationFix) -> None:
        """Attach the coordinate of `fix` to this photo.

        Raises:
            ValueError: If the photo already carries a coordinate.
        """
        if self.has_location:
            raise ValueError(f"location already set for {self.file_path}")
        self.latitude = fix.latitude
        self.longitude = fix.longitude
        self.location_accuracy = fix.accuracy

    def set_place(self, place: Place | None) -> None:
        """Record the outcome of a place lookup (None when it did not resolve)."""
        if self.place_checked:
            raise ValueError(f"place already looked up for {self.file_path}")
        self.place = place
        self.place_checked = True


class ClusterKind(str, Enum):
    SPATIAL = "spatial"
    TEMPORAL = "temporal"


@dataclass
class Cluster:
    """A group of photos produced by one clustering pass."""

    kind: ClusterKind
    label: str
    items: list[Photo] = field(default_factory=list)
    country: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @property
    def paths(self) -> list[str]:
        return [p.file_path for p in self.items]


@dataclass
class ClusterResult:
    """Clusters of one pass plus the photos classified as noise."""

    kind: ClusterKind
    clusters: list[Cluster] = field(default_factory=list)
    noise: list[Photo] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the pass had no input at all."""
        return not self.clusters and not self.noise

    @property
    def photo_count(self) -> int:
        return sum(len(c.items) for c in self.clusters) + len(self.noise)
