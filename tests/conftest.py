from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta

import pytest

from core.models import LocationFix, Photo, Place
from core.services.interfaces import PhotoMetadata

T0 = datetime(2017, 6, 1, 12, 0, 0)


def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


def fix(seconds: float, lat: float, lon: float, accuracy: float = 10.0) -> LocationFix:
    return LocationFix(timestamp=at(seconds), latitude=lat, longitude=lon, accuracy=accuracy)


def photo(
    name: str,
    seconds: float | None = None,
    lat: float | None = None,
    lon: float | None = None,
) -> Photo:
    return Photo(
        file_path=f"/photos/{name}",
        capture_date=at(seconds) if seconds is not None else None,
        latitude=lat,
        longitude=lon,
    )


class FakeLookup:
    """PlaceLookup recording every call."""

    def __init__(self, places: dict[tuple[float, float], Place] | None = None) -> None:
        self.places = places or {}
        self.calls: list[tuple[float, float]] = []

    def lookup(self, latitude: float, longitude: float) -> Place | None:
        self.calls.append((latitude, longitude))
        return self.places.get((latitude, longitude))


class FakeReader:
    """MetadataReader serving canned metadata; unknown paths are not images."""

    def __init__(self, metadata: dict[str, PhotoMetadata]) -> None:
        self.metadata = metadata

    def read(self, path: str) -> PhotoMetadata | None:
        return self.metadata.get(path)


class FakeWalker:
    def __init__(self, paths: list[str]) -> None:
        self.paths = paths

    def walk(self, root: str) -> Iterator[str]:
        return iter(self.paths)


class FakeParser:
    def __init__(self, fixes: list[LocationFix] | None = None, error: Exception | None = None):
        self.fixes = fixes or []
        self.error = error

    def parse(self, path: str) -> list[LocationFix]:
        if self.error is not None:
            raise self.error
        return list(self.fixes)


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup()
