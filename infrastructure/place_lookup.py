"""Offline reverse geocoding using the `reverse_geocode` dataset."""

from __future__ import annotations

from loguru import logger
import reverse_geocode

from core.models import Place


class ReverseGeocodeLookup:
    """`PlaceLookup` resolving a coordinate to the nearest known city.

    The dataset ships with the library, so no network access happens.
    """

    def lookup(self, latitude: float, longitude: float) -> Place | None:
        """Return the nearest city and its country, or None when unresolved."""
        results = reverse_geocode.search([(latitude, longitude)])
        if not results:
            return None
        geo = results[0]
        city = geo.get("city") or ""
        country = geo.get("country") or None
        if not city:
            logger.debug("No city near ({}, {})", latitude, longitude)
            return None
        return Place(name=city, country=country)
