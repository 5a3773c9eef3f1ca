"""Turns a clustering partition into labelled, display-ready clusters.

Each cluster gets a representative label. A place already resolved on a member
wins; otherwise one place lookup is attempted per cluster, using the first
member that has a coordinate, and its outcome is cached onto that photo.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from core.models import UNKNOWN_LABEL, Cluster, ClusterKind, ClusterResult, Photo, Place
from core.services.dbscan import Partition
from core.services.interfaces import PlaceLookup


class ClusterBuilder:
    """Builds `ClusterResult` objects from engine output."""

    def __init__(self, place_lookup: PlaceLookup | None = None) -> None:
        self._lookup = place_lookup

    def build(
        self, kind: ClusterKind, photos: Sequence[Photo], partition: Partition
    ) -> ClusterResult:
        """Assemble clusters and noise for one pass.

        Args:
            kind: Which pass produced `partition`.
            photos: The items that were clustered, in the same order.
            partition: Engine output for `photos`.
        """
        if len(partition.labels) != len(photos):
            raise ValueError(
                f"partition covers {len(partition.labels)} items but {len(photos)} photos given"
            )

        result = ClusterResult(kind=kind)
        for indices in partition.clusters():
            members = [photos[i] for i in indices]
            result.clusters.append(self._make_cluster(kind, members))
        result.noise = [photos[i] for i in partition.noise()]

        logger.info(
            "{} pass: {} clusters, {} noise photos",
            kind.value,
            len(result.clusters),
            len(result.noise),
        )
        return result

    def _make_cluster(self, kind: ClusterKind, members: list[Photo]) -> Cluster:
        place = self._representative_place(members)
        dates = [p.capture_date for p in members if p.capture_date is not None]

        if place is not None:
            label = place.name
        else:
            coord = next((p.coordinate for p in members if p.has_location), None)
            label = coord.format() if coord is not None else UNKNOWN_LABEL

        return Cluster(
            kind=kind,
            label=label,
            items=members,
            country=place.country if place is not None else None,
            start_date=min(dates) if dates else None,
            end_date=max(dates) if dates else None,
        )

    def _representative_place(self, members: list[Photo]) -> Place | None:
        for p in members:
            if p.place is not None:
                return p.place

        rep = next((p for p in members if p.has_location), None)
        if rep is None or rep.place_checked or self._lookup is None:
            return None

        coord = rep.coordinate
        try:
            place = self._lookup.lookup(coord.latitude, coord.longitude)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Place lookup failed for {}: {}", coord.format(), ex)
            place = None
        rep.set_place(place)
        if place is None:
            logger.debug("No place found near {}", coord.format())
        return place
