"""Sorting service for `Cluster` lists.

Clusters can be listed by year (start date) or by country. Missing values sort
last and the original list is left untouched.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any

from core.models import Cluster


class SortBy(str, Enum):
    YEAR = "year"
    COUNTRY = "country"


def _date_key(value: datetime | None) -> tuple[int, Any]:
    return (1, datetime.min) if value is None else (0, value)


class ClusterSortService:
    """Provides ordering utilities for cluster lists."""

    def sort(self, clusters: Iterable[Cluster], order: SortBy) -> list[Cluster]:
        """Return clusters sorted by `order`.

        Args:
            clusters: Clusters to sort.
            order: `SortBy.YEAR` sorts by start date; `SortBy.COUNTRY` sorts by
                country name and then start date.
        """
        items = list(clusters)
        if order is SortBy.YEAR:
            return sorted(items, key=lambda c: _date_key(c.start_date))
        if order is SortBy.COUNTRY:
            return sorted(
                items,
                key=lambda c: (
                    (1, "") if not c.country else (0, c.country.casefold()),
                    _date_key(c.start_date),
                ),
            )
        raise ValueError(f"Unsupported sort order: {order!r}")
