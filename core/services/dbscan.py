"""Generic density-based clustering (DBSCAN).

The engine knows nothing about photos: it clusters any list of items given a
pairwise distance function. Neighborhoods are found by brute force, which is
quadratic but fine for personal libraries.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass
import math
from typing import TypeVar

T = TypeVar("T")


class ClusteringParameterError(ValueError):
    """Raised when epsilon or min_neighbors cannot produce a meaningful partition."""


class ClusteringCancelled(Exception):
    """Raised when the caller's cancellation check returns True."""


@dataclass
class Partition:
    """Outcome per item index: a cluster id, or None for noise.

    Cluster ids are numbered in discovery order and carry no other meaning.
    """

    labels: list[int | None]

    @property
    def cluster_count(self) -> int:
        ids = [lbl for lbl in self.labels if lbl is not None]
        return max(ids) + 1 if ids else 0

    def clusters(self) -> list[list[int]]:
        """Member indices per cluster, each in input order."""
        groups: list[list[int]] = [[] for _ in range(self.cluster_count)]
        for idx, lbl in enumerate(self.labels):
            if lbl is not None:
                groups[lbl].append(idx)
        return groups

    def noise(self) -> list[int]:
        return [idx for idx, lbl in enumerate(self.labels) if lbl is None]


def _validate(epsilon: float, min_neighbors: int) -> None:
    if isinstance(epsilon, bool) or not isinstance(epsilon, (int, float)):
        raise ClusteringParameterError(f"epsilon must be a number, got {epsilon!r}")
    if not math.isfinite(epsilon) or epsilon <= 0:
        raise ClusteringParameterError(f"epsilon must be positive and finite, got {epsilon}")
    if isinstance(min_neighbors, bool) or not isinstance(min_neighbors, int):
        raise ClusteringParameterError(
            f"min_neighbors must be an integer, got {min_neighbors!r}"
        )
    if min_neighbors < 1:
        raise ClusteringParameterError(f"min_neighbors must be >= 1, got {min_neighbors}")


def dbscan(
    items: Sequence[T],
    distance: Callable[[T, T], float],
    epsilon: float,
    min_neighbors: int,
    should_cancel: Callable[[], bool] | None = None,
) -> Partition:
    """Cluster `items` with DBSCAN.

    Args:
        items: Items to cluster; visited in this order.
        distance: Symmetric distance between two items.
        epsilon: Neighbor radius (inclusive), in the unit of `distance`.
        min_neighbors: Neighborhood size, the item itself included, needed for
            a core point.
        should_cancel: Polled once per outer iteration.

    Returns:
        A `Partition` with one entry per item.

    Raises:
        ClusteringParameterError: On invalid `epsilon` or `min_neighbors`.
        ClusteringCancelled: If `should_cancel` returned True.
    """
    _validate(epsilon, min_neighbors)

    n = len(items)
    labels: list[int | None] = [None] * n
    visited = [False] * n
    next_id = 0

    def neighbors(i: int) -> list[int]:
        return [j for j in range(n) if j == i or distance(items[i], items[j]) <= epsilon]

    for i in range(n):
        if should_cancel is not None and should_cancel():
            raise ClusteringCancelled()
        if visited[i]:
            continue
        visited[i] = True
        seeds = neighbors(i)
        if len(seeds) < min_neighbors:
            # noise for now; may become a border point of a later cluster
            continue

        cluster_id = next_id
        next_id += 1
        labels[i] = cluster_id
        queue = deque(seeds)
        while queue:
            j = queue.popleft()
            if labels[j] is None:
                labels[j] = cluster_id
            if visited[j]:
                continue
            visited[j] = True
            expansion = neighbors(j)
            if len(expansion) >= min_neighbors:
                queue.extend(k for k in expansion if labels[k] is None)

    return Partition(labels=labels)
