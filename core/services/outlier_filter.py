"""Outlier removal for location logs.

A fix is dropped when its accuracy radius is too large, or when it is a spike:
reaching it from the previous kept fix and leaving it for the next kept fix
both require an implausible speed. Spike removal runs until the log is stable,
which makes the filter idempotent.
"""

from __future__ import annotations

from collections.abc import Sequence
import math

from loguru import logger

from core.models import LocationFix
from core.services.distance import haversine_m

DEFAULT_MAX_ACCURACY_M = 1000.0
DEFAULT_MAX_SPEED_MPS = 300.0


def implied_speed(a: LocationFix, b: LocationFix) -> float:
    """Speed in m/s needed to travel between two fixes.

    The distance is reduced by both accuracy radii since either fix may lie
    anywhere inside its circle.
    """
    dist = haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)
    effective = max(0.0, dist - a.accuracy - b.accuracy)
    dt = abs((b.timestamp - a.timestamp).total_seconds())
    if effective == 0.0:
        return 0.0
    if dt == 0.0:
        return math.inf
    return effective / dt


def _drop_spikes(fixes: list[LocationFix], max_speed_mps: float) -> tuple[list[LocationFix], int]:
    """Single left-to-right pass; returns (kept, removed_count)."""
    if len(fixes) < 3:
        return fixes, 0

    kept: list[LocationFix] = [fixes[0]]
    removed = 0
    for i in range(1, len(fixes) - 1):
        prev = kept[-1]
        curr = fixes[i]
        nxt = fixes[i + 1]
        if implied_speed(prev, curr) > max_speed_mps and implied_speed(curr, nxt) > max_speed_mps:
            logger.debug(
                "Dropping spike fix at {} ({}, {})", curr.timestamp, curr.latitude, curr.longitude
            )
            removed += 1
            continue
        kept.append(curr)
    kept.append(fixes[-1])
    return kept, removed


def filter_outliers(
    log: Sequence[LocationFix],
    max_accuracy_m: float = DEFAULT_MAX_ACCURACY_M,
    max_speed_mps: float = DEFAULT_MAX_SPEED_MPS,
) -> list[LocationFix]:
    """Return `log` without anomalous fixes, preserving order.

    Args:
        log: Fixes sorted ascending by timestamp.
        max_accuracy_m: Fixes with a larger accuracy radius are dropped.
        max_speed_mps: Speed above which a round trip marks a spike.

    Returns:
        A new list; logs with fewer than 2 fixes are returned unchanged.
    """
    if len(log) < 2:
        return list(log)

    fixes = [f for f in log if f.accuracy <= max_accuracy_m]
    inaccurate = len(log) - len(fixes)

    spikes = 0
    while True:
        fixes, removed = _drop_spikes(fixes, max_speed_mps)
        if not removed:
            break
        spikes += removed

    if inaccurate or spikes:
        logger.info(
            "Outlier filter removed {} inaccurate and {} spike fixes ({} kept)",
            inaccurate,
            spikes,
            len(fixes),
        )
    return fixes
