"""Tunable parameters for matching, outlier filtering and clustering."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
import math
from typing import Any, Protocol

from core.services.outlier_filter import DEFAULT_MAX_ACCURACY_M, DEFAULT_MAX_SPEED_MPS


class ConfigError(ValueError):
    """Raised for settings values that cannot be used."""


class _SettingsSource(Protocol):
    def get(self, key: str, default: Any | None = None) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class PassParams:
    """DBSCAN parameters for one clustering pass."""

    epsilon: float
    min_neighbors: int


@dataclass(frozen=True)
class PipelineConfig:
    """All knobs of a run, with the stock defaults."""

    spatial: PassParams = field(default_factory=lambda: PassParams(1000.0, 3))
    temporal: PassParams = field(default_factory=lambda: PassParams(600.0, 10))
    max_time_gap: timedelta | None = None
    max_accuracy_m: float = DEFAULT_MAX_ACCURACY_M
    max_speed_mps: float = DEFAULT_MAX_SPEED_MPS

    @classmethod
    def from_settings(cls, settings: _SettingsSource) -> PipelineConfig:
        """Read a config from dotted settings keys, falling back to defaults.

        Raises:
            ConfigError: If a value has the wrong type or range.
        """
        defaults = cls()
        spatial = PassParams(
            epsilon=_positive(settings, "clustering.spatial.epsilon_m", defaults.spatial.epsilon),
            min_neighbors=_count(
                settings, "clustering.spatial.min_neighbors", defaults.spatial.min_neighbors
            ),
        )
        temporal = PassParams(
            epsilon=_positive(
                settings, "clustering.temporal.epsilon_s", defaults.temporal.epsilon
            ),
            min_neighbors=_count(
                settings, "clustering.temporal.min_neighbors", defaults.temporal.min_neighbors
            ),
        )
        gap_s = settings.get("location.max_time_gap_s", None)
        max_time_gap = None
        if gap_s is not None:
            max_time_gap = timedelta(seconds=_positive(settings, "location.max_time_gap_s", 0))
        return cls(
            spatial=spatial,
            temporal=temporal,
            max_time_gap=max_time_gap,
            max_accuracy_m=_positive(settings, "location.max_accuracy_m", defaults.max_accuracy_m),
            max_speed_mps=_positive(settings, "location.max_speed_mps", defaults.max_speed_mps),
        )


def _positive(settings: _SettingsSource, key: str, default: float) -> float:
    raw = settings.get(key, default)
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ConfigError(f"{key} must be a number, got {raw!r}")
    value = float(raw)
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{key} must be positive, got {raw!r}")
    return value


def _count(settings: _SettingsSource, key: str, default: int) -> int:
    raw = settings.get(key, default)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 1:
        raise ConfigError(f"{key} must be an integer >= 1, got {raw!r}")
    return raw
