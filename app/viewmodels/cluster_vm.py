from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from app.viewmodels.photo_vm import PhotoVM
from core.models import Cluster, ClusterResult

DAY_FMT = "%Y-%m-%d"
NOISE_LABEL = "Unclustered"


def _day(value: datetime | None) -> str:
    return value.strftime(DAY_FMT) if value else ""


@dataclass
class ClusterVM:
    label: str
    country: str
    start_text: str
    end_text: str
    items: list[PhotoVM] = field(default_factory=list)
    is_noise: bool = False

    @classmethod
    def from_cluster(cls, cluster: Cluster) -> ClusterVM:
        return cls(
            label=cluster.label,
            country=cluster.country or "",
            start_text=_day(cluster.start_date),
            end_text=_day(cluster.end_date),
            items=[PhotoVM(p) for p in cluster.items],
        )


def build_rows(result: ClusterResult, clusters: list[Cluster] | None = None) -> list[ClusterVM]:
    """One row per cluster (in the given order) plus a trailing noise row if any."""
    ordered = clusters if clusters is not None else result.clusters
    rows = [ClusterVM.from_cluster(c) for c in ordered]
    if result.noise:
        rows.append(
            ClusterVM(
                label=NOISE_LABEL,
                country="",
                start_text="",
                end_text="",
                items=[PhotoVM(p) for p in result.noise],
                is_noise=True,
            )
        )
    return rows
