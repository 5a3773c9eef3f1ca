import pytest

from conftest import at
from core.models import Cluster, ClusterKind
from core.services.sort_service import ClusterSortService, SortBy


def _cluster(label, start=None, country=None):
    return Cluster(
        kind=ClusterKind.SPATIAL,
        label=label,
        country=country,
        start_date=at(start) if start is not None else None,
    )


CLUSTERS = [
    _cluster("rome", 300, "Italy"),
    _cluster("undated", None, "France"),
    _cluster("nowhere", 50, None),
    _cluster("paris", 100, "France"),
]


def test_sort_by_year_puts_undated_last():
    ordered = ClusterSortService().sort(CLUSTERS, SortBy.YEAR)
    assert [c.label for c in ordered] == ["nowhere", "paris", "rome", "undated"]


def test_sort_by_country_then_date_with_unknown_last():
    ordered = ClusterSortService().sort(CLUSTERS, SortBy.COUNTRY)
    assert [c.label for c in ordered] == ["paris", "undated", "rome", "nowhere"]


def test_sort_does_not_mutate_input():
    before = list(CLUSTERS)
    ClusterSortService().sort(CLUSTERS, SortBy.COUNTRY)
    assert CLUSTERS == before


def test_unknown_order_is_rejected():
    with pytest.raises(ValueError):
        ClusterSortService().sort(CLUSTERS, "altitude")
