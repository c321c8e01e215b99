import random

import pytest

from wasteroute.models.domain import WeightedPoint
from wasteroute.services.clustering.dispatcher import cluster, get_strategy
from wasteroute.services.clustering.kmeans import KMeansClustering
from wasteroute.services.clustering.proximity import ProximityGrouping
from wasteroute.services.parameters import ClusteringConfig


def _point(pid: str, lat: float | None, lon: float | None, weight: float = 10.0) -> WeightedPoint:
    return WeightedPoint(id=pid, latitude=lat, longitude=lon, weight=weight)


def _random_points(count: int, seed: int) -> list[WeightedPoint]:
    rng = random.Random(seed)
    return [
        _point(f"P{index}", -19.9 + rng.uniform(-0.1, 0.1), -43.9 + rng.uniform(-0.1, 0.1))
        for index in range(count)
    ]


def _ids(groups: list[list[WeightedPoint]]) -> list[str]:
    return sorted(point.id for group in groups for point in group)


class _PickedRandom(random.Random):
    """Returns the given indices from ``randrange``, in order."""

    def __init__(self, *picks: int) -> None:
        super().__init__(0)
        self._picks = iter(picks)

    def randrange(self, *args, **kwargs):
        return next(self._picks)


def _count_assignments(strategy: KMeansClustering) -> list[int]:
    calls: list[int] = []
    assign = strategy._assign

    def counting(coords, centroids):
        calls.append(len(coords))
        return assign(coords, centroids)

    strategy._assign = counting
    return calls


def test_kmeans_rejects_non_positive_k():
    with pytest.raises(ValueError):
        KMeansClustering().group(_random_points(3, seed=1), 0)


def test_kmeans_returns_singletons_when_k_covers_all_points():
    points = _random_points(3, seed=2)

    groups = KMeansClustering().group(points, 5, rng=random.Random(0))

    assert groups == [[point] for point in points]


@pytest.mark.parametrize("seed", range(5))
def test_kmeans_partitions_every_point_exactly_once(seed: int):
    points = _random_points(25, seed=seed)

    groups = KMeansClustering().group(points, 4, rng=random.Random(seed))

    assert _ids(groups) == sorted(point.id for point in points)
    assert 1 <= len(groups) <= 4
    assert all(groups)


def test_kmeans_keeps_duplicate_coordinates_distinct():
    points = [_point("A", -19.9, -43.9), _point("B", -19.9, -43.9), _point("C", -19.5, -43.5)]

    groups = KMeansClustering().group(points, 2, rng=random.Random(3))

    assert _ids(groups) == ["A", "B", "C"]


def test_kmeans_separates_distant_blobs():
    west = [_point(f"W{i}", -19.9 + i * 0.001, -44.5) for i in range(5)]
    east = [_point(f"E{i}", -19.9 + i * 0.001, -43.0) for i in range(5)]

    # the first draw seeds one centroid in each blob
    groups = KMeansClustering().group(west + east, 2, rng=_PickedRandom(0, 5))

    assert sorted(sorted(point.id[0] for point in group) for group in groups) == [["E"] * 5, ["W"] * 5]


def test_kmeans_parallel_assignment_matches_serial():
    points = _random_points(25, seed=11)

    serial = KMeansClustering(ClusteringConfig(workers=1)).group(points, 4, rng=random.Random(11))
    parallel = KMeansClustering(ClusteringConfig(workers=3)).group(points, 4, rng=random.Random(11))

    def as_ids(groups):
        return [[point.id for point in group] for group in groups]

    assert as_ids(parallel) == as_ids(serial)


def test_kmeans_stops_at_iteration_cap():
    strategy = KMeansClustering(ClusteringConfig(max_iterations=1))
    calls = _count_assignments(strategy)
    points = _random_points(25, seed=12)

    groups = strategy.group(points, 4, rng=random.Random(12))

    assert len(calls) == 1
    assert _ids(groups) == sorted(point.id for point in points)


def test_kmeans_stops_early_once_centroids_settle():
    west = [_point(f"W{i}", -19.9 + i * 0.001, -44.5) for i in range(5)]
    east = [_point(f"E{i}", -19.9 + i * 0.001, -43.0) for i in range(5)]
    strategy = KMeansClustering(ClusteringConfig(max_iterations=100))
    calls = _count_assignments(strategy)

    strategy.group(west + east, 2, rng=_PickedRandom(0, 5))

    # first pass moves each centroid to its blob mean, second pass confirms it
    assert len(calls) == 2


def test_kmeans_isolates_points_without_coordinates():
    points = _random_points(6, seed=4) + [_point("X", None, None)]

    groups = KMeansClustering().group(points, 2, rng=random.Random(4))

    assert [_point("X", None, None)] in groups
    assert _ids(groups) == sorted(point.id for point in points)


def test_proximity_groups_within_radius():
    config = ClusteringConfig(method="proximity", max_radius_km=2.0, max_stops_per_route=15)
    points = [
        _point("A", -19.9167, -43.9345),
        _point("B", -19.9208, -43.9376),
        _point("C", -19.8519, -43.9695),
    ]

    groups = ProximityGrouping(config).group(points, 1)

    assert [[point.id for point in group] for group in groups] == [["A", "B"], ["C"]]


def test_proximity_respects_stop_and_weight_caps():
    points = [_point(f"P{i}", -19.9 + i * 0.0001, -43.9, weight=100.0) for i in range(6)]

    by_stops = ProximityGrouping(ClusteringConfig(max_stops_per_route=2, max_group_weight=10_000)).group(points, 1)
    by_weight = ProximityGrouping(ClusteringConfig(max_stops_per_route=15, max_group_weight=300)).group(points, 1)

    assert [len(group) for group in by_stops] == [2, 2, 2]
    assert [len(group) for group in by_weight] == [3, 3]


def test_dispatcher_selects_strategy():
    assert isinstance(get_strategy(ClusteringConfig(method="kmeans")), KMeansClustering)
    assert isinstance(get_strategy(ClusteringConfig(method="proximity")), ProximityGrouping)

    with pytest.raises(ValueError):
        get_strategy(ClusteringConfig(method="polar"))

    groups = cluster(_random_points(8, seed=5), 3, config=ClusteringConfig(method="kmeans"), rng=random.Random(5))
    assert len(_ids(groups)) == 8
