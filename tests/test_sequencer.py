import pytest

from wasteroute.models.domain import WeightedPoint
from wasteroute.services.routing.sequencer import START_CENTROID, START_FIRST, sequence


def _point(pid: str, lat: float, lon: float) -> WeightedPoint:
    return WeightedPoint(id=pid, latitude=lat, longitude=lon)


def test_sequence_returns_small_inputs_unchanged():
    single = [_point("A", 0.0, 0.0)]

    assert sequence([]) == []
    assert sequence(single) == single


def test_sequence_is_a_permutation():
    points = [_point(f"P{i}", -19.9 + (i % 4) * 0.01, -43.9 + (i // 4) * 0.01) for i in range(12)]

    ordered = sequence(points)

    assert sorted(point.id for point in ordered) == sorted(point.id for point in points)


def test_sequence_from_first_point_visits_nearest_next():
    points = [_point("A", 0.0, 0.0), _point("C", 0.0, 2.0), _point("B", 0.0, 1.0)]

    ordered = sequence(points, start=START_FIRST)

    assert [point.id for point in ordered] == ["A", "B", "C"]


def test_sequence_from_centroid_starts_at_most_central_point():
    points = [_point("A", 0.0, 0.0), _point("C", 0.0, 2.0), _point("B", 0.0, 1.05)]

    ordered = sequence(points, start=START_CENTROID)

    assert ordered[0].id == "B"
    assert [point.id for point in ordered] == ["B", "C", "A"]


def test_sequence_rejects_unknown_start():
    points = [_point("A", 0.0, 0.0), _point("B", 0.0, 1.0)]

    with pytest.raises(ValueError):
        sequence(points, start="depot")
