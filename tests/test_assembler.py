import random
from decimal import Decimal

import pytest

from wasteroute.models.domain import Agent, CollectionRequest, Material, RouteStatus, WeightedPoint
from wasteroute.services.geospatial import open_path_distance
from wasteroute.services.parameters import AssemblyConfig, OptimizerConfig
from wasteroute.services.routing.assembler import (
    assemble_route,
    estimate_duration_minutes,
    plan_points,
    reoptimize_route,
)

CONFIG = AssemblyConfig(average_speed_kmh=30.0, minutes_per_stop=5, min_duration_minutes=1, route_max_capacity=1000)
GLASS = Material(id="M2", name="Glass", value_per_kg=Decimal("0.20"))


def _request(rid: str, lat: float, lon: float, weight: str = "10") -> CollectionRequest:
    return CollectionRequest(id=rid, latitude=lat, longitude=lon, weight=Decimal(weight), material=GLASS)


def test_empty_route_has_zero_distance_and_minimum_duration():
    route = assemble_route(Agent(id="A", name="Ana"), [], config=CONFIG)

    assert route.total_distance_km == 0
    assert route.estimated_duration_minutes >= 1
    assert route.total_weight == Decimal("0")


def test_single_stop_route_has_zero_distance():
    route = assemble_route(Agent(id="A", name="Ana"), [_request("R1", -19.9, -43.9)], config=CONFIG)

    assert route.total_distance_km == 0
    assert route.estimated_duration_minutes == 5


def test_route_aggregates_and_duration_formula():
    stops = [_request("R1", -19.9, -43.9, "15.5"), _request("R2", -19.95, -43.95, "22.3")]

    route = assemble_route(Agent(id="A", name="Ana"), stops, config=CONFIG, material="Glass")

    distance = open_path_distance([stop.to_point() for stop in stops])
    assert route.total_distance_km == pytest.approx(distance)
    assert route.estimated_duration_minutes == int(distance / 30 * 60) + 10
    assert route.total_weight == Decimal("37.8")
    assert route.total_estimated_value == Decimal("7.560")
    assert route.status is RouteStatus.PLANNED
    assert route.material == "Glass"
    assert route.request_ids == ["R1", "R2"]


def test_duration_floor_applies_without_stops():
    assert estimate_duration_minutes(0.0, 0, CONFIG) == 1


def test_reoptimize_returns_new_route_and_leaves_input_untouched():
    rng = random.Random(9)
    stops = [_request(f"R{i}", -19.9 + rng.uniform(-0.05, 0.05), -43.9 + rng.uniform(-0.05, 0.05)) for i in range(8)]
    original = assemble_route(Agent(id="A", name="Ana"), stops, config=CONFIG)
    original_ids = list(original.request_ids)

    rebuilt = reoptimize_route(
        original,
        optimizer_config=OptimizerConfig(population_size=20, generations=20),
        assembly_config=CONFIG,
        rng=random.Random(1),
    )

    assert rebuilt is not original
    assert rebuilt.id != original.id
    assert original.request_ids == original_ids
    assert sorted(rebuilt.request_ids) == sorted(original_ids)
    assert rebuilt.agent is original.agent


def test_plan_points_orders_and_measures():
    points = [
        WeightedPoint(id="A", latitude=0.0, longitude=0.0),
        WeightedPoint(id="C", latitude=0.0, longitude=0.2),
        WeightedPoint(id="B", latitude=0.0, longitude=0.1),
    ]

    path = plan_points(points, config=CONFIG, start="first")

    assert [stop.point_id for stop in path.stops] == ["A", "B", "C"]
    assert [stop.sequence for stop in path.stops] == [1, 2, 3]
    assert path.stops[0].distance_from_prev_km == 0.0
    assert path.total_distance_km == pytest.approx(sum(stop.distance_from_prev_km for stop in path.stops))
    assert path.estimated_duration_minutes == int(path.total_distance_km / 30 * 60) + 15


def test_plan_points_requires_two_located_points():
    with pytest.raises(ValueError):
        plan_points([WeightedPoint(id="A", latitude=0.0, longitude=0.0)])

    with pytest.raises(ValueError):
        plan_points(
            [
                WeightedPoint(id="A", latitude=0.0, longitude=0.0),
                WeightedPoint(id="B", latitude=None, longitude=None),
            ]
        )
