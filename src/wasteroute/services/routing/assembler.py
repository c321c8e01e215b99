"""Turns ordered requests into routes with aggregate metrics."""

from __future__ import annotations

import logging
import random
from decimal import Decimal
from typing import Optional, Sequence

from ...models.domain import Agent, CollectionRequest, Route, WeightedPoint
from ..geospatial import distance_km, open_path_distance
from ..optimization.dispatcher import get_optimizer
from ..parameters import AssemblyConfig, OptimizerConfig
from .models import PathStop, PlannedPath
from .sequencer import sequence

logger = logging.getLogger(__name__)


def estimate_duration_minutes(total_distance_km: float, stop_count: int, config: AssemblyConfig) -> int:
    """Travel time at the average speed plus a fixed service time per stop."""
    travel = int(total_distance_km / config.average_speed_kmh * 60)
    return max(config.min_duration_minutes, travel + config.minutes_per_stop * stop_count)


def order_requests(
    requests: Sequence[CollectionRequest],
    *,
    config: OptimizerConfig | None = None,
    rng: random.Random | None = None,
) -> list[CollectionRequest]:
    """Nearest-neighbour sequence refined by the configured optimizer."""
    config = config or OptimizerConfig()
    by_id = {request.id: request for request in requests}
    points = sequence([request.to_point() for request in requests], start=config.sequencer_start)
    points = get_optimizer(config=config).optimize(points, rng=rng)
    return [by_id[point.id] for point in points]


def assemble_route(
    agent: Optional[Agent],
    ordered_requests: Sequence[CollectionRequest],
    *,
    config: AssemblyConfig | None = None,
    material: Optional[str] = None,
    name: Optional[str] = None,
    description: str = "",
) -> Route:
    """Build a planned route that visits ``ordered_requests`` in the given order."""
    config = config or AssemblyConfig()
    stops = list(ordered_requests)
    total_distance = open_path_distance([request.to_point() for request in stops])

    if name is None:
        owner = agent.name if agent else "unassigned"
        name = f"Route {owner}" if material is None else f"Route {owner} ({material})"

    route = Route(
        agent=agent,
        stops=stops,
        total_distance_km=total_distance,
        estimated_duration_minutes=estimate_duration_minutes(total_distance, len(stops), config),
        max_capacity=Decimal(str(config.route_max_capacity)),
        name=name,
        description=description,
        material=material,
    )
    route.refresh_totals()
    return route


def reoptimize_route(
    route: Route,
    *,
    optimizer_config: OptimizerConfig | None = None,
    assembly_config: AssemblyConfig | None = None,
    rng: random.Random | None = None,
) -> Route:
    """Return a new planned route with the stops of ``route`` re-sequenced.

    The given route is left untouched.
    """
    ordered = order_requests(route.stops, config=optimizer_config, rng=rng)
    rebuilt = assemble_route(
        route.agent,
        ordered,
        config=assembly_config,
        material=route.material,
        name=route.name,
        description=route.description,
    )
    logger.info(
        f"Re-optimized route {route.id}: {route.total_distance_km:.3f} km -> "
        f"{rebuilt.total_distance_km:.3f} km"
    )
    return rebuilt


def plan_points(
    points: Sequence[WeightedPoint],
    *,
    config: AssemblyConfig | None = None,
    start: str | None = None,
) -> PlannedPath:
    """Sequence an ad-hoc list of coordinates and report distance and duration."""
    if len(points) < 2:
        raise ValueError("At least 2 points are required to plan a route.")
    missing = [point.id for point in points if not point.has_coordinates]
    if missing:
        raise ValueError(f"Points without coordinates cannot be planned: {', '.join(missing)}")

    config = config or AssemblyConfig()
    ordered = sequence(points, start=start or OptimizerConfig().sequencer_start)

    stops: list[PathStop] = []
    previous: WeightedPoint | None = None
    for index, point in enumerate(ordered, start=1):
        leg = distance_km(previous, point) if previous is not None else 0.0
        stops.append(
            PathStop(
                point_id=point.id,
                sequence=index,
                latitude=point.latitude,
                longitude=point.longitude,
                distance_from_prev_km=leg,
            )
        )
        previous = point

    total_distance = open_path_distance(ordered)
    logger.info(f"Planned path over {len(ordered)} points: {total_distance:.3f} km")
    return PlannedPath(
        stops=stops,
        total_distance_km=total_distance,
        estimated_duration_minutes=estimate_duration_minutes(total_distance, len(ordered), config),
    )
