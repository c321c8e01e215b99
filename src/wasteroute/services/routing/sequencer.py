"""Nearest-neighbour visit ordering for one group of stops."""

from __future__ import annotations

import math
from typing import Sequence

from ...models.domain import WeightedPoint
from ..geospatial import distance_km, mean_center

START_CENTROID = "centroid"
START_FIRST = "first"


def _most_central(points: Sequence[WeightedPoint]) -> int:
    lat_mean, lon_mean = mean_center(points)
    best_index = 0
    best_offset = math.inf
    for index, point in enumerate(points):
        if not point.has_coordinates:
            continue
        offset = math.hypot(point.latitude - lat_mean, point.longitude - lon_mean)
        if offset < best_offset:
            best_offset = offset
            best_index = index
    return best_index


def sequence(points: Sequence[WeightedPoint], *, start: str = START_CENTROID) -> list[WeightedPoint]:
    """Order ``points`` by repeatedly visiting the nearest unvisited one.

    ``start`` selects the first stop: ``"centroid"`` picks the point closest to
    the mean coordinate of the group, ``"first"`` keeps the input's first point.
    Ties on distance go to the earliest point in input order.
    """
    if len(points) <= 1:
        return list(points)

    if start == START_CENTROID:
        current_index = _most_central(points)
    elif start == START_FIRST:
        current_index = 0
    else:
        raise ValueError(f"Unknown sequencer start '{start}'.")

    unvisited = list(range(len(points)))
    unvisited.remove(current_index)
    ordered = [points[current_index]]

    while unvisited:
        current = points[current_index]
        current_index = min(unvisited, key=lambda index: distance_km(current, points[index]))
        unvisited.remove(current_index)
        ordered.append(points[current_index])

    return ordered
