"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ..models.domain import WeightedPoint

EARTH_RADIUS_KM = 6371.0
# Returned instead of raising when a coordinate is missing, so the point is never "nearest".
UNREACHABLE_DISTANCE_KM = 999999999.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: WeightedPoint, b: WeightedPoint) -> float:
    """Great-circle distance between two points, or the sentinel if either lacks coordinates."""
    if not a.has_coordinates or not b.has_coordinates:
        return UNREACHABLE_DISTANCE_KM
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def open_path_distance(points: Sequence[WeightedPoint]) -> float:
    """Sum of consecutive leg distances, without a return leg to the start."""
    if len(points) <= 1:
        return 0.0
    return sum(distance_km(points[i], points[i + 1]) for i in range(len(points) - 1))


def mean_center(points: Sequence[WeightedPoint]) -> tuple[float, float]:
    """Arithmetic mean of the coordinates (no geodesic correction)."""
    located = [point for point in points if point.has_coordinates]
    if not located:
        return (0.0, 0.0)
    lat = sum(point.latitude for point in located) / len(located)
    lon = sum(point.longitude for point in located) / len(located)
    return (lat, lon)


def coordinate_array(points: Sequence[WeightedPoint]) -> np.ndarray:
    """Return an ``(n, 2)`` float array of (lat, lon); missing values become NaN."""
    coords = np.full((len(points), 2), np.nan, dtype=float)
    for index, point in enumerate(points):
        if point.has_coordinates:
            coords[index, 0] = point.latitude
            coords[index, 1] = point.longitude
    return coords


def haversine_pairwise(origins: np.ndarray, targets: np.ndarray) -> np.ndarray:
    """Vectorised haversine between every origin row and every target row.

    Both arrays hold (lat, lon) in degrees. Rows containing NaN produce the
    unreachable sentinel instead of NaN.
    """
    lat1 = np.radians(origins[:, 0])[:, None]
    lon1 = np.radians(origins[:, 1])[:, None]
    lat2 = np.radians(targets[:, 0])[None, :]
    lon2 = np.radians(targets[:, 1])[None, :]

    a = np.sin((lat2 - lat1) / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    distances = EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return np.where(np.isnan(distances), UNREACHABLE_DISTANCE_KM, distances)


def haversine_matrix(points: Sequence[WeightedPoint]) -> np.ndarray:
    """Square distance matrix indexed by position in ``points``."""
    coords = coordinate_array(points)
    matrix = haversine_pairwise(coords, coords)
    np.fill_diagonal(matrix, 0.0)
    return matrix
