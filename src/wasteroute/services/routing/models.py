"""Routing result models for ad-hoc path planning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(slots=True)
class PathStop:
    point_id: str
    sequence: int
    latitude: float
    longitude: float
    distance_from_prev_km: float


@dataclass(slots=True)
class PlannedPath:
    stops: List[PathStop]
    total_distance_km: float
    estimated_duration_minutes: int
