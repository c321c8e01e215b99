"""Serializers for planned routes."""

from __future__ import annotations

import csv
import io
from typing import Sequence

from ...models.domain import Route


def _decimal(value) -> str:
    return format(value, "f")


def route_to_json(route: Route) -> dict:
    return {
        "route_id": route.id,
        "name": route.name,
        "description": route.description,
        "status": route.status.value,
        "agent_id": route.agent.id if route.agent else None,
        "agent_name": route.agent.name if route.agent else None,
        "material": route.material,
        "total_distance_km": route.total_distance_km,
        "estimated_duration_minutes": route.estimated_duration_minutes,
        "total_weight": _decimal(route.total_weight),
        "total_estimated_value": _decimal(route.total_estimated_value),
        "max_capacity": _decimal(route.max_capacity) if route.max_capacity is not None else None,
        "created_at": route.created_at.isoformat(),
        "updated_at": route.updated_at.isoformat(),
        "stops": [
            {
                "sequence": index,
                "request_id": stop.id,
                "latitude": stop.latitude,
                "longitude": stop.longitude,
                "weight": _decimal(stop.weight),
                "material": stop.material.name if stop.material else None,
                "address": stop.address,
            }
            for index, stop in enumerate(route.stops, start=1)
        ],
    }


def routes_to_json(routes: Sequence[Route], *, metadata: dict | None = None) -> dict:
    return {
        "metadata": metadata or {},
        "routes": [route_to_json(route) for route in routes],
    }


def routes_to_csv(routes: Sequence[Route]) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "route_id",
        "agent_id",
        "material",
        "sequence",
        "request_id",
        "latitude",
        "longitude",
        "weight",
        "total_distance_km",
        "estimated_duration_minutes",
        "total_weight",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for route in routes:
        for index, stop in enumerate(route.stops, start=1):
            writer.writerow(
                {
                    "route_id": route.id,
                    "agent_id": route.agent.id if route.agent else "",
                    "material": route.material or "",
                    "sequence": index,
                    "request_id": stop.id,
                    "latitude": stop.latitude,
                    "longitude": stop.longitude,
                    "weight": _decimal(stop.weight),
                    "total_distance_km": round(route.total_distance_km, 3),
                    "estimated_duration_minutes": route.estimated_duration_minutes,
                    "total_weight": _decimal(route.total_weight),
                }
            )
    return buffer.getvalue()
