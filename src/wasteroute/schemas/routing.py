"""Routing cycle summary schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import Route


class StopSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_id: str = Field(..., alias="requestId")
    sequence: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    weight: Decimal
    material: Optional[str] = None


class RouteSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    route_id: str = Field(..., alias="routeId")
    agent_id: Optional[str] = Field(None, alias="agentId")
    agent: Optional[str] = None
    material: Optional[str] = None
    stops: List[StopSummary] = Field(default_factory=list)
    total_distance_km: float = Field(..., alias="totalDistanceKm")
    estimated_duration_minutes: int = Field(..., alias="estimatedDurationMinutes")
    total_weight: Decimal = Field(..., alias="totalWeight")
    total_estimated_value: Decimal = Field(Decimal("0"), alias="totalEstimatedValue")

    @classmethod
    def from_route(cls, route: Route) -> "RouteSummary":
        return cls(
            route_id=route.id,
            agent_id=route.agent.id if route.agent else None,
            agent=route.agent.name if route.agent else None,
            material=route.material,
            stops=[
                StopSummary(
                    request_id=stop.id,
                    sequence=index,
                    latitude=stop.latitude,
                    longitude=stop.longitude,
                    weight=stop.weight,
                    material=stop.material.name if stop.material else None,
                )
                for index, stop in enumerate(route.stops, start=1)
            ],
            total_distance_km=route.total_distance_km,
            estimated_duration_minutes=route.estimated_duration_minutes,
            total_weight=route.total_weight,
            total_estimated_value=route.total_estimated_value,
        )


class CycleSummary(BaseModel):
    """Outcome of one routing cycle, serialised with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    routes_created: int = Field(0, alias="routesCreated")
    requests_processed: int = Field(0, alias="requestsProcessed")
    per_route: List[RouteSummary] = Field(default_factory=list, alias="perRoute")
    unroutable_request_ids: List[str] = Field(default_factory=list, alias="unroutableRequestIds")
    materials_grouped: Optional[int] = Field(None, alias="materialsGrouped")
    skipped: bool = False
    error: Optional[str] = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
