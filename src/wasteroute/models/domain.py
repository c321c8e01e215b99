"""Domain models for collection requests, agents and routes."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from ..exceptions import RouteCapacityError, RouteStateError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RequestStatus(str, Enum):
    REQUESTED = "REQUESTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    ASSIGNED = "ASSIGNED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class AgentType(str, Enum):
    REQUESTER = "REQUESTER"
    COLLECTOR = "COLLECTOR"
    ADMIN = "ADMIN"


class AgentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class RouteStatus(str, Enum):
    PLANNED = "PLANNED"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True, slots=True)
class WeightedPoint:
    """Immutable value handed to the clustering and sequencing algorithms.

    Identity is the ``id``; two points sharing a coordinate stay distinct.
    """

    id: str
    latitude: Optional[float]
    longitude: Optional[float]
    weight: float = 0.0

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True, slots=True)
class Material:
    """Recyclable material category with its reference price."""

    id: str
    name: str
    category: Optional[str] = None
    value_per_kg: Optional[Decimal] = None


@dataclass(slots=True)
class CollectionRequest:
    """A single pickup demand raised by a requester."""

    id: str
    latitude: Optional[float]
    longitude: Optional[float]
    weight: Decimal
    material: Optional[Material]
    status: RequestStatus = RequestStatus.REQUESTED
    requester_id: Optional[str] = None
    address: Optional[str] = None

    def __post_init__(self) -> None:
        if self.weight is not None and self.weight < 0:
            raise ValueError(f"Request {self.id} has negative weight {self.weight}")

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def estimated_value(self) -> Decimal:
        if self.material is None or self.material.value_per_kg is None:
            return Decimal("0")
        return self.weight * self.material.value_per_kg

    @property
    def material_key(self) -> str:
        return self.material.id if self.material else "unspecified"

    def to_point(self) -> WeightedPoint:
        return WeightedPoint(
            id=self.id,
            latitude=self.latitude,
            longitude=self.longitude,
            weight=float(self.weight or 0),
        )


@dataclass(slots=True)
class Agent:
    """A collector that can be given a route."""

    id: str
    name: str
    base_capacity: Decimal = Decimal("1000")
    created_at: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    agent_type: AgentType = AgentType.COLLECTOR
    status: AgentStatus = AgentStatus.ACTIVE

    @property
    def is_active_collector(self) -> bool:
        return self.agent_type is AgentType.COLLECTOR and self.status is AgentStatus.ACTIVE


@dataclass(slots=True)
class Route:
    """Ordered sequence of requests assigned to one agent, with aggregate metrics."""

    agent: Optional[Agent]
    stops: list[CollectionRequest]
    total_distance_km: float = 0.0
    estimated_duration_minutes: int = 1
    total_weight: Decimal = Decimal("0")
    total_estimated_value: Decimal = Decimal("0")
    status: RouteStatus = RouteStatus.PLANNED
    max_capacity: Optional[Decimal] = Decimal("1000")
    name: str = ""
    description: str = ""
    material: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def stop_count(self) -> int:
        return len(self.stops)

    @property
    def request_ids(self) -> list[str]:
        return [request.id for request in self.stops]

    @property
    def is_full(self) -> bool:
        if self.max_capacity is None:
            return False
        return self.total_weight >= self.max_capacity

    def add_request(self, request: CollectionRequest) -> None:
        """Append a request, rejecting it when the route capacity would be exceeded."""
        if any(stop.id == request.id for stop in self.stops):
            raise ValueError(f"Request {request.id} is already on route {self.id}")
        if self.max_capacity is not None:
            new_weight = self.total_weight + request.weight
            if new_weight > self.max_capacity:
                raise RouteCapacityError(
                    f"Route {self.id} capacity would be exceeded "
                    f"({new_weight} > {self.max_capacity})"
                )
        self.stops.append(request)
        self.refresh_totals()

    def remove_request(self, request_id: str) -> bool:
        remaining = [stop for stop in self.stops if stop.id != request_id]
        if len(remaining) == len(self.stops):
            return False
        self.stops = remaining
        self.refresh_totals()
        return True

    def refresh_totals(self) -> None:
        self.total_weight = sum((stop.weight for stop in self.stops), Decimal("0"))
        self.total_estimated_value = sum((stop.estimated_value for stop in self.stops), Decimal("0"))
        self.updated_at = utcnow()

    def start(self) -> None:
        if self.status is not RouteStatus.PLANNED:
            raise RouteStateError(f"Route cannot be started from status {self.status.value}")
        self.status = RouteStatus.ACTIVE
        self.started_at = utcnow()
        self.updated_at = self.started_at

    def finish(self) -> None:
        if self.status is not RouteStatus.ACTIVE:
            raise RouteStateError(f"Route cannot be finished from status {self.status.value}")
        self.status = RouteStatus.FINISHED
        self.finished_at = utcnow()
        self.updated_at = self.finished_at

    def cancel(self) -> None:
        if self.status not in (RouteStatus.PLANNED, RouteStatus.ACTIVE):
            raise RouteStateError(f"Route cannot be cancelled from status {self.status.value}")
        self.status = RouteStatus.CANCELLED
        self.updated_at = utcnow()
