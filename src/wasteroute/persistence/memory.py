"""In-process request source and route sink."""

from __future__ import annotations

import threading
from typing import Iterable, Optional

from ..models.domain import Agent, CollectionRequest, RequestStatus, Route, RouteStatus


class InMemoryRoutingStore:
    """Holds requests, agents and persisted routes in memory.

    Persisting a route marks its requests as ASSIGNED, so a following cycle
    no longer sees them as pending.
    """

    def __init__(
        self,
        requests: Iterable[CollectionRequest] = (),
        agents: Iterable[Agent] = (),
        *,
        mark_assigned: bool = True,
    ) -> None:
        self.requests: list[CollectionRequest] = list(requests)
        self.agents: list[Agent] = list(agents)
        self.routes: dict[str, Route] = {}
        self.mark_assigned = mark_assigned
        self._lock = threading.Lock()

    def pending_requests(self) -> list[CollectionRequest]:
        with self._lock:
            return [
                request
                for request in self.requests
                if request.status in (RequestStatus.REQUESTED, RequestStatus.UNDER_REVIEW)
            ]

    def active_agents(self) -> list[Agent]:
        with self._lock:
            return [agent for agent in self.agents if agent.is_active_collector]

    def persist_route(self, route: Route) -> str:
        with self._lock:
            self.routes[route.id] = route
            if self.mark_assigned:
                for stop in route.stops:
                    stop.status = RequestStatus.ASSIGNED
        return route.id

    def get_route(self, route_id: str) -> Optional[Route]:
        return self.routes.get(route_id)

    def routes_for_agent(self, agent_id: str) -> list[Route]:
        return [route for route in self.routes.values() if route.agent and route.agent.id == agent_id]

    def stats(self) -> dict:
        """Request and route counts, with the share of completed requests in percent."""
        with self._lock:
            statuses = [request.status for request in self.requests]
            route_statuses = [route.status for route in self.routes.values()]

        total = len(statuses)
        completed = statuses.count(RequestStatus.COMPLETED)
        return {
            "requests": {
                "total": total,
                "pending": sum(
                    status in (RequestStatus.REQUESTED, RequestStatus.UNDER_REVIEW) for status in statuses
                ),
                "assigned": statuses.count(RequestStatus.ASSIGNED),
                "completed": completed,
                "completion_rate": round(completed * 100 / total, 2) if total else 0,
            },
            "routes": {
                "total": len(route_statuses),
                "planned": route_statuses.count(RouteStatus.PLANNED),
                "active": route_statuses.count(RouteStatus.ACTIVE),
                "finished": route_statuses.count(RouteStatus.FINISHED),
            },
        }
