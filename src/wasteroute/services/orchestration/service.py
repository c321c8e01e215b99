"""Routing cycle orchestration: read, group, order, balance, assemble, persist."""

from __future__ import annotations

import logging
import random
import threading
from datetime import datetime
from typing import Callable, Optional, Sequence

from ...config import settings
from ...models.domain import Agent, CollectionRequest, RequestStatus, Route
from ...schemas.routing import CycleSummary, RouteSummary
from ..balancing.service import balance_load
from ..clustering.dispatcher import cluster
from ..parameters import EngineConfig
from ..routing.assembler import assemble_route, order_requests
from .collaborators import RequestSource, RouteSink

logger = logging.getLogger(__name__)

NO_REQUESTS_MESSAGE = "No pending collection requests found"
NO_AGENTS_MESSAGE = "No available collectors found"
SKIPPED_MESSAGE = "Another routing cycle is already running"
FAILED_MESSAGE = "Routing cycle failed"


class RoutingOrchestrator:
    """Runs routing cycles against a request source and a route sink.

    With ``single_flight`` enabled, at most one cycle runs at a time per
    orchestrator; an overlapping call returns immediately with a skipped
    summary instead of planning the same requests twice. A collaborator or
    planning failure is logged and returned as a summary carrying ``error``;
    it never propagates to the caller.

    ``clustering_rng`` seeds K-means only; it defaults to ``rng``.
    """

    def __init__(
        self,
        source: RequestSource,
        sink: RouteSink,
        *,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
        clustering_rng: random.Random | None = None,
        single_flight: bool | None = None,
        pending_statuses: Sequence[str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.source = source
        self.sink = sink
        self.config = config or EngineConfig()
        self.rng = rng or random.Random(settings.random_seed)
        self.clustering_rng = clustering_rng or self.rng
        self.single_flight = settings.single_flight if single_flight is None else single_flight
        statuses = pending_statuses or settings.pending_statuses
        self.pending_statuses = {RequestStatus(status) for status in statuses}
        self.clock = clock
        self._lock = threading.Lock()

    def run_automatic_cycle(self) -> CycleSummary:
        return self._guarded(self._automatic_cycle, "automatic")

    def run_manual_by_material(self) -> CycleSummary:
        return self._guarded(self._material_cycle, "by-material")

    def _guarded(self, cycle: Callable[[], CycleSummary], label: str) -> CycleSummary:
        if not self.single_flight:
            return self._isolated(cycle, label)
        if not self._lock.acquire(blocking=False):
            logger.warning(f"Skipping {label} routing cycle: {SKIPPED_MESSAGE.lower()}")
            return CycleSummary(message=SKIPPED_MESSAGE, skipped=True)
        try:
            return self._isolated(cycle, label)
        finally:
            self._lock.release()

    @staticmethod
    def _isolated(cycle: Callable[[], CycleSummary], label: str) -> CycleSummary:
        try:
            return cycle()
        except Exception as exc:
            logger.exception(f"{label.capitalize()} routing cycle failed")
            return CycleSummary(message=FAILED_MESSAGE, error=f"{type(exc).__name__}: {exc}")

    def _load(self) -> tuple[list[CollectionRequest], list[Agent], list[str]]:
        requests: list[CollectionRequest] = []
        unroutable: list[str] = []
        seen: set[str] = set()
        for request in self.source.pending_requests():
            if request.id in seen:
                logger.warning(f"Ignoring duplicate request {request.id}")
                continue
            seen.add(request.id)
            if request.status not in self.pending_statuses:
                logger.warning(f"Request {request.id} has status {request.status.value}; not routable")
                unroutable.append(request.id)
            elif not request.has_coordinates:
                logger.warning(f"Request {request.id} has no coordinates; not routable")
                unroutable.append(request.id)
            else:
                requests.append(request)

        agents = [agent for agent in self.source.active_agents() if agent.is_active_collector]
        logger.info(
            f"Loaded {len(requests)} routable request(s), {len(unroutable)} unroutable, "
            f"{len(agents)} active collector(s)"
        )
        return requests, agents, unroutable

    def _plan(
        self,
        requests: Sequence[CollectionRequest],
        agents: Sequence[Agent],
        *,
        material: Optional[str] = None,
    ) -> list[Route]:
        by_id = {request.id: request for request in requests}
        k = min(len(agents), len(requests))
        point_groups = cluster(
            [request.to_point() for request in requests],
            k,
            config=self.config.clustering,
            rng=self.clustering_rng,
        )
        groups = [
            order_requests([by_id[point.id] for point in group], config=self.config.optimizer, rng=self.rng)
            for group in point_groups
        ]

        balanced = balance_load(
            agents,
            groups,
            config=self.config.balancing,
            now=self.clock() if self.clock else None,
        )

        routes: list[Route] = []
        for load in balanced.busy_loads():
            if len(load.groups) == 1:
                ordered = load.groups[0]
            else:
                ordered = order_requests(load.requests, config=self.config.optimizer, rng=self.rng)
            routes.append(
                assemble_route(load.agent, ordered, config=self.config.assembly, material=material)
            )
        return routes

    def _persist(self, routes: Sequence[Route]) -> list[Route]:
        persisted: list[Route] = []
        for route in routes:
            try:
                self.sink.persist_route(route)
            except Exception:
                agent_id = route.agent.id if route.agent else "-"
                logger.exception(f"Failed to persist route {route.id} for agent {agent_id}")
                continue
            persisted.append(route)
        return persisted

    @staticmethod
    def _summary(message: str, routes: Sequence[Route], unroutable: list[str], **extra) -> CycleSummary:
        return CycleSummary(
            message=message,
            routes_created=len(routes),
            requests_processed=sum(route.stop_count for route in routes),
            per_route=[RouteSummary.from_route(route) for route in routes],
            unroutable_request_ids=unroutable,
            **extra,
        )

    def _automatic_cycle(self) -> CycleSummary:
        logger.info("Starting automatic routing cycle")
        requests, agents, unroutable = self._load()
        if not requests:
            return self._summary(NO_REQUESTS_MESSAGE, [], unroutable)
        if not agents:
            return self._summary(NO_AGENTS_MESSAGE, [], unroutable)

        persisted = self._persist(self._plan(requests, agents))
        logger.info(f"Automatic routing finished: {len(persisted)} route(s) created")
        return self._summary("Automatic routing completed", persisted, unroutable)

    def _material_cycle(self) -> CycleSummary:
        logger.info("Starting routing cycle grouped by material")
        requests, agents, unroutable = self._load()
        if not requests:
            return self._summary(NO_REQUESTS_MESSAGE, [], unroutable, materials_grouped=0)
        if not agents:
            return self._summary(NO_AGENTS_MESSAGE, [], unroutable, materials_grouped=0)

        by_material: dict[str, list[CollectionRequest]] = {}
        labels: dict[str, str] = {}
        for request in requests:
            by_material.setdefault(request.material_key, []).append(request)
            labels.setdefault(request.material_key, request.material.name if request.material else "unspecified")

        persisted: list[Route] = []
        for key, material_requests in by_material.items():
            routes = self._plan(material_requests, agents, material=labels[key])
            logger.info(f"Material '{labels[key]}': {len(material_requests)} request(s) in {len(routes)} route(s)")
            persisted.extend(self._persist(routes))

        logger.info(
            f"Routing by material finished: {len(persisted)} route(s) over {len(by_material)} material(s)"
        )
        return self._summary(
            "Routing by material completed",
            persisted,
            unroutable,
            materials_grouped=len(by_material),
        )
