"""Interfaces the orchestrator reads requests from and writes routes to."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from ...models.domain import Agent, CollectionRequest, Route


@runtime_checkable
class RequestSource(Protocol):
    def pending_requests(self) -> Sequence[CollectionRequest]:
        ...

    def active_agents(self) -> Sequence[Agent]:
        ...


@runtime_checkable
class RouteSink(Protocol):
    def persist_route(self, route: Route) -> str:
        ...
