"""Exceptions raised by the routing engine."""

from __future__ import annotations


class RoutingError(Exception):
    """Base class for routing engine failures."""


class RouteCapacityError(RoutingError):
    """Raised when adding a request would push a route past its capacity."""


class RouteStateError(RoutingError):
    """Raised on an illegal route lifecycle transition."""
