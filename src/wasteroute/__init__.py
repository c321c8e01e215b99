"""Waste-collection routing engine: groups pending pickups, orders them and assigns them to collectors."""

__version__ = "0.1.0"
