"""Factory for route-order optimizers based on configuration."""

from __future__ import annotations

from ..parameters import OptimizerConfig
from .annealing import SimulatedAnnealingOptimizer
from .base import KeepOrder, RouteOptimizer
from .genetic import GeneticOptimizer


def get_optimizer(method: str | None = None, config: OptimizerConfig | None = None) -> RouteOptimizer:
    config = config or OptimizerConfig()
    match method or config.method:
        case "genetic":
            return GeneticOptimizer(config)
        case "annealing":
            return SimulatedAnnealingOptimizer(config)
        case "none":
            return KeepOrder(config)
        case other:
            raise ValueError(f"Unknown optimizer method '{other}'.")
