"""Route-order optimizers."""

from .annealing import SimulatedAnnealingOptimizer
from .base import KeepOrder, RouteOptimizer
from .dispatcher import get_optimizer
from .genetic import GeneticOptimizer

__all__ = [
    "GeneticOptimizer",
    "KeepOrder",
    "RouteOptimizer",
    "SimulatedAnnealingOptimizer",
    "get_optimizer",
]
