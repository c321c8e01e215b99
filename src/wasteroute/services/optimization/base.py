"""Shared plumbing for the route-order metaheuristics."""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from ...models.domain import WeightedPoint
from ..geospatial import haversine_matrix
from ..parallel import map_row_chunks
from ..parameters import OptimizerConfig

logger = logging.getLogger(__name__)


def path_length(order: Sequence[int], matrix: np.ndarray) -> float:
    """Open-path length of ``order`` over a precomputed distance matrix."""
    if len(order) <= 1:
        return 0.0
    index = np.asarray(order, dtype=int)
    return float(matrix[index[:-1], index[1:]].sum())


def population_lengths(population: np.ndarray, matrix: np.ndarray, *, workers: int = 1) -> np.ndarray:
    """Open-path length of every row of an ``(individuals, stops)`` index array."""

    def evaluate(rows: np.ndarray) -> np.ndarray:
        return matrix[rows[:, :-1], rows[:, 1:]].sum(axis=1)

    return map_row_chunks(evaluate, population, workers=workers)


class RouteOptimizer(ABC):
    """Refines the visiting order of a fixed set of stops (open path, no return leg)."""

    name = "base"

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self.config = config or OptimizerConfig()

    def optimize(
        self,
        points: Sequence[WeightedPoint],
        *,
        rng: random.Random | None = None,
    ) -> list[WeightedPoint]:
        if len(points) <= 2:
            return list(points)

        matrix = haversine_matrix(points)
        initial = path_length(range(len(points)), matrix)
        order = self._search(matrix, rng or random.Random())
        optimized = path_length(order, matrix)
        logger.info(
            f"{self.name} optimization over {len(points)} stops: "
            f"{initial:.3f} km -> {optimized:.3f} km"
        )
        return [points[index] for index in order]

    @abstractmethod
    def _search(self, matrix: np.ndarray, rng: random.Random) -> list[int]:
        """Return the best index permutation found for ``matrix``."""
        raise NotImplementedError


class KeepOrder(RouteOptimizer):
    """Leaves the sequencer's order untouched."""

    name = "none"

    def _search(self, matrix: np.ndarray, rng: random.Random) -> list[int]:
        return list(range(len(matrix)))
