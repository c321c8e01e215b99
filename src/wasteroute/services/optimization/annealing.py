"""Simulated annealing for stop ordering."""

from __future__ import annotations

import logging
import math
import random

import numpy as np

from .base import RouteOptimizer, path_length

logger = logging.getLogger(__name__)


class SimulatedAnnealingOptimizer(RouteOptimizer):
    """Swap-neighbourhood annealing with geometric cooling.

    Starts from the given order, cools by ``cooling_rate`` after every step and
    stops once the temperature drops below ``min_temperature``. The best order
    seen at any step is returned, not the last accepted one.
    """

    name = "annealing"

    def _search(self, matrix: np.ndarray, rng: random.Random) -> list[int]:
        size = len(matrix)
        current = list(range(size))
        current_distance = path_length(current, matrix)
        best = list(current)
        best_distance = current_distance

        temperature = self.config.initial_temperature
        steps = 0
        while temperature >= self.config.min_temperature:
            neighbour = list(current)
            i = rng.randrange(size)
            j = rng.randrange(size)
            if i != j:
                neighbour[i], neighbour[j] = neighbour[j], neighbour[i]
            neighbour_distance = path_length(neighbour, matrix)

            delta = neighbour_distance - current_distance
            if delta < 0 or rng.random() < math.exp(-delta / temperature):
                current = neighbour
                current_distance = neighbour_distance
                if current_distance < best_distance:
                    best = list(current)
                    best_distance = current_distance

            temperature *= self.config.cooling_rate
            steps += 1

        logger.debug(f"Annealing stopped after {steps} steps at T={temperature:.3f}")
        return best
