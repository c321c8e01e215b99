"""Base classes for geographic grouping strategies."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Sequence

from ...models.domain import WeightedPoint


class GroupingStrategy(ABC):
    """Contract for splitting a point set into route-sized groups."""

    @abstractmethod
    def group(
        self,
        points: Sequence[WeightedPoint],
        k: int,
        *,
        rng: random.Random | None = None,
    ) -> list[list[WeightedPoint]]:
        raise NotImplementedError


def split_unlocated(points: Sequence[WeightedPoint]) -> tuple[list[WeightedPoint], list[list[WeightedPoint]]]:
    """Separate points that can be clustered from ones that must stay on their own."""
    located: list[WeightedPoint] = []
    isolated: list[list[WeightedPoint]] = []
    for point in points:
        if point.has_coordinates:
            located.append(point)
        else:
            isolated.append([point])
    return located, isolated
