"""Greedy radius-based grouping of nearby collection points."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from ...models.domain import WeightedPoint
from ..geospatial import distance_km
from ..parameters import ClusteringConfig
from .base import GroupingStrategy, split_unlocated

logger = logging.getLogger(__name__)


class ProximityGrouping(GroupingStrategy):
    """Seed a group with the next unprocessed point and pull in neighbours within a radius.

    A neighbour joins only while the group stays under the stop and weight caps.
    The number of groups follows from the data; ``k`` is accepted for interface
    compatibility and ignored.
    """

    def __init__(self, config: ClusteringConfig | None = None) -> None:
        self.config = config or ClusteringConfig()

    def group(
        self,
        points: Sequence[WeightedPoint],
        k: int,
        *,
        rng: random.Random | None = None,
    ) -> list[list[WeightedPoint]]:
        if k < 1:
            raise ValueError("k must be >= 1")

        located, isolated = split_unlocated(points)
        processed: set[str] = set()
        groups: list[list[WeightedPoint]] = []

        for seed in located:
            if seed.id in processed:
                continue
            group = [seed]
            group_weight = seed.weight
            processed.add(seed.id)

            for candidate in located:
                if candidate.id in processed:
                    continue
                if len(group) >= self.config.max_stops_per_route:
                    break
                if distance_km(seed, candidate) > self.config.max_radius_km:
                    continue
                if group_weight + candidate.weight > self.config.max_group_weight:
                    continue
                group.append(candidate)
                group_weight += candidate.weight
                processed.add(candidate.id)

            groups.append(group)

        logger.info(f"Created {len(groups)} proximity group(s) from {len(located)} located point(s)")
        return groups + isolated
