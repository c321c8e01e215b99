"""Factory for grouping strategies based on configuration."""

from __future__ import annotations

import random
from typing import Sequence

from ...models.domain import WeightedPoint
from ..parameters import ClusteringConfig
from .base import GroupingStrategy
from .kmeans import KMeansClustering
from .proximity import ProximityGrouping


def get_strategy(config: ClusteringConfig | None = None) -> GroupingStrategy:
    config = config or ClusteringConfig()
    match config.method:
        case "kmeans":
            return KMeansClustering(config)
        case "proximity":
            return ProximityGrouping(config)
        case _:
            raise ValueError(f"Unknown clustering method '{config.method}'.")


def cluster(
    points: Sequence[WeightedPoint],
    k: int,
    *,
    config: ClusteringConfig | None = None,
    rng: random.Random | None = None,
) -> list[list[WeightedPoint]]:
    return get_strategy(config).group(points, k, rng=rng)
