"""K-means clustering of collection points on raw latitude/longitude."""

from __future__ import annotations

import logging
import random
from typing import Sequence

import numpy as np

from ...models.domain import WeightedPoint
from ..geospatial import coordinate_array, haversine_pairwise
from ..parallel import map_row_chunks
from ..parameters import ClusteringConfig
from .base import GroupingStrategy, split_unlocated

logger = logging.getLogger(__name__)


class KMeansClustering(GroupingStrategy):
    """Lloyd-style K-means with haversine assignment and arithmetic-mean centroids.

    Notes:
    - Initial centroids are ``k`` points drawn *with replacement*, so two
      centroids may start on the same point. The duplicate simply ends up
      empty and is dropped from the output.
    - Centroids are the plain mean of (lat, lon), not a geodesic mean.
    - Convergence is measured in degrees: every centroid must move less than
      ``tolerance_degrees`` on both axes.
    """

    def __init__(self, config: ClusteringConfig | None = None) -> None:
        self.config = config or ClusteringConfig()

    def _assign(self, coords: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        def nearest(chunk: np.ndarray) -> np.ndarray:
            return np.argmin(haversine_pairwise(chunk, centroids), axis=1)

        return map_row_chunks(nearest, coords, workers=self.config.workers)

    @staticmethod
    def _recompute(coords: np.ndarray, labels: np.ndarray, previous: np.ndarray) -> np.ndarray:
        centroids = previous.copy()
        for index in range(len(previous)):
            members = coords[labels == index]
            if len(members):
                centroids[index] = members.mean(axis=0)
        return centroids

    def group(
        self,
        points: Sequence[WeightedPoint],
        k: int,
        *,
        rng: random.Random | None = None,
    ) -> list[list[WeightedPoint]]:
        if k < 1:
            raise ValueError("k must be >= 1")

        if len(points) <= k:
            return [[point] for point in points]

        located, isolated = split_unlocated(points)
        if isolated:
            logger.warning(f"{len(isolated)} point(s) without coordinates kept in singleton groups")
        if len(located) <= k:
            return [[point] for point in located] + isolated

        rng = rng or random.Random()
        coords = coordinate_array(located)
        centroids = np.array([coords[rng.randrange(len(located))] for _ in range(k)], dtype=float)

        labels = np.zeros(len(located), dtype=int)
        iterations = 0
        converged = False
        while not converged and iterations < self.config.max_iterations:
            labels = self._assign(coords, centroids)
            new_centroids = self._recompute(coords, labels, centroids)
            shift = np.abs(new_centroids - centroids)
            converged = bool(np.all(shift < self.config.tolerance_degrees))
            centroids = new_centroids
            iterations += 1

        clusters: list[list[WeightedPoint]] = [[] for _ in range(k)]
        for point, label in zip(located, labels):
            clusters[int(label)].append(point)

        groups = [cluster for cluster in clusters if cluster]
        logger.info(
            f"K-means finished after {iterations} iteration(s) "
            f"({'converged' if converged else 'iteration cap'}): {len(groups)} non-empty cluster(s)"
        )
        return groups + isolated
