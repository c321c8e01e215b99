"""Genetic algorithm for stop ordering."""

from __future__ import annotations

import logging
import random

import numpy as np

from .base import RouteOptimizer, path_length, population_lengths

logger = logging.getLogger(__name__)


def order_crossover(parent_a: list[int], parent_b: list[int], rng: random.Random) -> list[int]:
    """OX: keep a random slice of ``parent_a`` in place, fill the gaps in ``parent_b`` order."""
    size = len(parent_a)
    start = rng.randrange(size)
    end = rng.randrange(size)
    if start > end:
        start, end = end, start

    child: list[int | None] = [None] * size
    child[start : end + 1] = parent_a[start : end + 1]
    taken = set(parent_a[start : end + 1])

    position = 0
    for gene in parent_b:
        if gene in taken:
            continue
        while child[position] is not None:
            position += 1
        child[position] = gene
        taken.add(gene)
    return child  # type: ignore[return-value]


def swap_mutation(individual: list[int], rng: random.Random) -> None:
    i = rng.randrange(len(individual))
    j = rng.randrange(len(individual))
    if i != j:
        individual[i], individual[j] = individual[j], individual[i]


class GeneticOptimizer(RouteOptimizer):
    """Generational GA: tournament selection, order crossover and swap mutation.

    The input order is kept as the first individual of the initial population
    and the best individual ever evaluated is returned, so the result is never
    longer than the order the optimizer was given.
    """

    name = "genetic"

    def _initial_population(self, size: int, rng: random.Random) -> list[list[int]]:
        population = [list(range(size))]
        while len(population) < self.config.population_size:
            individual = list(range(size))
            rng.shuffle(individual)
            population.append(individual)
        return population

    def _tournament(self, population: list[list[int]], fitness: np.ndarray, rng: random.Random) -> list[int]:
        best_index = rng.randrange(len(population))
        for _ in range(self.config.tournament_size - 1):
            candidate = rng.randrange(len(population))
            if fitness[candidate] < fitness[best_index]:
                best_index = candidate
        return population[best_index]

    def _reproduce(self, parents: list[list[int]], rng: random.Random) -> list[list[int]]:
        children: list[list[int]] = []
        for index in range(0, len(parents), 2):
            if index + 1 >= len(parents):
                children.append(list(parents[index]))
                continue
            first, second = parents[index], parents[index + 1]
            if rng.random() < self.config.crossover_rate:
                children.append(order_crossover(first, second, rng))
                children.append(order_crossover(second, first, rng))
            else:
                children.append(list(first))
                children.append(list(second))

        for child in children:
            if rng.random() < self.config.mutation_rate:
                swap_mutation(child, rng)
        return children

    def _search(self, matrix: np.ndarray, rng: random.Random) -> list[int]:
        size = len(matrix)
        population = self._initial_population(size, rng)
        best_order = list(population[0])
        best_distance = path_length(best_order, matrix)

        for generation in range(self.config.generations):
            fitness = population_lengths(np.array(population), matrix, workers=self.config.workers)
            leader = int(np.argmin(fitness))
            if fitness[leader] < best_distance:
                best_distance = float(fitness[leader])
                best_order = list(population[leader])

            if generation % 20 == 0:
                logger.debug(f"Generation {generation}: best distance {best_distance:.3f} km")

            parents = [self._tournament(population, fitness, rng) for _ in range(len(population))]
            population = self._reproduce(parents, rng)

        fitness = population_lengths(np.array(population), matrix, workers=self.config.workers)
        leader = int(np.argmin(fitness))
        if fitness[leader] < best_distance:
            best_order = list(population[leader])
        return best_order
