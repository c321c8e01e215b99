"""Immutable tuning parameters handed to each engine component."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import settings


@dataclass(frozen=True, slots=True)
class ClusteringConfig:
    method: str = settings.clustering_method
    max_iterations: int = settings.kmeans_max_iterations
    tolerance_degrees: float = settings.kmeans_tolerance_degrees
    max_radius_km: float = settings.max_radius_km
    max_stops_per_route: int = settings.max_stops_per_route
    max_group_weight: float = settings.max_group_weight_kg
    workers: int = settings.evaluation_workers


@dataclass(frozen=True, slots=True)
class OptimizerConfig:
    method: str = settings.optimizer_method
    sequencer_start: str = settings.sequencer_start
    population_size: int = settings.population_size
    generations: int = settings.generations
    tournament_size: int = settings.tournament_size
    crossover_rate: float = settings.crossover_rate
    mutation_rate: float = settings.mutation_rate
    initial_temperature: float = settings.initial_temperature
    cooling_rate: float = settings.cooling_rate
    min_temperature: float = settings.min_temperature
    workers: int = settings.evaluation_workers


@dataclass(frozen=True, slots=True)
class BalancingConfig:
    experience_step_per_year: float = settings.experience_step_per_year
    max_experience_factor: float = settings.max_experience_factor


@dataclass(frozen=True, slots=True)
class AssemblyConfig:
    average_speed_kmh: float = settings.average_speed_kmh
    minutes_per_stop: int = settings.minutes_per_stop
    min_duration_minutes: int = 1
    route_max_capacity: float = settings.route_max_capacity_kg


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Bundle of the per-component parameters used by one orchestrator."""

    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    optimizer: OptimizerConfig = field(default_factory=OptimizerConfig)
    balancing: BalancingConfig = field(default_factory=BalancingConfig)
    assembly: AssemblyConfig = field(default_factory=AssemblyConfig)
