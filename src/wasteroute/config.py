"""Engine configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="WASTEROUTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Waste Collection Routing Engine"
    log_level: str = Field(default="INFO", description="Root log level used by the CLI.")
    data_root: Path = Field(default=Path("data"), description="Root directory for run outputs.")
    snapshot_file: Optional[Path] = Field(
        default=None,
        description="JSON snapshot with pending requests, agents and materials.",
    )

    # Clustering
    clustering_method: Literal["kmeans", "proximity"] = Field(default="kmeans")
    kmeans_max_iterations: int = Field(default=100, ge=1)
    kmeans_tolerance_degrees: float = Field(default=0.001, gt=0.0)
    max_radius_km: float = Field(default=10.0, gt=0.0)
    max_stops_per_route: int = Field(default=15, ge=1)
    max_group_weight_kg: float = Field(default=1000.0, gt=0.0)

    # Sequencing and optimization
    sequencer_start: Literal["centroid", "first"] = Field(
        default="centroid",
        description="Where the nearest-neighbour sequencer starts each route.",
    )
    optimizer_method: Literal["genetic", "annealing", "none"] = Field(default="genetic")
    population_size: int = Field(default=50, ge=2)
    generations: int = Field(default=100, ge=1)
    tournament_size: int = Field(default=3, ge=1)
    crossover_rate: float = Field(default=0.8, ge=0.0, le=1.0)
    mutation_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    initial_temperature: float = Field(default=1000.0, gt=0.0)
    cooling_rate: float = Field(default=0.95, gt=0.0, lt=1.0)
    min_temperature: float = Field(default=1.0, gt=0.0)
    evaluation_workers: int = Field(
        default=1,
        ge=1,
        description="Threads used to evaluate population fitness and centroid assignment.",
    )
    random_seed: Optional[int] = Field(default=None, description="Seed for reproducible runs.")

    # Load balancing
    default_agent_capacity_kg: float = Field(default=1000.0, gt=0.0)
    experience_step_per_year: float = Field(default=0.1, ge=0.0)
    max_experience_factor: float = Field(default=1.5, ge=1.0)

    # Route assembly
    average_speed_kmh: float = Field(default=30.0, gt=0.0)
    minutes_per_stop: int = Field(default=5, ge=0)
    route_max_capacity_kg: float = Field(default=1000.0, gt=0.0)

    # Orchestration
    schedule_interval_minutes: float = Field(default=30.0, gt=0.0)
    cycle_timeout_seconds: Optional[float] = Field(default=None, gt=0.0)
    single_flight: bool = Field(
        default=True,
        description="Skip a cycle when another one is still running in this process.",
    )
    pending_statuses: tuple[str, ...] = Field(default=("REQUESTED", "UNDER_REVIEW"))

    @field_validator("data_root", "snapshot_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("pending_statuses", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
