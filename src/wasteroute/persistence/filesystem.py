"""File-based persistence helpers for planned routes."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import settings
from ..models.domain import RequestStatus, Route
from ..services.outputs.routing_formatter import routes_to_csv, routes_to_json

logger = logging.getLogger(__name__)


class FileStorage:
    """Thin wrapper around the data root for storing JSON and CSV outputs."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"
        self.output_root.mkdir(parents=True, exist_ok=True)

    def make_run_directory(self, prefix: str = "routes") -> Path:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        path = self.output_root / f"{prefix}_{timestamp}"
        path.mkdir(parents=True, exist_ok=False)
        return path

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)

    def write_csv(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)


class FileRouteSink:
    """Route sink writing ``routes.json`` and ``routes.csv`` into one run directory.

    The run directory is created on the first persisted route; both files are
    rewritten after every route so a partially failed cycle still leaves the
    routes persisted so far on disk. With ``mark_assigned`` the route's
    requests are flagged ASSIGNED, so a source sharing those objects stops
    offering them.
    """

    def __init__(
        self,
        storage: FileStorage | None = None,
        *,
        prefix: str = "routes",
        mark_assigned: bool = True,
    ) -> None:
        self.storage = storage or FileStorage()
        self.prefix = prefix
        self.mark_assigned = mark_assigned
        self.routes: list[Route] = []
        self.run_directory: Path | None = None

    def new_run(self) -> None:
        """Start a fresh run directory for the next persisted route."""
        self.routes = []
        self.run_directory = None

    def persist_route(self, route: Route) -> str:
        if self.run_directory is None:
            self.run_directory = self.storage.make_run_directory(self.prefix)
        self.routes.append(route)
        metadata = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "route_count": len(self.routes),
        }
        self.storage.write_json(self.run_directory / "routes.json", routes_to_json(self.routes, metadata=metadata))
        self.storage.write_csv(self.run_directory / "routes.csv", routes_to_csv(self.routes))
        if self.mark_assigned:
            for stop in route.stops:
                stop.status = RequestStatus.ASSIGNED
        logger.debug(f"Persisted route {route.id} to {self.run_directory}")
        return route.id
