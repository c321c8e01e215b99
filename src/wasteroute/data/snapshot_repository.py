"""Request source backed by a JSON snapshot file."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..config import settings
from ..models.domain import Agent, CollectionRequest, Material, RequestStatus
from ..schemas.snapshot import SnapshotModel

logger = logging.getLogger(__name__)


def load_snapshot(source: Optional[Path] = None) -> SnapshotModel:
    """Read and validate the snapshot file."""
    path = source or settings.snapshot_file
    if path is None:
        raise ValueError("No snapshot file configured. Set WASTEROUTE_SNAPSHOT_FILE or pass a path.")
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    with path.open(mode="r", encoding="utf-8") as handle:
        payload = json.load(handle)
    try:
        return SnapshotModel.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Snapshot file '{path}' is invalid: {exc}") from exc


class SnapshotRequestSource:
    """Serves the requests and collectors of a snapshot file.

    The file is read once, on construction. Requests are live objects: once a
    sink marks them ASSIGNED they drop out of ``pending_requests``.
    """

    def __init__(self, source: Optional[Path] = None) -> None:
        snapshot = load_snapshot(source)
        self.pending_statuses = {RequestStatus(status) for status in settings.pending_statuses}
        self.materials = {
            item.id: Material(id=item.id, name=item.name, category=item.category, value_per_kg=item.value_per_kg)
            for item in snapshot.materials
        }

        self.requests: list[CollectionRequest] = []
        for item in snapshot.requests:
            material = None
            if item.material_id is not None:
                material = self.materials.get(item.material_id)
                if material is None:
                    raise ValueError(f"Request {item.id} references unknown material '{item.material_id}'.")
            self.requests.append(
                CollectionRequest(
                    id=item.id,
                    latitude=item.latitude,
                    longitude=item.longitude,
                    weight=item.weight,
                    material=material,
                    status=item.status,
                    requester_id=item.requester_id,
                    address=item.address,
                )
            )

        default_capacity = Decimal(str(settings.default_agent_capacity_kg))
        self.agents = [
            Agent(
                id=item.id,
                name=item.name,
                base_capacity=item.base_capacity if item.base_capacity is not None else default_capacity,
                created_at=item.created_at,
                latitude=item.latitude,
                longitude=item.longitude,
                agent_type=item.agent_type,
                status=item.status,
            )
            for item in snapshot.agents
        ]
        logger.info(
            f"Loaded snapshot with {len(self.requests)} request(s), {len(self.agents)} agent(s), "
            f"{len(self.materials)} material(s)"
        )

    def pending_requests(self) -> list[CollectionRequest]:
        return [request for request in self.requests if request.status in self.pending_statuses]

    def active_agents(self) -> list[Agent]:
        return [agent for agent in self.agents if agent.is_active_collector]
