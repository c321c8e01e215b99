"""Capacity-aware distribution of request groups across collectors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Sequence

from ...models.domain import Agent, CollectionRequest
from ..parameters import BalancingConfig

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0


@dataclass(slots=True)
class AgentLoad:
    agent: Agent
    capacity_score: float
    order: int
    groups: List[List[CollectionRequest]] = field(default_factory=list)
    assigned_weight: float = 0.0

    @property
    def requests(self) -> List[CollectionRequest]:
        return [request for group in self.groups for request in group]

    @property
    def request_count(self) -> int:
        return sum(len(group) for group in self.groups)

    @property
    def utilization(self) -> float:
        return self.assigned_weight / self.capacity_score


@dataclass(slots=True)
class BalanceResult:
    loads: List[AgentLoad]

    @property
    def assignments(self) -> Dict[str, List[CollectionRequest]]:
        return {load.agent.id: load.requests for load in self.loads}

    def busy_loads(self) -> List[AgentLoad]:
        return [load for load in self.loads if load.groups]


def _group_weight(group: Sequence[CollectionRequest]) -> float:
    return float(sum((request.weight or Decimal("0") for request in group), Decimal("0")))


def _as_utc(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def experience_factor(agent: Agent, *, now: datetime, config: BalancingConfig) -> float:
    """Capacity multiplier growing with the agent's time in service, capped."""
    if agent.created_at is None:
        return 1.0
    age_years = (_as_utc(now) - _as_utc(agent.created_at)).total_seconds() / (DAYS_PER_YEAR * 86400)
    age_years = max(0.0, age_years)
    return min(config.max_experience_factor, 1.0 + age_years * config.experience_step_per_year)


def capacity_score(agent: Agent, *, now: datetime, config: BalancingConfig) -> float:
    return float(agent.base_capacity) * experience_factor(agent, now=now, config=config)


def balance_load(
    agents: Sequence[Agent],
    groups: Sequence[Sequence[CollectionRequest]],
    *,
    config: BalancingConfig | None = None,
    now: datetime | None = None,
) -> BalanceResult:
    """Assign each group whole to the agent with the lowest current utilisation.

    Groups are handled largest-first by total weight. Ties on utilisation go to
    the agent with fewer assigned requests, then to the earlier agent in the
    input order. Capacity is a balancing signal only; nothing is rejected.
    """
    if not agents:
        raise ValueError("At least one agent is required for load balancing.")

    config = config or BalancingConfig()
    now = now or datetime.now(timezone.utc)

    loads = [
        AgentLoad(agent=agent, capacity_score=capacity_score(agent, now=now, config=config), order=index)
        for index, agent in enumerate(agents)
    ]
    for load in loads:
        if load.capacity_score <= 0:
            raise ValueError(f"Agent {load.agent.id} has no usable capacity.")

    ordered_groups = sorted((list(group) for group in groups if group), key=_group_weight, reverse=True)
    for group in ordered_groups:
        target = min(loads, key=lambda load: (load.utilization, load.request_count, load.order))
        target.groups.append(group)
        target.assigned_weight += _group_weight(group)

    for load in loads:
        if load.groups and load.utilization > 1.0:
            logger.warning(
                f"Agent {load.agent.id} planned above capacity "
                f"({load.assigned_weight:.1f} / {load.capacity_score:.1f})"
            )
    logger.info(f"Balanced {len(ordered_groups)} group(s) across {len(agents)} agent(s)")
    return BalanceResult(loads=loads)
