from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from wasteroute.models.domain import Agent, CollectionRequest
from wasteroute.services.balancing.service import balance_load, capacity_score, experience_factor
from wasteroute.services.parameters import BalancingConfig

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)
CONFIG = BalancingConfig(experience_step_per_year=0.1, max_experience_factor=1.5)


def _agent(aid: str, capacity: str = "1000", years: float | None = None) -> Agent:
    created_at = NOW - timedelta(days=365 * years) if years is not None else None
    return Agent(id=aid, name=f"Agent {aid}", base_capacity=Decimal(capacity), created_at=created_at)


def _request(rid: str, weight: str) -> CollectionRequest:
    return CollectionRequest(id=rid, latitude=-19.9, longitude=-43.9, weight=Decimal(weight), material=None)


def test_experience_factor_grows_and_caps():
    assert experience_factor(_agent("A"), now=NOW, config=CONFIG) == 1.0
    assert experience_factor(_agent("B", years=2), now=NOW, config=CONFIG) == pytest.approx(1.2)
    assert experience_factor(_agent("C", years=10), now=NOW, config=CONFIG) == 1.5


def test_capacity_score_accepts_naive_timestamps():
    agent = Agent(id="A", name="A", base_capacity=Decimal("500"), created_at=datetime(2024, 6, 1))

    assert capacity_score(agent, now=NOW, config=CONFIG) == pytest.approx(550.0, rel=1e-3)


def test_balance_preserves_every_request_once():
    groups = [
        [_request("R1", "10"), _request("R2", "5")],
        [_request("R3", "30")],
        [_request("R4", "1"), _request("R5", "2"), _request("R6", "3")],
    ]

    result = balance_load([_agent("A"), _agent("B")], groups, config=CONFIG, now=NOW)

    assigned = sorted(request.id for requests in result.assignments.values() for request in requests)
    assert assigned == ["R1", "R2", "R3", "R4", "R5", "R6"]


def test_one_group_per_agent_when_counts_match():
    groups = [[_request("R1", "10")], [_request("R2", "20")]]

    result = balance_load([_agent("A"), _agent("B")], groups, config=CONFIG, now=NOW)

    assert [len(load.groups) for load in result.loads] == [1, 1]


def test_heaviest_group_goes_to_first_agent_on_tie():
    groups = [[_request("R1", "10")], [_request("R2", "20")]]

    result = balance_load([_agent("A"), _agent("B")], groups, config=CONFIG, now=NOW)

    assert [request.id for request in result.assignments["A"]] == ["R2"]
    assert [request.id for request in result.assignments["B"]] == ["R1"]


def test_tie_on_ratio_prefers_fewer_requests():
    groups = [
        [_request("R1", "0"), _request("R2", "0")],
        [_request("R3", "0")],
        [_request("R4", "0")],
    ]

    result = balance_load([_agent("A"), _agent("B")], groups, config=CONFIG, now=NOW)

    assert sorted(request.id for request in result.assignments["A"]) == ["R1", "R2"]
    assert sorted(request.id for request in result.assignments["B"]) == ["R3", "R4"]


def test_experienced_agent_takes_more_weight():
    groups = [[_request(f"R{i}", "100")] for i in range(5)]

    result = balance_load([_agent("NEW", "1000"), _agent("OLD", "1000", years=5)], groups, config=CONFIG, now=NOW)

    loads = {load.agent.id: load for load in result.loads}
    assert loads["OLD"].assigned_weight > loads["NEW"].assigned_weight


def test_balance_requires_agents():
    with pytest.raises(ValueError):
        balance_load([], [[_request("R1", "1")]], config=CONFIG, now=NOW)
