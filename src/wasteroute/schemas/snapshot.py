"""Snapshot file schemas for pending requests, collectors and materials."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import AgentStatus, AgentType, RequestStatus


class MaterialModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    category: Optional[str] = None
    value_per_kg: Optional[Decimal] = Field(None, alias="valuePerKg", ge=0)


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    weight: Decimal = Field(Decimal("0"), ge=0)
    material_id: Optional[str] = Field(None, alias="materialId")
    status: RequestStatus = RequestStatus.REQUESTED
    requester_id: Optional[str] = Field(None, alias="requesterId")
    address: Optional[str] = None


class AgentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    base_capacity: Optional[Decimal] = Field(None, alias="baseCapacity", gt=0)
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    agent_type: AgentType = Field(AgentType.COLLECTOR, alias="type")
    status: AgentStatus = AgentStatus.ACTIVE


class SnapshotModel(BaseModel):
    materials: List[MaterialModel] = Field(default_factory=list)
    requests: List[RequestModel] = Field(default_factory=list)
    agents: List[AgentModel] = Field(default_factory=list)
