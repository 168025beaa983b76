from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class BreakdownRequest(BaseModel):
    idea: StrictStr = Field(min_length=1)
    depth: StrictInt = Field(default=1, gt=0)
    focus_area: Optional[StrictStr] = Field(default=None, alias="focusArea")

    model_config = ConfigDict(populate_by_name=True)


class WorkItem(BaseModel):
    name: str
    description: str
    requirements: List[str] = []


class FrontendPlan(BaseModel):
    components: List[WorkItem] = []


class BackendPlan(BaseModel):
    services: List[WorkItem] = []
    data_model: List[str] = Field(default_factory=list, alias="dataModel")

    model_config = ConfigDict(populate_by_name=True)


class PriorityTier(BaseModel):
    frontend: FrontendPlan = Field(default_factory=FrontendPlan)
    backend: BackendPlan = Field(default_factory=BackendPlan)


class Priorities(BaseModel):
    p0: PriorityTier
    p1: PriorityTier
    p2: PriorityTier


class SystemArchitecture(BaseModel):
    components: List[str] = []
    connections: List[str] = []
    data_flow: List[str] = Field(default_factory=list, alias="dataFlow")

    model_config = ConfigDict(populate_by_name=True)


class DevelopmentStep(BaseModel):
    phase: str
    tasks: List[str] = []
    priority: str


class BreakdownResponse(BaseModel):
    """Documented shape of a successful breakdown.

    The handler returns the normalized model output as-is, so this model is
    used for the OpenAPI schema rather than to re-serialize the payload.
    """

    overview: str
    priorities: Priorities
    system_architecture: SystemArchitecture = Field(alias="systemArchitecture")
    development_steps: List[DevelopmentStep] = Field(alias="developmentSteps")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    error: str
