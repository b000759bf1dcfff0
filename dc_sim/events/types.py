"""Simulation event definitions."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    SIMULATION_STARTED = "SimulationStarted"
    JOB_ARRIVED = "JobArrived"
    TICK = "Tick"
    DISPATCH = "Dispatch"
    PREEMPT = "Preempt"
    JOB_COMPLETE = "JobComplete"
    DEADLINE_MISS = "DeadlineMiss"
    POWER_CAP_REACHED = "PowerCapReached"
    SIMULATION_FINISHED = "SimulationFinished"


class SimEvent(BaseModel):
    """Normalized event envelope for narration and metrics."""

    model_config = ConfigDict(extra="forbid")

    event_id: str
    seq: int = Field(ge=0)
    time: int = Field(ge=0)
    type: EventType
    job_id: Optional[int] = None
    server_id: Optional[int] = None
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False)
