"""Model package exports."""

from .runtime import (
    Decision,
    DecisionAction,
    DispatchSnapshot,
    Job,
    Server,
    expand_periodic,
    round_half_up,
)
from .spec import DatacenterConfig, InputSpec, JobSpec, PlatformSpec, ServerSpec

__all__ = [
    "DatacenterConfig",
    "Decision",
    "DecisionAction",
    "DispatchSnapshot",
    "InputSpec",
    "Job",
    "JobSpec",
    "PlatformSpec",
    "Server",
    "ServerSpec",
    "expand_periodic",
    "round_half_up",
]
