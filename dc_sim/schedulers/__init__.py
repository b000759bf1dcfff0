"""Dispatch policy exports."""

from .base import DispatchContext, DispatchPolicy, IDispatchPolicy
from .cpm import CPMPolicy
from .edf import EDFPolicy
from .election import first_available, most_powerful_available
from .fifo import FifoPolicy
from .first_fit import FirstFitPolicy
from .layering import DependencyError, DependencyLayers, build_branches, build_waves
from .registry import Algorithm, available_policies, create_policy, register_policy
from .round_robin import RoundRobinPolicy
from .wavefront import WavefrontPolicy

__all__ = [
    "Algorithm",
    "CPMPolicy",
    "DependencyError",
    "DependencyLayers",
    "DispatchContext",
    "DispatchPolicy",
    "EDFPolicy",
    "FifoPolicy",
    "FirstFitPolicy",
    "IDispatchPolicy",
    "RoundRobinPolicy",
    "WavefrontPolicy",
    "available_policies",
    "build_branches",
    "build_waves",
    "create_policy",
    "first_available",
    "most_powerful_available",
    "register_policy",
]
