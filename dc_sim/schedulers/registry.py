"""Dispatch policy registry and factory."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from .base import IDispatchPolicy
from .cpm import CPMPolicy
from .edf import EDFPolicy
from .fifo import FifoPolicy
from .first_fit import FirstFitPolicy
from .round_robin import RoundRobinPolicy
from .wavefront import WavefrontPolicy


class Algorithm(str, Enum):
    FIFO = "fifo"
    FIRST_FIT = "first_fit"
    EDF = "edf"
    ROUND_ROBIN = "round_robin"
    WAVEFRONT = "wavefront"
    CPM = "cpm"


PolicyFactory = Callable[[], IDispatchPolicy]


_REGISTRY: dict[str, PolicyFactory] = {
    Algorithm.FIFO.value: FifoPolicy,
    Algorithm.FIRST_FIT.value: FirstFitPolicy,
    Algorithm.EDF.value: EDFPolicy,
    Algorithm.ROUND_ROBIN.value: RoundRobinPolicy,
    Algorithm.WAVEFRONT.value: WavefrontPolicy,
    Algorithm.CPM.value: CPMPolicy,
}


def register_policy(name: str, factory: PolicyFactory) -> None:
    _REGISTRY[name.strip().lower()] = factory


def available_policies() -> list[str]:
    return list(_REGISTRY)


def create_policy(name: str | Algorithm) -> IDispatchPolicy:
    key = name.value if isinstance(name, Algorithm) else name.strip().lower()
    if key not in _REGISTRY:
        raise ValueError(f"unknown algorithm {name}")
    return _REGISTRY[key]()
