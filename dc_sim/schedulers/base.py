"""Dispatch policy interfaces and base classes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from dc_sim.model import Decision, DecisionAction, DispatchSnapshot, Job, Server

from .election import most_powerful_available
from .layering import DependencyLayers


@dataclass(slots=True)
class DispatchContext:
    server_count: int
    layers: DependencyLayers = field(default_factory=DependencyLayers)
    jobs: list[Job] = field(default_factory=list)
    servers: list[Server] = field(default_factory=list)


class IDispatchPolicy(ABC):
    """Dispatch interface used by the datacenter engine.

    ``decide`` is called once per waiting job per tick and must not mutate the
    snapshot; the engine applies the returned decisions in order.
    """

    name: str = ""

    def init(self, context: DispatchContext) -> None:
        """Initialize policy with the immutable platform context."""

    def describe(self) -> str:
        """Human-readable banner printed before the run."""
        return f"Running {self.name}"

    @abstractmethod
    def decide(self, snapshot: DispatchSnapshot) -> list[Decision]:
        """Produce decisions from the current dispatch snapshot."""


class DispatchPolicy(IDispatchPolicy, ABC):
    """Shared placement helpers for the built-in policies."""

    def __init__(self) -> None:
        self._context = DispatchContext(server_count=0)

    def init(self, context: DispatchContext) -> None:
        self._context = context

    @staticmethod
    def dispatch(job: Job, server_index: int | None, reason: str) -> list[Decision]:
        if server_index is None:
            return []
        return [Decision(action=DecisionAction.DISPATCH, job=job, server_index=server_index, reason=reason)]

    @staticmethod
    def preempt_and_dispatch(
        snapshot: DispatchSnapshot,
        job: Job,
        server_index: int,
        reason: str,
    ) -> list[Decision]:
        """Place ``job`` on a fixed server, evicting its current occupant."""
        decisions: list[Decision] = []
        occupant = snapshot.servers[server_index].job
        if occupant is not None:
            decisions.append(
                Decision(
                    action=DecisionAction.PREEMPT,
                    job=occupant,
                    server_index=server_index,
                    reason=reason,
                )
            )
        decisions.append(
            Decision(action=DecisionAction.DISPATCH, job=job, server_index=server_index, reason=reason)
        )
        return decisions

    def most_powerful(self, snapshot: DispatchSnapshot, job: Job) -> list[Decision]:
        return self.dispatch(job, most_powerful_available(snapshot.servers), "most powerful available")
