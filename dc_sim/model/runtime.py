"""Runtime types shared across the simulation engine and policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import ClassVar, Optional


def round_half_up(value: float, digits: int = 1) -> float:
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(slots=True, eq=False)
class Job:
    """One schedulable job instance.

    Instances compare by identity: preemption and periodic release create new
    instances that keep the source ``id``.
    """

    id: int
    arrival: int
    duration: int
    deadline: int
    periodicity: int = 0
    relative_duration: float = field(init=False)
    relative_deadline: int = field(init=False)
    quantum: int = 0
    # -1: never ran / not finished
    start: int = -1
    end: float = -1

    def __post_init__(self) -> None:
        self.relative_duration = self.duration
        self.relative_deadline = self.arrival + self.deadline

    def duplicate(self, arrival: Optional[int] = None) -> "Job":
        """Return a fresh instance of this job.

        Without ``arrival`` the copy continues the remaining work of a
        preempted instance and keeps its absolute deadline. With ``arrival``
        it is a new periodic release with full work and a deadline anchored
        on the new arrival.
        """
        clone = Job(
            id=self.id,
            arrival=self.arrival if arrival is None else arrival,
            duration=self.duration,
            deadline=self.deadline,
            periodicity=self.periodicity,
        )
        if arrival is None:
            clone.relative_duration = self.relative_duration
            clone.relative_deadline = self.relative_deadline
        return clone

    @property
    def finished(self) -> bool:
        return self.relative_duration <= 0


def expand_periodic(jobs: list[Job]) -> list[Job]:
    """Add one extra release for every periodic job id seen only once."""
    expanded = list(jobs)
    for job in jobs:
        if job.periodicity == 0:
            continue
        if sum(1 for other in expanded if other.id == job.id) > 1:
            continue
        release = job.duplicate(arrival=job.arrival + job.periodicity)
        position = len(expanded)
        for index, other in enumerate(expanded):
            if other.arrival > release.arrival:
                position = index
                break
        expanded.insert(position, release)
    return expanded


@dataclass(slots=True, eq=False)
class Server:
    """Compute server with a discrete frequency set and a quadratic power model."""

    POWER_MAX: ClassVar[int] = 200

    id: int
    performance: float
    frequencies: list[int]
    job: Optional[Job] = None
    slowdown: float = 1.0
    power: float = 0
    queue: list[Job] = field(default_factory=list)

    @property
    def max_frequency(self) -> int:
        return max(self.frequencies)

    @property
    def score(self) -> float:
        """Work done per tick at full speed."""
        return self.performance * self.max_frequency

    @property
    def idle(self) -> bool:
        return self.job is None

    def call(self, timestep: int, job: Job) -> float:
        """Start ``job`` on this server and return its predicted cost in ticks."""
        self.queue.append(job)
        if self.job is None:
            self.job = job
            job.start = timestep
        frequency = self.max_frequency
        self.set_slowdown(frequency)
        self.set_power()
        cost = round_half_up(job.relative_duration / self.performance / frequency)
        # predicted completion, overwritten with the tick on preemption
        job.end = round_half_up(timestep + cost)
        return cost

    def set_slowdown(self, frequency: int) -> None:
        self.slowdown = frequency / self.max_frequency

    def set_power(self) -> None:
        self.power = self.POWER_MAX * self.slowdown**2

    def shutdown(self) -> Optional[Job]:
        released = self.job
        if released is not None:
            released.quantum = 0
        self.job = None
        self.power = 0
        return released


class DecisionAction(str, Enum):
    DISPATCH = "dispatch"
    PREEMPT = "preempt"


@dataclass(slots=True)
class Decision:
    action: DecisionAction
    job: Job
    server_index: int
    reason: str = ""


@dataclass(slots=True)
class DispatchSnapshot:
    now: int
    waiting: list[Job]
    servers: list[Server]
