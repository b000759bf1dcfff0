"""Static schedulability checks over a job set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from dc_sim.model import Job, Server


@dataclass(slots=True)
class FeasibilityReport:
    utilization: float
    capacity: float
    feasible: bool
    slowdown: float = 1.0

    def describe(self) -> str:
        verdict = "Solution is feasible" if self.feasible else "Solution is not feasible (missed deadlines predicted)"
        return (
            "Necessary condition of the solution's feasibility: U <= processors being "
            f"{self.utilization:.3f} <= {self.capacity:g}\n"
            f"(where {self.capacity:g} corresponds to the sum of the servers' performance)\n"
            f"{verdict}\n"
            f"Suggested static slowdown: {self.slowdown:.2f} (the simulation runs at full speed)"
        )


def total_performance(servers: Sequence[Server]) -> float:
    return sum(server.performance for server in servers)


def utilization(jobs: Sequence[Job], servers: Sequence[Server]) -> float:
    """Periodic utilization normalized by the total server performance."""
    load = sum(job.duration / job.periodicity for job in jobs if job.periodicity > 0)
    capacity = total_performance(servers)
    return load / capacity if capacity > 0 else 0.0


def density(jobs: Sequence[Job]) -> float:
    delta = 0.0
    for job in jobs:
        period = job.periodicity if job.periodicity > 0 else job.deadline + 1
        window = min(period, job.deadline)
        if window <= 0:
            continue
        delta += job.duration / window
    return delta


def deadlines_exceed_periods(jobs: Sequence[Job]) -> bool:
    """True when every periodic job's duration fits strictly inside its period."""
    return all(job.duration < job.periodicity for job in jobs if job.periodicity > 0)


def static_slowdown(jobs: Sequence[Job], servers: Sequence[Server]) -> float:
    """Constant static slowdown suggested for the job set.

    U when durations fit in their periods, else the density when it is at
    most 1, else full speed.
    """
    if deadlines_exceed_periods(jobs):
        return utilization(jobs, servers)
    delta = density(jobs)
    if delta <= 1:
        return delta
    return 1.0


def edf_feasibility(jobs: Sequence[Job], servers: Sequence[Server]) -> FeasibilityReport:
    u = utilization(jobs, servers)
    capacity = total_performance(servers)
    return FeasibilityReport(
        utilization=u,
        capacity=capacity,
        feasible=u <= capacity,
        slowdown=static_slowdown(jobs, servers),
    )
