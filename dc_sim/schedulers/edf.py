"""Earliest deadline first policy."""

from __future__ import annotations

from dc_sim.analysis import edf_feasibility
from dc_sim.model import Decision, DecisionAction, DispatchSnapshot

from .base import DispatchPolicy


class EDFPolicy(DispatchPolicy):
    """EDF with a constant static slowdown of 1 and single-victim preemption.

    With every server busy, the waiting job with the earliest deadline evicts
    the running job with the latest deadline, provided its own absolute
    deadline is strictly earlier.
    """

    name = "edf"

    def describe(self) -> str:
        report = edf_feasibility(self._context.jobs, self._context.servers)
        return (
            "Running Earliest Deadline First with Constant Static Slowdown (CSS) "
            "and a static slowdown of 1.\n"
            f"{report.describe()}"
        )

    def decide(self, snapshot: DispatchSnapshot) -> list[Decision]:
        if not snapshot.waiting:
            return []
        job = min(snapshot.waiting, key=lambda candidate: candidate.deadline)
        if any(server.idle for server in snapshot.servers):
            return self.most_powerful(snapshot, job)

        # ties keep the lowest index, as server election does
        victim_index = 0
        for index, server in enumerate(snapshot.servers):
            if server.job.deadline > snapshot.servers[victim_index].job.deadline:
                victim_index = index
        victim = snapshot.servers[victim_index].job
        if job.relative_deadline >= victim.relative_deadline:
            return []
        return [
            Decision(
                action=DecisionAction.PREEMPT,
                job=victim,
                server_index=victim_index,
                reason="earlier deadline waiting",
            ),
            Decision(
                action=DecisionAction.DISPATCH,
                job=job,
                server_index=victim_index,
                reason="earliest deadline",
            ),
        ]
