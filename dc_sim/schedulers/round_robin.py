"""Round-robin policy."""

from __future__ import annotations

from dc_sim.model import Decision, DecisionAction, DispatchSnapshot

from .base import DispatchPolicy
from .election import most_powerful_available


class RoundRobinPolicy(DispatchPolicy):
    """Every job runs at most ``QUANTUM`` tick before going back to the queue."""

    name = "round_robin"
    QUANTUM = 1

    def describe(self) -> str:
        return "Running Round Robin"

    def decide(self, snapshot: DispatchSnapshot) -> list[Decision]:
        decisions: list[Decision] = []
        released: set[int] = set()
        for index, server in enumerate(snapshot.servers):
            if server.job is not None and server.job.quantum >= self.QUANTUM:
                decisions.append(
                    Decision(
                        action=DecisionAction.PREEMPT,
                        job=server.job,
                        server_index=index,
                        reason="quantum expired",
                    )
                )
                released.add(index)
        if not snapshot.waiting:
            return decisions
        job = snapshot.waiting[0]
        target = most_powerful_available(snapshot.servers, released)
        return decisions + self.dispatch(job, target, "most powerful available")
