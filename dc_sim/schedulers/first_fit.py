"""First-fit policy."""

from __future__ import annotations

from dc_sim.model import Decision, DispatchSnapshot

from .base import DispatchPolicy


class FirstFitPolicy(DispatchPolicy):
    """Shortest waiting job on the most powerful idle server.

    The sort is stable, so equal durations keep queue order.
    """

    name = "first_fit"

    def describe(self) -> str:
        return (
            "Running first fit. We execute jobs with the smallest job duration "
            "on the most performant server"
        )

    def decide(self, snapshot: DispatchSnapshot) -> list[Decision]:
        if not snapshot.waiting:
            return []
        job = min(snapshot.waiting, key=lambda candidate: candidate.duration)
        return self.most_powerful(snapshot, job)
