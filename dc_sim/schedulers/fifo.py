"""First-in first-out policy."""

from __future__ import annotations

from dc_sim.model import Decision, DispatchSnapshot

from .base import DispatchPolicy
from .election import first_available


class FifoPolicy(DispatchPolicy):
    """Queue head on the first idle server."""

    name = "fifo"

    def describe(self) -> str:
        return "Running FIFO"

    def decide(self, snapshot: DispatchSnapshot) -> list[Decision]:
        if not snapshot.waiting:
            return []
        job = snapshot.waiting[0]
        return self.dispatch(job, first_available(snapshot.servers), "first available")
