"""Critical path method policy."""

from __future__ import annotations

from dc_sim.model import Decision, DispatchSnapshot

from .base import DispatchPolicy


class CPMPolicy(DispatchPolicy):
    """Each dependency branch is pinned to one server."""

    name = "cpm"

    def describe(self) -> str:
        return f"Running Critical Path Method (CPM)\nThe dependency tree is: {self._context.layers.branches}"

    def decide(self, snapshot: DispatchSnapshot) -> list[Decision]:
        if not snapshot.waiting:
            return []
        job = snapshot.waiting[0]
        branch = self._context.layers.branch_index(job.id)
        if branch is None:
            return self.most_powerful(snapshot, job)
        target = branch % len(snapshot.servers)
        return self.preempt_and_dispatch(snapshot, job, target, f"branch {branch}")
