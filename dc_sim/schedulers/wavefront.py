"""Wavefront policy."""

from __future__ import annotations

from dc_sim.model import Decision, DispatchSnapshot

from .base import DispatchContext, DispatchPolicy


class WavefrontPolicy(DispatchPolicy):
    """Jobs of one wave are spread over servers by their position in the wave."""

    name = "wavefront"

    def __init__(self) -> None:
        super().__init__()
        self._waves: list[list[int]] = []

    def init(self, context: DispatchContext) -> None:
        super().init(context)
        # raises DependencyError before the first tick
        self._waves = context.layers.waves

    def describe(self) -> str:
        return f"Running WaveFront\nThe waves are: {self._waves}"

    def decide(self, snapshot: DispatchSnapshot) -> list[Decision]:
        if not snapshot.waiting:
            return []
        job = snapshot.waiting[0]
        position = self._context.layers.wave_position(job.id)
        if position is None:
            return self.most_powerful(snapshot, job)
        target = position % len(snapshot.servers)
        return self.preempt_and_dispatch(snapshot, job, target, f"wave position {position}")
