"""Simulation engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Sequence

from dc_sim.events import SimEvent
from dc_sim.model import Job
from dc_sim.schedulers import Algorithm


class IDatacenter(ABC):
    """Simulation engine contract."""

    @abstractmethod
    def build(
        self,
        algorithm: str | Algorithm,
        jobs: Sequence[Job],
        dependencies: Iterable[tuple[int, int]] = (),
    ) -> None:
        """Build runtime state from the job set and the dependency pairs."""

    @abstractmethod
    def run(self, until: int | None = None) -> None:
        """Run simulation until every job is done or the tick horizon."""

    @abstractmethod
    def step(self) -> None:
        """Run one simulation tick."""

    @abstractmethod
    def stop(self) -> None:
        """Stop the simulation loop."""

    @abstractmethod
    def reset(self) -> None:
        """Reset engine state."""

    @abstractmethod
    def subscribe(self, handler: Callable[[SimEvent], None]) -> None:
        """Subscribe event handler."""
