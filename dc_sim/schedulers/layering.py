"""Dependency layering used by the wavefront and critical-path policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional


DependencyPair = tuple[int, int]


class DependencyError(ValueError):
    """Dependency pairs cannot be layered from a single root."""


def build_branches(pairs: Iterable[DependencyPair]) -> list[list[int]]:
    """Chain dependency pairs head-to-tail into linear branches.

    Each branch starts from the first unconsumed pair and keeps consuming the
    first remaining pair whose head equals the branch's current tail.
    """
    remaining = [tuple(pair) for pair in pairs]
    branches: list[list[int]] = []
    while remaining:
        head, tail = remaining.pop(0)
        branch = [head, tail]
        while True:
            nxt = next((pair for pair in remaining if pair[0] == branch[-1]), None)
            if nxt is None:
                break
            remaining.remove(nxt)
            branch.append(nxt[1])
        branches.append(branch)
    return branches


def build_waves(pairs: Iterable[DependencyPair], branches: list[list[int]]) -> list[list[int]]:
    """Layer the dependency DAG into waves starting from the first branch root.

    Every wave holds the direct successors of the previous wave's first job.
    The graph must be connected and acyclic from that root.
    """
    pairs = [tuple(pair) for pair in pairs]
    if not pairs or not branches:
        return []
    referenced = {job_id for pair in pairs for job_id in pair}
    waves = [[branches[0][0]]]
    covered = set(waves[0])
    while covered != referenced:
        root = waves[-1][0]
        wave: list[int] = []
        for head, tail in pairs:
            if head == root and tail not in wave:
                wave.append(tail)
        if not wave or set(wave) <= covered:
            missing = ", ".join(str(job_id) for job_id in sorted(referenced - covered))
            raise DependencyError(f"jobs not reachable through waves from root {waves[0][0]}: {missing}")
        waves.append(wave)
        covered.update(wave)
    return waves


@dataclass(slots=True)
class DependencyLayers:
    """Branches of the dependency pairs, with waves built on first access.

    Only the wavefront policy reads ``waves``; a DAG that cannot be layered
    into waves stays usable for every other policy.
    """

    pairs: list[DependencyPair] = field(default_factory=list)
    branches: list[list[int]] = field(default_factory=list)
    _waves: Optional[list[list[int]]] = field(default=None, init=False, repr=False)

    @classmethod
    def from_pairs(cls, pairs: Iterable[DependencyPair]) -> "DependencyLayers":
        pairs = [tuple(pair) for pair in pairs]
        return cls(pairs=pairs, branches=build_branches(pairs))

    @property
    def waves(self) -> list[list[int]]:
        if self._waves is None:
            self._waves = build_waves(self.pairs, self.branches)
        return self._waves

    def wave_position(self, job_id: int) -> Optional[int]:
        """Index of ``job_id`` inside the first wave that holds it."""
        for wave in self.waves:
            if job_id in wave:
                return wave.index(job_id)
        return None

    def branch_index(self, job_id: int) -> Optional[int]:
        for index, branch in enumerate(self.branches):
            if job_id in branch:
                return index
        return None
