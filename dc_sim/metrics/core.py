"""Default metrics implementation."""

from __future__ import annotations

from collections import defaultdict

from dc_sim.events import EventType, SimEvent

from .base import IMetric


class DatacenterMetrics(IMetric):
    """Aggregate key simulation metrics from the event stream."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._arrived = 0
        self._dispatched = 0
        self._completed = 0
        self._preempt_count = 0
        self._deadline_miss_count = 0
        self._deadline_miss_jobs: set[int] = set()
        self._power_cap_hits = 0
        self._server_dispatches: dict[str, int] = defaultdict(int)
        self._energy = 0.0
        self._peak_power = 0.0
        self._ticks = 0
        self._event_count = 0

    def consume(self, event: SimEvent) -> None:
        self._event_count += 1

        if event.type == EventType.JOB_ARRIVED:
            self._arrived += 1

        elif event.type == EventType.TICK:
            power = float(event.payload.get("power", 0.0))
            self._ticks += 1
            self._energy += power
            self._peak_power = max(self._peak_power, power)

        elif event.type == EventType.DISPATCH:
            self._dispatched += 1
            if event.server_id is not None:
                self._server_dispatches[str(event.server_id)] += 1

        elif event.type == EventType.PREEMPT:
            self._preempt_count += 1

        elif event.type == EventType.JOB_COMPLETE:
            self._completed += 1

        elif event.type == EventType.DEADLINE_MISS:
            self._deadline_miss_count += 1
            if event.job_id is not None:
                self._deadline_miss_jobs.add(event.job_id)

        elif event.type == EventType.POWER_CAP_REACHED:
            self._power_cap_hits += 1

    def report(self) -> dict:
        return {
            "jobs_arrived": self._arrived,
            "jobs_dispatched": self._dispatched,
            "jobs_completed": self._completed,
            "preempt_count": self._preempt_count,
            "deadline_miss_count": self._deadline_miss_count,
            "deadline_miss_jobs": sorted(self._deadline_miss_jobs),
            "power_cap_hits": self._power_cap_hits,
            "server_dispatches": dict(self._server_dispatches),
            "energy_used": self._energy,
            "peak_power": self._peak_power,
            "average_power": self._energy / self._ticks if self._ticks else 0.0,
            "ticks": self._ticks,
            "event_count": self._event_count,
        }
