"""Console narration of a simulation run."""

from __future__ import annotations

import sys
from typing import TextIO

from dc_sim.events import EventType, SimEvent


class ConsoleReporter:
    """Print per-tick narration from the event stream.

    Ticks without arrivals and without power draw are skipped, together with
    their deadline warnings.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._show_tick = False

    def __call__(self, event: SimEvent) -> None:
        if event.type == EventType.SIMULATION_STARTED:
            self._print(event.payload.get("banner", ""))
        elif event.type == EventType.TICK:
            self._on_tick(event)
        elif event.type == EventType.DEADLINE_MISS and self._show_tick:
            self._print(f"Warning! The job {event.job_id} missed its deadline!")
        elif event.type == EventType.POWER_CAP_REACHED:
            self._print(
                f"Power capacity is reached ({event.payload['power']:g}/{event.payload['power_cap']:g}), "
                "cannot schedule more tasks!"
            )
        elif event.type == EventType.DISPATCH:
            self._print(
                f"Job {event.job_id} of relative duration {event.payload['relative_duration']} "
                f"has been attributed to server {event.payload['server_index'] + 1}"
            )
        elif event.type == EventType.PREEMPT:
            self._print(f"Job {event.job_id} preempted on server {event.server_id} ({event.payload['reason']})")

    def _on_tick(self, event: SimEvent) -> None:
        arrivals = event.payload.get("arrivals", [])
        power = event.payload.get("power", 0)
        self._show_tick = bool(arrivals) or power != 0
        if not self._show_tick:
            return
        self._print(f"\n        *** Time {event.time} ***")
        for arrival in arrivals:
            self._print(f"Job {arrival['job_id']} arrives, its deadline is {arrival['deadline']}")
        self._print(
            "Job Running | Waiting | Power consumption\n"
            f"     {event.payload['running']}      |    {event.payload['waiting']}    |      {power:g}"
        )

    def _print(self, text: str) -> None:
        print(text, file=self._stream or sys.stdout)
