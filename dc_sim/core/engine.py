"""SimPy-backed datacenter simulation engine."""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

import simpy

from dc_sim.events import EventBus, EventType, SimEvent
from dc_sim.metrics import DatacenterMetrics, IMetric
from dc_sim.model import DatacenterConfig, Decision, DecisionAction, DispatchSnapshot, Job, Server
from dc_sim.schedulers import (
    Algorithm,
    DependencyLayers,
    DispatchContext,
    IDispatchPolicy,
    create_policy,
)

from .interfaces import IDatacenter


class Datacenter(IDatacenter):
    """Discrete-tick engine driving a fixed set of servers.

    Each tick: admission, power accounting, progress, deadline audit, then a
    dispatch round unless the last power sample reached the power cap.
    """

    def __init__(
        self,
        servers: Sequence[Server],
        config: DatacenterConfig,
        policy: IDispatchPolicy | None = None,
        metrics: list[IMetric] | None = None,
        reporter: Callable[[SimEvent], None] | None = None,
    ) -> None:
        if not servers:
            raise ValueError("datacenter needs at least one server")
        self._servers = list(servers)
        self._config = config
        self._external_policy = policy
        self._metrics = metrics or [DatacenterMetrics()]
        self._subscribers: list[Callable[[SimEvent], None]] = []
        if reporter is not None and not config.silent:
            self._subscribers.append(reporter)

        self._env = simpy.Environment()
        self._event_bus = EventBus()
        self._events: list[SimEvent] = []
        self._setup_event_pipeline()

        self._algorithm: Optional[str] = None
        self._policy: IDispatchPolicy | None = None
        self._layers = DependencyLayers()
        self._jobs: list[Job] = []
        self._job_queue: list[Job] = []
        self._power_used: list[float] = []
        self._deadline_missed = 0
        self._stopped = False
        self._finished = False

    def subscribe(self, handler: Callable[[SimEvent], None]) -> None:
        if handler in self._subscribers:
            return
        self._subscribers.append(handler)
        self._event_bus.subscribe(handler)

    def build(
        self,
        algorithm: str | Algorithm,
        jobs: Sequence[Job],
        dependencies: Iterable[tuple[int, int]] = (),
    ) -> None:
        self.reset()
        self._algorithm = algorithm.value if isinstance(algorithm, Algorithm) else algorithm.strip().lower()
        self._jobs = list(jobs)
        self._layers = DependencyLayers.from_pairs(dependencies)
        self._policy = self._external_policy or create_policy(self._algorithm)
        self._policy.init(
            DispatchContext(
                server_count=len(self._servers),
                layers=self._layers,
                jobs=list(self._jobs),
                servers=list(self._servers),
            )
        )
        self._publish(
            EventType.SIMULATION_STARTED,
            payload={
                "algorithm": self._algorithm,
                "banner": self._policy.describe(),
                "job_ids": [job.id for job in self._jobs],
            },
        )

    def run(self, until: int | None = None) -> None:
        if self._policy is None:
            raise RuntimeError("build() must be called before run()")
        while not self._stopped and self._jobs_left():
            if until is not None and self.timestep >= until:
                break
            self._advance_once()
        self._finalize()

    def step(self) -> None:
        if self._policy is None:
            raise RuntimeError("build() must be called before step()")
        if self._jobs_left():
            self._advance_once()
        self._finalize()

    def stop(self) -> None:
        self._stopped = True

    def reset(self) -> None:
        self._env = simpy.Environment()
        for metric in self._metrics:
            metric.reset()
        self._event_bus = EventBus()
        self._events = []
        self._setup_event_pipeline()
        for server in self._servers:
            server.shutdown()
            server.queue.clear()

        self._algorithm = None
        self._policy = None
        self._layers = DependencyLayers()
        self._jobs = []
        self._job_queue = []
        self._power_used = []
        self._deadline_missed = 0
        self._stopped = False
        self._finished = False

    def _setup_event_pipeline(self) -> None:
        self._event_bus.subscribe(self._events.append)
        for metric in self._metrics:
            self._event_bus.subscribe(metric.consume)
        for handler in self._subscribers:
            self._event_bus.subscribe(handler)

    @property
    def config(self) -> DatacenterConfig:
        return self._config

    @property
    def algorithm(self) -> Optional[str]:
        return self._algorithm

    @property
    def servers(self) -> list[Server]:
        return list(self._servers)

    @property
    def jobs(self) -> list[Job]:
        return list(self._jobs)

    @property
    def job_queue(self) -> list[Job]:
        return list(self._job_queue)

    @property
    def layers(self) -> DependencyLayers:
        return self._layers

    @property
    def power_used(self) -> list[float]:
        return list(self._power_used)

    @property
    def energy_used(self) -> float:
        return sum(self._power_used)

    @property
    def timestep(self) -> int:
        return int(self._env.now)

    @property
    def makespan(self) -> int:
        return max(0, self.timestep - 1)

    @property
    def deadline_missed(self) -> int:
        return self._deadline_missed

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def events(self) -> list[SimEvent]:
        return list(self._events)

    def metric_report(self) -> dict:
        merged: dict = {}
        for metric in self._metrics:
            merged.update(metric.report())
        merged["makespan"] = self.makespan
        return merged

    def _publish(
        self,
        event_type: EventType,
        *,
        job_id: int | None = None,
        server_id: int | None = None,
        payload: dict | None = None,
    ) -> SimEvent:
        return self._event_bus.publish(
            event_type=event_type,
            time=self.timestep,
            job_id=job_id,
            server_id=server_id,
            payload=payload,
        )

    def _jobs_left(self) -> bool:
        if self._job_queue:
            return True
        if any(not server.idle for server in self._servers):
            return True
        return any(job.end < 0 for job in self._jobs)

    def _advance_once(self) -> None:
        now = self.timestep
        arrivals = self._admit_arrivals(now)
        power = self._record_power()
        running = self._progress_servers(now)
        late = self._audit_deadlines(now)
        self._publish(
            EventType.TICK,
            payload={
                "power": power,
                "running": running,
                "waiting": len(self._job_queue),
                "arrivals": [{"job_id": job.id, "deadline": job.deadline} for job in arrivals],
            },
        )
        for job in late:
            self._publish(EventType.DEADLINE_MISS, job_id=job.id, payload={"deadline": job.deadline})

        if self._power_cap_reached():
            self._publish(
                EventType.POWER_CAP_REACHED,
                payload={"power": self._power_used[-1], "power_cap": self._config.power_cap},
            )
        else:
            self._dispatch_round(now)

        timeout = self._env.timeout(1)
        self._env.run(until=timeout)

    def _admit_arrivals(self, now: int) -> list[Job]:
        arrivals: list[Job] = []
        for job in self._jobs:
            if job.arrival != now:
                continue
            # Shifted on top of the construction-time relative_deadline.
            job.deadline += now
            self._job_queue.append(job)
            arrivals.append(job)
            self._publish(EventType.JOB_ARRIVED, job_id=job.id, payload={"deadline": job.deadline})
        return arrivals

    def _record_power(self) -> float:
        consumption = sum(server.power for server in self._servers)
        self._power_used.append(consumption)
        return consumption

    def _progress_servers(self, now: int) -> int:
        running = 0
        for server in self._servers:
            job = server.job
            if job is None:
                continue
            running += 1
            job.relative_duration -= server.score
            job.quantum += 1
            if job.finished:
                server.shutdown()
                self._publish(
                    EventType.JOB_COMPLETE,
                    job_id=job.id,
                    server_id=server.id,
                    payload={"start": job.start, "end": job.end},
                )
        return running

    def _audit_deadlines(self, now: int) -> list[Job]:
        late = [job for job in self._job_queue if job.deadline <= now]
        self._deadline_missed += len(late)
        return late

    def _power_cap_reached(self) -> bool:
        return self._power_used[-1] >= self._config.power_cap

    def _dispatch_round(self, now: int) -> None:
        assert self._policy is not None
        for _ in range(len(self._job_queue)):
            snapshot = DispatchSnapshot(
                now=now,
                waiting=list(self._job_queue),
                servers=list(self._servers),
            )
            for decision in self._policy.decide(snapshot):
                self._apply(decision, now)

    def _apply(self, decision: Decision, now: int) -> None:
        server = self._servers[decision.server_index]
        if decision.action == DecisionAction.PREEMPT:
            self._apply_preempt(server, decision, now)
        elif decision.action == DecisionAction.DISPATCH:
            self._apply_dispatch(server, decision, now)

    def _apply_preempt(self, server: Server, decision: Decision, now: int) -> None:
        victim = server.job
        if victim is None or victim is not decision.job:
            raise RuntimeError(f"server {server.id} is not running job {decision.job.id}")
        victim.end = now
        requeued = victim.duplicate()
        server.shutdown()
        self._job_queue.append(requeued)
        self._publish(
            EventType.PREEMPT,
            job_id=victim.id,
            server_id=server.id,
            payload={"remaining": requeued.relative_duration, "reason": decision.reason},
        )

    def _apply_dispatch(self, server: Server, decision: Decision, now: int) -> None:
        job = decision.job
        if not server.idle:
            raise RuntimeError(f"server {server.id} is busy with job {server.job.id}")
        if not any(waiting is job for waiting in self._job_queue):
            raise RuntimeError(f"job {job.id} is not waiting")
        self._job_queue = [waiting for waiting in self._job_queue if waiting is not job]
        cost = server.call(now, job)
        self._publish(
            EventType.DISPATCH,
            job_id=job.id,
            server_id=server.id,
            payload={
                "relative_duration": job.relative_duration,
                "cost": cost,
                "server_index": decision.server_index,
                "reason": decision.reason,
            },
        )

    def _finalize(self) -> None:
        if self._finished or self._jobs_left():
            return
        self._finished = True
        self._publish(
            EventType.SIMULATION_FINISHED,
            payload={
                "makespan": self.makespan,
                "energy_used": self.energy_used,
                "deadline_missed": self._deadline_missed,
            },
        )
