from __future__ import annotations

import pytest

from dc_sim.model import DecisionAction, DispatchSnapshot, Job, Server
from dc_sim.schedulers import (
    Algorithm,
    DependencyError,
    DependencyLayers,
    DispatchContext,
    EDFPolicy,
    FifoPolicy,
    RoundRobinPolicy,
    WavefrontPolicy,
    available_policies,
    build_branches,
    build_waves,
    create_policy,
    register_policy,
)


PAIRS = [(0, 1), (0, 2), (1, 3), (1, 4), (3, 5)]


def _servers(count: int = 2) -> list[Server]:
    return [Server(id=index, performance=1, frequencies=[1]) for index in range(count)]


def _job(job_id: int, deadline: int = 10, duration: int = 4) -> Job:
    return Job(id=job_id, arrival=0, duration=duration, deadline=deadline)


def test_build_branches_chains_pairs() -> None:
    assert build_branches(PAIRS) == [[0, 1, 3, 5], [0, 2], [1, 4]]
    assert build_branches([]) == []


def test_build_waves_follows_first_job_of_each_wave() -> None:
    branches = build_branches(PAIRS)
    assert build_waves(PAIRS, branches) == [[0], [1, 2], [3, 4], [5]]


def test_build_waves_rejects_unreachable_jobs() -> None:
    pairs = [(0, 1), (0, 2), (2, 3)]
    with pytest.raises(DependencyError, match="3"):
        build_waves(pairs, build_branches(pairs))


def test_build_waves_rejects_cycle() -> None:
    pairs = [(0, 1), (1, 0), (5, 6)]
    with pytest.raises(DependencyError):
        build_waves(pairs, build_branches(pairs))


def test_dependency_layers_lookups() -> None:
    layers = DependencyLayers.from_pairs(PAIRS)
    assert layers.wave_position(0) == 0
    assert layers.wave_position(2) == 1
    assert layers.wave_position(4) == 1
    assert layers.wave_position(42) is None
    assert layers.branch_index(1) == 0
    assert layers.branch_index(2) == 1
    assert layers.branch_index(4) == 2
    assert layers.branch_index(42) is None

    empty = DependencyLayers.from_pairs([])
    assert empty.waves == []
    assert empty.branches == []


def test_registry_lists_builtin_policies() -> None:
    assert available_policies()[:6] == [algorithm.value for algorithm in Algorithm]
    assert isinstance(create_policy("FIFO"), FifoPolicy)
    assert isinstance(create_policy(Algorithm.EDF), EDFPolicy)


def test_registry_rejects_unknown_name() -> None:
    with pytest.raises(ValueError, match="unknown algorithm"):
        create_policy("lottery")


def test_register_policy_adds_factory() -> None:
    register_policy("Eager", FifoPolicy)
    assert isinstance(create_policy("eager"), FifoPolicy)


def test_policies_do_nothing_without_waiting_jobs() -> None:
    snapshot = DispatchSnapshot(now=0, waiting=[], servers=_servers())
    for name in [algorithm.value for algorithm in Algorithm]:
        policy = create_policy(name)
        policy.init(DispatchContext(server_count=2))
        assert policy.decide(snapshot) == []


def test_edf_preempts_only_for_strictly_earlier_deadline() -> None:
    servers = _servers()
    servers[0].call(0, _job(0, deadline=5))
    servers[1].call(0, _job(1, deadline=9))
    policy = EDFPolicy()
    policy.init(DispatchContext(server_count=2))

    urgent = _job(2, deadline=3)
    decisions = policy.decide(DispatchSnapshot(now=1, waiting=[_job(3, deadline=20), urgent], servers=servers))
    assert [(decision.action, decision.job.id, decision.server_index) for decision in decisions] == [
        (DecisionAction.PREEMPT, 1, 1),
        (DecisionAction.DISPATCH, 2, 1),
    ]

    tied = _job(4, deadline=9)
    assert policy.decide(DispatchSnapshot(now=1, waiting=[tied], servers=servers)) == []


def test_round_robin_releases_expired_servers() -> None:
    servers = _servers()
    running = _job(0)
    servers[0].call(0, running)
    running.quantum = 1
    servers[1].call(0, _job(1))
    policy = RoundRobinPolicy()
    policy.init(DispatchContext(server_count=2))

    waiting = _job(2)
    decisions = policy.decide(DispatchSnapshot(now=1, waiting=[waiting], servers=servers))
    assert [(decision.action, decision.job.id, decision.server_index) for decision in decisions] == [
        (DecisionAction.PREEMPT, 0, 0),
        (DecisionAction.DISPATCH, 2, 0),
    ]


def test_wavefront_evicts_occupant_of_target_server() -> None:
    servers = _servers()
    occupant = _job(7)
    servers[1].call(0, occupant)
    policy = WavefrontPolicy()
    policy.init(DispatchContext(server_count=2, layers=DependencyLayers.from_pairs(PAIRS)))

    decisions = policy.decide(DispatchSnapshot(now=1, waiting=[_job(2)], servers=servers))
    assert [(decision.action, decision.job.id, decision.server_index) for decision in decisions] == [
        (DecisionAction.PREEMPT, 7, 1),
        (DecisionAction.DISPATCH, 2, 1),
    ]


def test_banners_describe_layers() -> None:
    layers = DependencyLayers.from_pairs(PAIRS)
    wavefront = create_policy("wavefront")
    wavefront.init(DispatchContext(server_count=2, layers=layers))
    assert "[[0], [1, 2], [3, 4], [5]]" in wavefront.describe()

    cpm = create_policy("cpm")
    cpm.init(DispatchContext(server_count=2, layers=layers))
    assert "[[0, 1, 3, 5], [0, 2], [1, 4]]" in cpm.describe()

    edf = create_policy("edf")
    edf.init(DispatchContext(server_count=2, jobs=[_job(0)], servers=_servers()))
    assert "feasible" in edf.describe()


def test_layers_build_waves_only_on_access() -> None:
    layers = DependencyLayers.from_pairs([(0, 1), (0, 2), (2, 3)])
    assert layers.branches == [[0, 1], [0, 2, 3]]
    assert layers.branch_index(3) == 1
    with pytest.raises(DependencyError):
        layers.waves


def test_wavefront_init_rejects_unlayerable_pairs() -> None:
    layers = DependencyLayers.from_pairs([(0, 1), (0, 2), (2, 3)])
    with pytest.raises(DependencyError):
        WavefrontPolicy().init(DispatchContext(server_count=2, layers=layers))

    cpm = create_policy("cpm")
    cpm.init(DispatchContext(server_count=2, layers=layers))
    assert "[[0, 1], [0, 2, 3]]" in cpm.describe()
