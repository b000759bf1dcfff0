from __future__ import annotations

import pytest

from dc_sim.analysis import (
    deadlines_exceed_periods,
    density,
    edf_feasibility,
    static_slowdown,
    total_performance,
    utilization,
)
from dc_sim.model import Job, Server


def _servers() -> list[Server]:
    return [Server(id=0, performance=1, frequencies=[1, 2]), Server(id=1, performance=3, frequencies=[1])]


def test_utilization_counts_periodic_jobs_only() -> None:
    jobs = [
        Job(id=0, arrival=0, duration=4, deadline=8, periodicity=8),
        Job(id=1, arrival=0, duration=6, deadline=10, periodicity=4),
        Job(id=2, arrival=0, duration=100, deadline=10),
    ]
    assert total_performance(_servers()) == 4
    assert utilization(jobs, _servers()) == pytest.approx((0.5 + 1.5) / 4)
    assert not deadlines_exceed_periods(jobs)
    assert deadlines_exceed_periods(jobs[:1])


def test_density_uses_smaller_of_period_and_deadline() -> None:
    jobs = [
        Job(id=0, arrival=0, duration=2, deadline=4, periodicity=8),
        Job(id=1, arrival=0, duration=3, deadline=6),
        Job(id=2, arrival=0, duration=3, deadline=0),
    ]
    assert density(jobs) == pytest.approx(2 / 4 + 3 / 6)


def test_static_slowdown_prefers_utilization() -> None:
    periodic = [Job(id=0, arrival=0, duration=2, deadline=4, periodicity=8)]
    assert static_slowdown(periodic, _servers()) == pytest.approx(0.25 / 4)

    overloaded = [Job(id=0, arrival=0, duration=9, deadline=4, periodicity=8)]
    assert static_slowdown(overloaded, _servers()) == 1.0

    dense = [Job(id=0, arrival=0, duration=9, deadline=20, periodicity=8)]
    assert static_slowdown(dense, _servers()) == 1.0


def test_edf_feasibility_report() -> None:
    jobs = [Job(id=0, arrival=0, duration=4, deadline=8, periodicity=8)]
    report = edf_feasibility(jobs, _servers())
    assert report.feasible
    assert report.capacity == 4
    assert "Solution is feasible" in report.describe()

    heavy = [Job(id=index, arrival=0, duration=10, deadline=2, periodicity=2) for index in range(4)]
    report = edf_feasibility(heavy, _servers())
    assert not report.feasible
    assert "not feasible" in report.describe()
