from __future__ import annotations

from pathlib import Path

import pytest

from dc_sim.io import ConfigError, InputLoader


INPUTS = Path(__file__).resolve().parents[1] / "inputs"


def _write_input(
    tmp_path: Path,
    *,
    settings: str | None = None,
    jobs: str = "0 0 10 5 0\n",
    servers: str = "0 1 (1 2)\n",
    dependencies: str | None = None,
) -> Path:
    (tmp_path / "jobs.txt").write_text(jobs, encoding="utf-8")
    (tmp_path / "servers.txt").write_text(servers, encoding="utf-8")
    if dependencies is not None:
        (tmp_path / "deps.txt").write_text(dependencies, encoding="utf-8")
    if settings is None:
        settings = 'power_cap = 500\njob_file = "jobs.txt"\nserver_file = "servers.txt"\n'
    path = tmp_path / "input.txt"
    path.write_text(settings, encoding="utf-8")
    return path


def test_load_bundled_input() -> None:
    simulation_input = InputLoader().load(INPUTS / "test2.txt")
    assert simulation_input.settings.power_cap == 1000
    assert simulation_input.settings.energy_cap == 10000
    assert [server.score for server in simulation_input.servers] == [3, 2, 6, 4]
    assert [job.id for job in simulation_input.jobs] == list(range(9))
    assert simulation_input.dependencies == [(0, 1), (0, 2), (1, 3), (1, 4), (3, 5)]

    config = simulation_input.config(silent=True)
    assert config.silent
    assert config.power_cap == 1000


def test_scheduled_jobs_are_fresh_instances() -> None:
    simulation_input = InputLoader().load(INPUTS / "test1.txt")
    first = simulation_input.scheduled_jobs()
    second = simulation_input.scheduled_jobs()

    assert len(first) == len(simulation_input.jobs) + 2
    assert all(a is not b for a, b in zip(first, second))
    assert not set(map(id, first)) & set(map(id, simulation_input.jobs))
    assert all(a is not b for a, b in zip(simulation_input.fresh_servers(), simulation_input.servers))


def test_settings_ignore_comments_and_unknown_keys(tmp_path: Path) -> None:
    path = _write_input(
        tmp_path,
        settings=(
            "# scenario\n"
            "power_cap = 750\n"
            "energy_cap = 20\n"
            "colour = blue\n"
            'job_file = "jobs.txt"\n'
            "server_file = servers.txt\n"
        ),
    )
    simulation_input = InputLoader().load(path)
    assert simulation_input.settings.power_cap == 750
    assert simulation_input.settings.repeat == 0
    assert simulation_input.settings.dependency_file is None
    assert simulation_input.dependencies == []


def test_dependencies_skip_lines_without_separator(tmp_path: Path) -> None:
    path = _write_input(
        tmp_path,
        settings=(
            "power_cap = 500\njob_file = jobs.txt\nserver_file = servers.txt\ndependency_file = deps.txt\n"
        ),
        dependencies="# a - b\n0 - 1\nnot a pair\n1 - 2\n",
    )
    assert InputLoader().load(path).dependencies == [(0, 1), (1, 2)]


def test_missing_input_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        InputLoader().load(tmp_path / "missing.txt")


def test_missing_job_file_raises(tmp_path: Path) -> None:
    path = _write_input(tmp_path)
    (tmp_path / "jobs.txt").unlink()
    with pytest.raises(ConfigError, match="jobs.txt"):
        InputLoader().load(path)


def test_missing_power_cap_raises(tmp_path: Path) -> None:
    path = _write_input(tmp_path, settings="job_file = jobs.txt\nserver_file = servers.txt\n")
    with pytest.raises(ConfigError, match="power_cap"):
        InputLoader().load(path)


def test_non_positive_power_cap_raises(tmp_path: Path) -> None:
    path = _write_input(tmp_path, settings="power_cap = 0\njob_file = jobs.txt\nserver_file = servers.txt\n")
    with pytest.raises(ConfigError, match="power_cap"):
        InputLoader().load(path)


@pytest.mark.parametrize(
    "jobs",
    [
        "0 0 10 5\n",
        "0 0 ten 5 0\n",
        "0 -1 10 5 0\n",
        "0 0 10 5 -2\n",
    ],
)
def test_malformed_job_line_raises(tmp_path: Path, jobs: str) -> None:
    path = _write_input(tmp_path, jobs=jobs)
    with pytest.raises(ConfigError, match="jobs.txt:1"):
        InputLoader().load(path)


@pytest.mark.parametrize(
    "servers",
    [
        "0 1 1 2\n",
        "0 (1 2)\n",
        "0 0 (1 2)\n",
        "0 1 ()\n",
        "0 1 (0 2)\n",
        "0 fast (1 2)\n",
    ],
)
def test_malformed_server_line_raises(tmp_path: Path, servers: str) -> None:
    path = _write_input(tmp_path, servers=servers)
    with pytest.raises(ConfigError, match="servers.txt:1"):
        InputLoader().load(path)


def test_duplicate_server_ids_raise(tmp_path: Path) -> None:
    path = _write_input(tmp_path, servers="0 1 (1)\n0 2 (1)\n")
    with pytest.raises(ConfigError, match="duplicate server id"):
        InputLoader().load(path)


def test_empty_server_file_raises(tmp_path: Path) -> None:
    path = _write_input(tmp_path, servers="# nothing here\n")
    with pytest.raises(ConfigError, match="invalid platform"):
        InputLoader().load(path)


def test_malformed_dependency_raises(tmp_path: Path) -> None:
    path = _write_input(
        tmp_path,
        settings="power_cap = 500\njob_file = jobs.txt\nserver_file = servers.txt\ndependency_file = deps.txt\n",
        dependencies="0 - x\n",
    )
    with pytest.raises(ConfigError, match="deps.txt:1"):
        InputLoader().load(path)
