"""Input file loading and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import re
from typing import Any

from pydantic import ValidationError

from dc_sim.model import (
    DatacenterConfig,
    InputSpec,
    Job,
    JobSpec,
    PlatformSpec,
    Server,
    ServerSpec,
    expand_periodic,
)


_FREQUENCIES = re.compile(r"\((.*?)\)")
_DEPENDENCY_SEPARATOR = " - "


class ConfigError(Exception):
    """Input loading/validation error."""


@dataclass(slots=True)
class SimulationInput:
    """Everything one run needs, parsed from an input file and its siblings."""

    source: Path
    settings: InputSpec
    servers: list[Server]
    jobs: list[Job]
    dependencies: list[tuple[int, int]] = field(default_factory=list)

    def config(self, *, silent: bool = False) -> DatacenterConfig:
        return DatacenterConfig(
            power_cap=self.settings.power_cap,
            energy_cap=self.settings.energy_cap,
            repeat=self.settings.repeat,
            silent=silent,
        )

    def scheduled_jobs(self) -> list[Job]:
        """Fresh job instances, periodic releases included; parsed jobs stay untouched."""
        return expand_periodic([job.duplicate(arrival=job.arrival) for job in self.jobs])

    def fresh_servers(self) -> list[Server]:
        return [
            Server(id=server.id, performance=server.performance, frequencies=list(server.frequencies))
            for server in self.servers
        ]


class InputLoader:
    """Load the key/value input file and the job, server and dependency files."""

    def load(self, path: str | Path) -> SimulationInput:
        input_path = Path(path)
        settings = self.load_settings(input_path)
        base_dir = input_path.parent
        servers = self.load_servers(base_dir / settings.server_file)
        jobs = self.load_jobs(base_dir / settings.job_file)
        dependencies: list[tuple[int, int]] = []
        if settings.dependency_file:
            dependencies = self.load_dependencies(base_dir / settings.dependency_file)
        self._validate_platform(servers, jobs, dependencies)
        return SimulationInput(
            source=input_path,
            settings=settings,
            servers=servers,
            jobs=jobs,
            dependencies=dependencies,
        )

    def load_settings(self, path: str | Path) -> InputSpec:
        values: dict[str, Any] = {}
        for _, line in self._read_lines(Path(path), skip_comments=False):
            if "=" not in line:
                continue
            key, _, value = line.replace('"', "").partition("=")
            values[key.strip()] = value.strip()
        try:
            return InputSpec.model_validate(values)
        except ValidationError as exc:
            raise ConfigError(f"invalid input file {path}: {exc}") from exc

    def load_jobs(self, path: str | Path) -> list[Job]:
        jobs: list[Job] = []
        for number, line in self._read_lines(Path(path)):
            elements = self._integers(path, number, line.split())
            if len(elements) != 5:
                raise ConfigError(f"{path}:{number}: expected 'id arrival duration deadline periodicity'")
            spec = self._validate(JobSpec, path, number, dict(zip(JobSpec.model_fields, elements)))
            jobs.append(
                Job(
                    id=spec.id,
                    arrival=spec.arrival,
                    duration=spec.duration,
                    deadline=spec.deadline,
                    periodicity=spec.periodicity,
                )
            )
        return jobs

    def load_servers(self, path: str | Path) -> list[Server]:
        servers: list[Server] = []
        for number, line in self._read_lines(Path(path)):
            match = _FREQUENCIES.search(line)
            if match is None:
                raise ConfigError(f"{path}:{number}: missing '(frequencies)' list")
            head = line[: match.start()].split()
            if len(head) != 2:
                raise ConfigError(f"{path}:{number}: expected 'id performance (f1 ... fn)'")
            try:
                payload = {
                    "id": int(head[0]),
                    "performance": float(head[1]),
                    "frequencies": [int(value) for value in match.group(1).split()],
                }
            except ValueError as exc:
                raise ConfigError(f"{path}:{number}: {exc}") from exc
            spec = self._validate(ServerSpec, path, number, payload)
            servers.append(Server(id=spec.id, performance=spec.performance, frequencies=list(spec.frequencies)))
        return servers

    def load_dependencies(self, path: str | Path) -> list[tuple[int, int]]:
        dependencies: list[tuple[int, int]] = []
        for number, line in self._read_lines(Path(path)):
            if _DEPENDENCY_SEPARATOR not in line:
                continue
            elements = self._integers(path, number, line.split(_DEPENDENCY_SEPARATOR))
            if len(elements) != 2:
                raise ConfigError(f"{path}:{number}: expected 'a - b'")
            dependencies.append((elements[0], elements[1]))
        return dependencies

    @staticmethod
    def _read_lines(path: Path, *, skip_comments: bool = True) -> list[tuple[int, str]]:
        if not path.is_file():
            raise ConfigError(f"input file not found: {path}")
        lines: list[tuple[int, str]] = []
        for number, raw in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue
            if skip_comments and line.startswith("#"):
                continue
            lines.append((number, line))
        return lines

    @staticmethod
    def _integers(path: str | Path, number: int, tokens: list[str]) -> list[int]:
        try:
            return [int(token) for token in tokens]
        except ValueError as exc:
            raise ConfigError(f"{path}:{number}: {exc}") from exc

    @staticmethod
    def _validate(model: type, path: str | Path, number: int, payload: dict[str, Any]) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"{path}:{number}: {exc}") from exc

    @staticmethod
    def _validate_platform(
        servers: list[Server],
        jobs: list[Job],
        dependencies: list[tuple[int, int]],
    ) -> PlatformSpec:
        try:
            return PlatformSpec.model_validate(
                {
                    "servers": [
                        {"id": s.id, "performance": s.performance, "frequencies": s.frequencies}
                        for s in servers
                    ],
                    "jobs": [
                        {
                            "id": j.id,
                            "arrival": j.arrival,
                            "duration": j.duration,
                            "deadline": j.deadline,
                            "periodicity": j.periodicity,
                        }
                        for j in jobs
                    ],
                    "dependencies": dependencies,
                }
            )
        except ValidationError as exc:
            raise ConfigError(f"invalid platform: {exc}") from exc
