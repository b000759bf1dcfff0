"""Result, power and summary writers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from dc_sim.core import Datacenter
from dc_sim.model import Server


RESULTS_HEADER = "#jobid serverid start end"
PLOT_HORIZON = 20


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def scheduling_records(servers: Sequence[Server]) -> list[tuple[int, int, int, float]]:
    """Every dispatch record, server by server, stable-sorted by job id."""
    records = [
        (job.id, server.id, job.start, job.end)
        for server in servers
        for job in server.queue
    ]
    return sorted(records, key=lambda record: record[0])


def format_scheduling(servers: Sequence[Server]) -> str:
    lines = [RESULTS_HEADER]
    for job_id, server_id, start, end in scheduling_records(servers):
        line = f"{job_id} {server_id} {start} {end}"
        if end < PLOT_HORIZON:
            lines.append(line)
        else:
            # keeps the plotted gantt compact
            lines.append(f"#arrival > {PLOT_HORIZON}, exclude from graph plot")
            lines.append(f"#{line}")
    return "\n".join(lines) + "\n"


def write_scheduling(path: str | Path, servers: Sequence[Server]) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(format_scheduling(servers), encoding="utf-8")
    return output


def format_power(powers: Sequence[float]) -> str:
    return ", ".join(_format_number(power) for power in powers)


def write_power(path: str | Path, powers: Sequence[float]) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(format_power(powers), encoding="utf-8")
    return output


def format_summary(datacenter: Datacenter) -> str:
    config = datacenter.config
    arrival_ids = [job.id for job in datacenter.jobs]
    return (
        "\n--------------------------------------------\n"
        "        *** Sum up of the datacenter ***\n"
        "- Job's id arrival:\n"
        f"{arrival_ids}\n"
        f"- Power capacity: {_format_number(config.power_cap)}\n"
        f"- Total power used: {_format_number(datacenter.energy_used)} / "
        f"{_format_number(config.energy_cap)} available\n"
        f"- Makespan: {datacenter.makespan} unit of time\n"
        f"- Deadline missed: {datacenter.deadline_missed}\n"
        f"- Repeat: {config.repeat} times\n"
        "--------------------------------------------\n"
    )


def write_summary(path: str | Path, datacenter: Datacenter) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(format_summary(datacenter), encoding="utf-8")
    return output


def write_json(path: str | Path, payload: dict[str, Any]) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return output
