"""Render the scheduling Gantt chart and the power curve of a finished run.

Run as ``python -m dc_sim.cli.plot outputs/results.txt``. The power series is
read from ``powers.txt`` next to the results file.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402


def read_results(path: Path) -> list[tuple[int, int, float, float]]:
    records: list[tuple[int, int, float, float]] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        job_id, server_id, start, end = line.split()
        records.append((int(job_id), int(server_id), float(start), float(end)))
    return records


def read_powers(path: Path) -> list[float]:
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return []
    return [float(value) for value in text.split(",")]


def plot_scheduling(records: list[tuple[int, int, float, float]], output: Path) -> Path:
    fig, ax = plt.subplots(figsize=(10, 4))
    colors = plt.get_cmap("tab20")
    for job_id, server_id, start, end in records:
        ax.barh(server_id, end - start, left=start, height=0.6, color=colors(job_id % 20), edgecolor="black")
        ax.text(start + (end - start) / 2, server_id, str(job_id), ha="center", va="center", fontsize=8)
    server_ids = sorted({record[1] for record in records})
    ax.set_yticks(server_ids)
    ax.set_yticklabels([f"server {server_id}" for server_id in server_ids])
    ax.set_xlabel("time")
    ax.set_title("Task scheduling")
    ax.grid(axis="x", linestyle=":", alpha=0.6)
    fig.tight_layout()
    fig.savefig(output, dpi=120)
    plt.close(fig)
    return output


def plot_power(powers: list[float], output: Path) -> Path:
    fig, ax = plt.subplots(figsize=(10, 3))
    ax.step(range(len(powers)), powers, where="post")
    ax.set_xlabel("time")
    ax.set_ylabel("power")
    ax.set_title("Power consumption")
    ax.grid(linestyle=":", alpha=0.6)
    fig.tight_layout()
    fig.savefig(output, dpi=120)
    plt.close(fig)
    return output


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="dc-sim-plot", description="plot a datacenter simulation run")
    parser.add_argument("results", help="path to results.txt")
    args = parser.parse_args(argv)

    results_path = Path(args.results)
    out_dir = results_path.parent
    plot_scheduling(read_results(results_path), out_dir / "task_scheduling.png")
    powers_path = out_dir / "powers.txt"
    if powers_path.exists():
        plot_power(read_powers(powers_path), out_dir / "power_consumption.png")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
