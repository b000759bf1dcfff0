"""Batch runner over input files and dispatch algorithms."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from itertools import product
import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from dc_sim.core import Datacenter

from .loader import ConfigError, InputLoader
from .schema import BATCH_SCHEMA
from .writer import write_json, write_power, write_scheduling, write_summary


@dataclass(slots=True)
class BatchRunSummary:
    summary_csv: Path
    summary_json: Path
    total_runs: int
    succeeded_runs: int
    failed_runs: int


class ExperimentRunner:
    """Run every (input, algorithm) pair silently and persist summaries.

    Each run gets its own ``run_NNN`` directory holding the same files as a
    single CLI run plus ``metrics.json``. A failing run is recorded with
    status ``error`` and the batch moves on.
    """

    SUPPORTED_VERSION = "0.1"

    def __init__(self, loader: InputLoader | None = None) -> None:
        self._loader = loader or InputLoader()

    def run_batch(
        self,
        batch_config_path: str,
        *,
        output_dir: str | None = None,
        summary_csv: str | None = None,
        summary_json: str | None = None,
    ) -> BatchRunSummary:
        batch_path = Path(batch_config_path)
        base_dir = batch_path.parent
        config = self._load_config(batch_path)

        inputs = [_resolve(base_dir, raw) for raw in config["inputs"]]
        algorithms: list[str] = list(config["algorithms"])
        out_dir = _resolve_or(base_dir, output_dir or config.get("output_dir"), base_dir / "outputs" / "batch")
        out_dir.mkdir(parents=True, exist_ok=True)

        rows = [
            self._run_one(input_path, algorithm, out_dir / f"run_{idx:03d}", config.get("until"))
            for idx, (input_path, algorithm) in enumerate(product(inputs, algorithms))
        ]
        failed = sum(1 for row in rows if row["status"] == "error")

        csv_path = _resolve_or(base_dir, summary_csv, out_dir / "summary.csv")
        json_path = _resolve_or(base_dir, summary_json, out_dir / "summary.json")
        _write_rows_csv(csv_path, rows)
        write_json(
            json_path,
            {
                "version": self.SUPPORTED_VERSION,
                "inputs": [str(path) for path in inputs],
                "algorithms": algorithms,
                "total_runs": len(rows),
                "succeeded_runs": len(rows) - failed,
                "failed_runs": failed,
                "runs": rows,
            },
        )
        return BatchRunSummary(
            summary_csv=csv_path,
            summary_json=json_path,
            total_runs=len(rows),
            succeeded_runs=len(rows) - failed,
            failed_runs=failed,
        )

    def _run_one(self, input_path: Path, algorithm: str, run_dir: Path, until: int | None) -> dict[str, Any]:
        row: dict[str, Any] = {"run_id": run_dir.name, "input": str(input_path), "algorithm": algorithm}
        run_dir.mkdir(parents=True, exist_ok=True)
        try:
            simulation_input = self._loader.load(input_path)
            datacenter = Datacenter(simulation_input.fresh_servers(), simulation_input.config(silent=True))
            datacenter.build(algorithm, simulation_input.scheduled_jobs(), simulation_input.dependencies)
            datacenter.run(until=until)
        except Exception as exc:  # noqa: BLE001 - one broken input must not stop the batch
            row.update(status="error", error=str(exc))
            return row

        metrics = datacenter.metric_report()
        write_scheduling(run_dir / "results.txt", datacenter.servers)
        write_power(run_dir / "powers.txt", datacenter.power_used)
        write_summary(run_dir / "sumup.txt", datacenter)
        row.update(
            status="ok" if datacenter.finished else "truncated",
            metrics_path=str(write_json(run_dir / "metrics.json", metrics)),
            makespan=datacenter.makespan,
            deadline_missed=datacenter.deadline_missed,
            energy_used=datacenter.energy_used,
            preempt_count=metrics["preempt_count"],
            jobs_completed=metrics["jobs_completed"],
        )
        return row

    def _load_config(self, path: Path) -> dict[str, Any]:
        if not path.is_file():
            raise ConfigError(f"batch config file not found: {path}")
        text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(text) if path.suffix.lower() in {".yaml", ".yml"} else json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigError(f"invalid batch config syntax: {exc}") from exc
        if not isinstance(payload, dict):
            raise ConfigError(f"batch config root must be object: {path}")
        self._validate_schema(payload)
        version = str(payload.get("version", self.SUPPORTED_VERSION))
        if version != self.SUPPORTED_VERSION:
            raise ConfigError(f"unsupported batch version '{version}'")
        return payload

    @staticmethod
    def _validate_schema(payload: dict[str, Any]) -> None:
        validator = jsonschema.Draft202012Validator(BATCH_SCHEMA)
        errors = sorted(validator.iter_errors(payload), key=lambda err: [str(part) for part in err.path])
        if not errors:
            return
        details = [f"{'.'.join(str(part) for part in err.path) or '<root>'}: {err.message}" for err in errors[:8]]
        raise ConfigError("schema validation failed: " + " | ".join(details))


def _resolve(base_dir: Path, raw_path: str) -> Path:
    path = Path(raw_path)
    return path if path.is_absolute() else (base_dir / path).resolve()


def _resolve_or(base_dir: Path, raw_path: str | None, default: Path) -> Path:
    if raw_path:
        return _resolve(base_dir, raw_path)
    return default.resolve()


def _write_rows_csv(path: Path, rows: list[dict[str, Any]]) -> None:
    # union of keys in first-seen order; error rows lack the metric columns
    fieldnames = list(dict.fromkeys(key for row in rows for key in row))
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
