"""CLI entrypoint for a single datacenter simulation."""

from __future__ import annotations

import argparse
from pathlib import Path
import subprocess
import sys

from dc_sim.core import Datacenter
from dc_sim.io import (
    ConfigError,
    InputLoader,
    format_summary,
    write_json,
    write_power,
    write_scheduling,
    write_summary,
)
from dc_sim.schedulers import DependencyError, available_policies

from .reporter import ConsoleReporter


USAGE = (
    "Usage: \n"
    "$ dc-sim algo inputs \n"
    "Example: \n"
    "dc-sim fifo inputs/test1.txt \n"
    'Where algo can be: "fifo", "first_fit", "edf", "round_robin", "wavefront", "cpm" \n'
    "and the inputs is a .txt file (see inputs folders) \n"
    "Options: --silent, --output-dir DIR, --metrics-out PATH, --no-plot, --help"
)


def print_usage() -> int:
    print(USAGE)
    return 0


def run_plotter(results_path: Path) -> bool:
    """Best-effort plot of the results; failures are reported, never raised."""
    try:
        subprocess.run(
            [sys.executable, "-m", "dc_sim.cli.plot", str(results_path)],
            check=True,
            capture_output=True,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        print(f"[WARN] an error occurred while executing the plotter: {exc}")
        return False
    return True


def cmd_run(args: argparse.Namespace) -> int:
    loader = InputLoader()
    try:
        simulation_input = loader.load(args.config)
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        print(USAGE)
        return 1

    datacenter = Datacenter(
        simulation_input.fresh_servers(),
        simulation_input.config(silent=args.silent),
        reporter=ConsoleReporter(),
    )
    try:
        datacenter.build(args.algorithm, simulation_input.scheduled_jobs(), simulation_input.dependencies)
    except DependencyError as exc:
        print(f"[ERROR] {args.config}: {exc}")
        return 1
    datacenter.run()

    output_dir = Path(args.output_dir)
    results_path = write_scheduling(output_dir / "results.txt", datacenter.servers)
    write_power(output_dir / "powers.txt", datacenter.power_used)
    write_summary(output_dir / "sumup.txt", datacenter)
    if args.metrics_out:
        write_json(args.metrics_out, datacenter.metric_report())
    if not args.silent:
        print(format_summary(datacenter))

    if not args.no_plot:
        run_plotter(results_path)

    print(
        f"[OK] simulation completed, makespan={datacenter.makespan}, "
        f"deadline_missed={datacenter.deadline_missed}, results={results_path}"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dc-sim", description="Datacenter scheduling simulation", add_help=False)
    parser.add_argument("algorithm", nargs="?", default=None, help="dispatch algorithm")
    parser.add_argument("config", nargs="?", default=None, help="path to the input configuration file")
    parser.add_argument("--silent", action="store_true", help="suppress per-tick console narration")
    parser.add_argument("-h", "--help", action="store_true", help="show usage and exit")
    parser.add_argument("--output-dir", default="outputs", help="directory for results, powers and sumup files")
    parser.add_argument("--metrics-out", default=None, help="path to write metric JSON")
    parser.add_argument("--no-plot", action="store_true", help="skip the plotting post-process")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.help or args.algorithm is None or args.config is None:
        return print_usage()
    if args.algorithm.strip().lower() not in available_policies():
        return print_usage()
    if not args.silent:
        print(
            "Use --silent to run it silently \n"
            "Use --help to display the help \n"
            "The output is silenced when the system is empty"
        )
    return cmd_run(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
