"""CLI entrypoint for batch runs over inputs and algorithms."""

from __future__ import annotations

import argparse

from dc_sim.io import ConfigError, ExperimentRunner


def cmd_batch_run(args: argparse.Namespace) -> int:
    runner = ExperimentRunner()
    try:
        summary = runner.run_batch(
            args.batch_config,
            output_dir=args.output_dir,
            summary_csv=args.summary_csv,
            summary_json=args.summary_json,
        )
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        return 1

    print(
        "[OK] batch simulation completed, "
        f"runs={summary.total_runs}, success={summary.succeeded_runs}, failed={summary.failed_runs}, "
        f"csv={summary.summary_csv}, json={summary.summary_json}"
    )
    if args.strict_fail_on_error and summary.failed_runs > 0:
        print("[ERROR] batch simulation contains failed runs in strict mode")
        return 2
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dc-sim-batch", description="Datacenter batch simulation")
    parser.add_argument("-b", "--batch-config", required=True, help="path to batch config YAML/JSON")
    parser.add_argument("--output-dir", default=None, help="batch output directory")
    parser.add_argument("--summary-csv", default=None, help="summary CSV output path")
    parser.add_argument("--summary-json", default=None, help="summary JSON output path")
    parser.add_argument(
        "--strict-fail-on-error",
        action="store_true",
        help="return non-zero when any batch run fails",
    )
    parser.set_defaults(func=cmd_batch_run)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
