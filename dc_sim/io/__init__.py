"""I/O exports."""

from .experiment_runner import BatchRunSummary, ExperimentRunner
from .loader import ConfigError, InputLoader, SimulationInput
from .schema import BATCH_SCHEMA
from .writer import (
    format_power,
    format_scheduling,
    format_summary,
    scheduling_records,
    write_json,
    write_power,
    write_scheduling,
    write_summary,
)

__all__ = [
    "BATCH_SCHEMA",
    "BatchRunSummary",
    "ConfigError",
    "ExperimentRunner",
    "InputLoader",
    "SimulationInput",
    "format_power",
    "format_scheduling",
    "format_summary",
    "scheduling_records",
    "write_json",
    "write_power",
    "write_scheduling",
    "write_summary",
]
