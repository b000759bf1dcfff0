"""Analysis utilities for job-set feasibility."""

from .feasibility import (
    FeasibilityReport,
    deadlines_exceed_periods,
    density,
    edf_feasibility,
    static_slowdown,
    total_performance,
    utilization,
)

__all__ = [
    "FeasibilityReport",
    "deadlines_exceed_periods",
    "density",
    "edf_feasibility",
    "static_slowdown",
    "total_performance",
    "utilization",
]
