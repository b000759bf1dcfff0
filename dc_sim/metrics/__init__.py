"""Metric exports."""

from .base import IMetric
from .core import DatacenterMetrics

__all__ = ["DatacenterMetrics", "IMetric"]
