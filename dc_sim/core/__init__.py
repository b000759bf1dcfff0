"""Simulation core exports."""

from .engine import Datacenter
from .interfaces import IDatacenter

__all__ = ["Datacenter", "IDatacenter"]
