"""
Round Robin scheduler package.

Simulates fixed-quantum round robin CPU scheduling and produces a complete
execution trace: Gantt timeline, per-step queue snapshots and per-process
metrics.
"""

from .engine import simulate
from .errors import (
    DuplicateProcessId,
    EmptyProcessSet,
    InvalidProcess,
    InvalidQuantum,
    SchedulerError,
    SimulationInvariantViolation,
)
from .models import GanttChartItem, Process, SimulationResult, SimulationStep

__all__ = [
    "simulate",
    "Process",
    "GanttChartItem",
    "SimulationStep",
    "SimulationResult",
    "SchedulerError",
    "InvalidQuantum",
    "EmptyProcessSet",
    "InvalidProcess",
    "DuplicateProcessId",
    "SimulationInvariantViolation",
]
