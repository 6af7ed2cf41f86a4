from __future__ import annotations

from typing import Optional


class SchedulerError(Exception):
    """Base class for every failure raised by the simulation engine."""


class InvalidQuantum(SchedulerError, ValueError):
    def __init__(self, quantum) -> None:
        super().__init__(f"Round Robin requires a positive integer quantum, got {quantum!r}")
        self.quantum = quantum


class EmptyProcessSet(SchedulerError, ValueError):
    def __init__(self) -> None:
        super().__init__("At least one process is required to simulate")


class InvalidProcess(SchedulerError, ValueError):
    def __init__(self, pid: str, reason: Optional[str] = None) -> None:
        message = f"Invalid process {pid!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.pid = pid
        self.reason = reason


class DuplicateProcessId(SchedulerError, ValueError):
    def __init__(self, pid: str) -> None:
        super().__init__(f"Duplicate process id {pid!r}")
        self.pid = pid


class SimulationInvariantViolation(SchedulerError, RuntimeError):
    """
    Raised when the ready queue is empty, processes remain unfinished, and
    none of them arrives later than the current clock.
    """
