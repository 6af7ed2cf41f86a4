from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple


@dataclass
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    name: Optional[str] = None

    # Filled in on the engine's working copy
    remaining_time: Optional[int] = None
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    waiting_time: Optional[int] = None
    turnaround_time: Optional[int] = None
    response_time: Optional[int] = None

    def __post_init__(self) -> None:
        if self.name is None:
            self.name = self.pid
        if self.remaining_time is None:
            self.remaining_time = self.burst_time

    @property
    def is_completed(self) -> bool:
        return self.completion_time is not None


@dataclass(frozen=True)
class GanttChartItem:
    """
    One contiguous interval [start_time, end_time) of the timeline.

    ``pid`` is None for an idle interval.
    """

    pid: Optional[str]
    start_time: int
    end_time: int

    @property
    def is_idle(self) -> bool:
        return self.pid is None

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    def covers(self, time: int) -> bool:
        return self.start_time <= time < self.end_time


@dataclass(frozen=True)
class SimulationStep:
    """
    State at the start of a quantum or idle slice.

    ``queue`` is the ready queue after the active process was removed and
    before arrivals during the slice were appended.
    """

    time: int
    active_pid: Optional[str]
    queue: Tuple[str, ...]
    remaining_times: Mapping[str, int]
    is_completed: Mapping[str, bool]

    @property
    def is_idle(self) -> bool:
        return self.active_pid is None


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    context_switches: int = 0


@dataclass
class SimulationResult:
    quantum: int
    gantt_chart: List[GanttChartItem] = field(default_factory=list)
    processes: List[Process] = field(default_factory=list)
    steps: Tuple[SimulationStep, ...] = ()
    average_waiting_time: float = 0.0
    average_turnaround_time: float = 0.0
    total_execution_time: int = 0

    def process(self, pid: str) -> Process:
        for p in self.processes:
            if p.pid == pid:
                return p
        raise KeyError(pid)
