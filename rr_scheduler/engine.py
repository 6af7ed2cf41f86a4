from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from types import MappingProxyType
from typing import Deque, Dict, List, Optional, Sequence

from .errors import (
    DuplicateProcessId,
    EmptyProcessSet,
    InvalidProcess,
    InvalidQuantum,
    SimulationInvariantViolation,
)
from .models import GanttChartItem, Process, SimulationResult, SimulationStep

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate(processes: Sequence[Process], quantum: int) -> None:
    """
    Reject inputs the simulation cannot run on. Raises the first violation found.
    """
    if not _is_int(quantum) or quantum <= 0:
        raise InvalidQuantum(quantum)
    if not processes:
        raise EmptyProcessSet()

    seen = set()
    for p in processes:
        if not _is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidProcess(p.pid, f"arrival time must be a non-negative integer, got {p.arrival_time!r}")
        if not _is_int(p.burst_time) or p.burst_time <= 0:
            raise InvalidProcess(p.pid, f"burst time must be a positive integer, got {p.burst_time!r}")
        if p.pid in seen:
            raise DuplicateProcessId(p.pid)
        seen.add(p.pid)


def simulate(processes: Sequence[Process], quantum: int) -> SimulationResult:
    """
    Run fixed-quantum Round Robin over ``processes`` and return the full trace.

    The caller's Process objects are never modified; the returned result
    carries finalized copies.
    """
    validate(processes, quantum)

    # Stable sort: equal arrivals keep input order
    working: List[Process] = sorted(
        (
            replace(
                p,
                remaining_time=p.burst_time,
                start_time=None,
                completion_time=None,
                waiting_time=None,
                turnaround_time=None,
                response_time=None,
            )
            for p in processes
        ),
        key=lambda p: p.arrival_time,
    )
    by_pid = {p.pid: p for p in working}

    remaining: Dict[str, int] = {p.pid: p.burst_time for p in working}
    completed: Dict[str, bool] = {p.pid: False for p in working}

    first_arrival = working[0].arrival_time
    clock = first_arrival
    ready: Deque[str] = deque(p.pid for p in working if p.arrival_time <= clock)

    gantt: List[GanttChartItem] = []
    steps: List[SimulationStep] = []
    completed_count = 0

    def snapshot(active_pid: Optional[str]) -> SimulationStep:
        # Copy on record so later mutation never leaks into earlier steps
        return SimulationStep(
            time=clock,
            active_pid=active_pid,
            queue=tuple(ready),
            remaining_times=MappingProxyType(dict(remaining)),
            is_completed=MappingProxyType(dict(completed)),
        )

    logger.debug("simulate: %d processes, quantum=%d, start=%d", len(working), quantum, clock)

    while completed_count < len(working):
        if not ready:
            next_arrival = min(
                (p.arrival_time for p in working if not completed[p.pid] and p.arrival_time > clock),
                default=None,
            )
            if next_arrival is None:
                raise SimulationInvariantViolation(
                    f"ready queue empty at t={clock} with {len(working) - completed_count} "
                    "unfinished processes and no later arrival"
                )

            gantt.append(GanttChartItem(pid=None, start_time=clock, end_time=next_arrival))
            steps.append(snapshot(None))
            logger.debug("idle [%d, %d)", clock, next_arrival)

            clock = next_arrival
            ready.extend(p.pid for p in working if not completed[p.pid] and p.arrival_time == clock)
            continue

        pid = ready.popleft()
        proc = by_pid[pid]
        run_time = min(remaining[pid], quantum)

        steps.append(snapshot(pid))
        if proc.start_time is None:
            proc.start_time = clock

        start = clock
        clock += run_time
        remaining[pid] -= run_time
        gantt.append(GanttChartItem(pid=pid, start_time=start, end_time=clock))
        logger.debug("run %s [%d, %d), %d left", pid, start, clock, remaining[pid])

        # Arrivals during the slice go ahead of the preempted process
        for p in working:
            if p.pid != pid and not completed[p.pid] and start < p.arrival_time <= clock:
                ready.append(p.pid)

        if remaining[pid] == 0:
            completed[pid] = True
            proc.completion_time = clock
            completed_count += 1
            logger.debug("%s completed at %d", pid, clock)
        else:
            ready.append(pid)

    total_waiting = 0
    total_turnaround = 0
    for p in working:
        p.turnaround_time = p.completion_time - p.arrival_time
        p.waiting_time = p.turnaround_time - p.burst_time
        p.response_time = p.start_time - p.arrival_time
        p.remaining_time = 0
        total_waiting += p.waiting_time
        total_turnaround += p.turnaround_time

    n = len(working)
    return SimulationResult(
        quantum=quantum,
        gantt_chart=gantt,
        processes=working,
        steps=tuple(steps),
        average_waiting_time=total_waiting / n,
        average_turnaround_time=total_turnaround / n,
        total_execution_time=clock - first_arrival,
    )
