"""
Invariants that must hold for every simulation, checked over a handful of
hand-picked workloads.
"""

from collections import deque

import pytest

from rr_scheduler.engine import simulate
from rr_scheduler.models import Process

WORKLOADS = [
    ([("A", 0, 5), ("B", 1, 3)], 2),
    ([("A", 0, 4)], 10),
    ([("A", 0, 2), ("B", 5, 2)], 2),
    ([("P1", 0, 5), ("P2", 1, 3), ("P3", 2, 8)], 2),
    ([("P1", 2, 7), ("P2", 2, 4), ("P3", 9, 1), ("P4", 30, 6), ("P5", 31, 2)], 3),
    ([("x", 0, 1), ("y", 0, 1), ("z", 0, 1), ("w", 1, 9)], 1),
    ([("late", 10, 3), ("early", 4, 2)], 4),
]


@pytest.fixture(params=WORKLOADS, ids=lambda w: f"q{w[1]}-{len(w[0])}procs")
def case(request):
    specs, quantum = request.param
    procs = [Process(pid, arrival_time=a, burst_time=b) for pid, a, b in specs]
    return procs, quantum, simulate(procs, quantum)


def test_conservation_of_cpu_time(case):
    procs, _, res = case
    busy = sum(i.duration for i in res.gantt_chart if not i.is_idle)
    assert busy == sum(p.burst_time for p in procs)


def test_timeline_is_contiguous(case):
    procs, _, res = case
    items = sorted(res.gantt_chart, key=lambda i: i.start_time)
    assert items[0].start_time == min(p.arrival_time for p in procs)
    for prev, nxt in zip(items, items[1:]):
        assert prev.end_time == nxt.start_time
    assert all(i.end_time > i.start_time for i in items)
    assert items[-1].end_time - items[0].start_time == res.total_execution_time


def test_metric_identities(case):
    _, _, res = case
    for p in res.processes:
        assert p.turnaround_time == p.completion_time - p.arrival_time
        assert p.waiting_time == p.turnaround_time - p.burst_time
        assert p.turnaround_time >= 0
        assert p.waiting_time >= 0


def test_averages(case):
    _, _, res = case
    n = len(res.processes)
    assert res.average_waiting_time == pytest.approx(sum(p.waiting_time for p in res.processes) / n)
    assert res.average_turnaround_time == pytest.approx(sum(p.turnaround_time for p in res.processes) / n)


def test_quantum_bound(case):
    _, quantum, res = case
    for item in res.gantt_chart:
        if not item.is_idle:
            assert item.duration <= quantum


def test_short_slices_are_final_slices(case):
    _, quantum, res = case
    last_slice = {}
    for item in res.gantt_chart:
        if not item.is_idle:
            last_slice[item.pid] = item
    for item in res.gantt_chart:
        if not item.is_idle and item.duration < quantum:
            assert last_slice[item.pid] is item
            assert item.end_time == res.process(item.pid).completion_time


def test_steps_are_strictly_increasing_and_match_timeline(case):
    _, _, res = case
    times = [s.time for s in res.steps]
    assert times == sorted(set(times))
    assert len(res.steps) == len(res.gantt_chart)
    for step, item in zip(res.steps, res.gantt_chart):
        assert step.time == item.start_time
        assert step.active_pid == item.pid


def test_step_trace_replays(case):
    """
    Applying the round robin transition to step k reproduces step k+1.
    """
    procs, quantum, res = case
    arrivals = {p.pid: p.arrival_time for p in procs}
    order = [p.pid for p in sorted(procs, key=lambda p: p.arrival_time)]

    for step, nxt in zip(res.steps, res.steps[1:]):
        remaining = dict(step.remaining_times)
        done = dict(step.is_completed)
        queue = deque(step.queue)

        if step.active_pid is None:
            clock = nxt.time
            queue.extend(pid for pid in order if not done[pid] and arrivals[pid] == clock)
        else:
            pid = step.active_pid
            run = min(remaining[pid], quantum)
            clock = step.time + run
            remaining[pid] -= run
            queue.extend(
                other for other in order
                if other != pid and not done[other] and step.time < arrivals[other] <= clock
            )
            if remaining[pid] == 0:
                done[pid] = True
            else:
                queue.append(pid)

        assert nxt.time == clock
        assert dict(nxt.remaining_times) == remaining
        assert dict(nxt.is_completed) == done
        if nxt.active_pid is None:
            assert not queue
        else:
            assert queue.popleft() == nxt.active_pid
            assert tuple(queue) == nxt.queue


def test_fifo_fairness(case):
    """
    The process dispatched at each step is the one that has been ready longest.
    """
    _, _, res = case
    for step, nxt in zip(res.steps, res.steps[1:]):
        if step.queue and nxt.active_pid is not None:
            assert nxt.active_pid == step.queue[0]


def test_step_snapshots_do_not_alias():
    res = simulate([Process("A", 0, 5), Process("B", 1, 3)], quantum=2)
    first = res.steps[0]
    assert first.remaining_times == {"A": 5, "B": 3}
    assert first.is_completed == {"A": False, "B": False}
    assert res.steps[-1].remaining_times == {"A": 1, "B": 0}
    assert res.steps[-1].is_completed == {"A": False, "B": True}
    with pytest.raises(TypeError):
        first.remaining_times["A"] = 0
