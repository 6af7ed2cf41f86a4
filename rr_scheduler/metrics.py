from __future__ import annotations

from typing import List

from .models import Process, SimulationResult, SystemMetrics


def compute_system_metrics(result: SimulationResult) -> SystemMetrics:
    """
    Compute CPU utilization, throughput and context switches from a finished
    simulation's timeline.
    """
    makespan = result.total_execution_time
    cpu_busy_time = sum(item.duration for item in result.gantt_chart if not item.is_idle)
    idle_time = sum(item.duration for item in result.gantt_chart if item.is_idle)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    # A switch is a handoff between two different processes; idle gaps in
    # between still count as one handoff.
    context_switches = 0
    last_pid = None
    for item in result.gantt_chart:
        if item.is_idle:
            continue
        if last_pid is not None and item.pid != last_pid:
            context_switches += 1
        last_pid = item.pid

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_time=idle_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        context_switches=context_switches,
    )


def summarize_process_metrics(processes: List[Process]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
