from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .engine import simulate
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .metrics import compute_system_metrics, summarize_process_metrics
from .models import SimulationResult, SimulationStep
from .playback import StepCursor
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rr-scheduler",
        description="Round Robin CPU scheduling simulator.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every dispatch, idle gap and completion.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Simulate a workload file and print the results.")
    _add_workload_args(run_parser)
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Play the step trace in the terminal before the summary.",
    )
    run_parser.add_argument(
        "--speed",
        type=float,
        default=5.0,
        help="Playback speed in steps per second when --step is used (default: 5).",
    )

    steps_parser = subparsers.add_parser("steps", help="Print the recorded step trace as a table.")
    _add_workload_args(steps_parser)

    return parser


def _add_workload_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum (default: 2).",
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _format_queue(step: SimulationStep) -> str:
    return ", ".join(step.queue) if step.queue else "-"


def _print_result(result: SimulationResult, console: Console) -> None:
    console.print(f"[bold]Quantum:[/bold] {result.quantum}")
    console.print()

    panel, _ = build_rich_gantt(result.gantt_chart)
    console.print(panel)

    console.print()

    headers = ["PID", "Name", "Arrive", "Burst", "Start", "Complete", "Wait", "Turnaround", "Response"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Name"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            p.pid,
            p.name,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    system = compute_system_metrics(result)

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{result.average_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{result.average_turnaround_time:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    sys_table.add_row("Total execution time", str(result.total_execution_time))
    sys_table.add_row("Idle time", str(system.idle_time))
    sys_table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{system.cpu_utilization*100:.1f}%")
    sys_table.add_row("Context switches", str(system.context_switches))

    console.print(sys_table)


def _print_steps(result: SimulationResult, console: Console) -> None:
    table = Table(title="Step trace", box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("Running", justify="center")
    table.add_column("Ready queue")
    table.add_column("Remaining")
    table.add_column("Done")

    for idx, step in enumerate(result.steps):
        remaining = " ".join(f"{pid}={rt}" for pid, rt in step.remaining_times.items())
        done = ", ".join(pid for pid, flag in step.is_completed.items() if flag) or "-"
        table.add_row(
            str(idx),
            str(step.time),
            step.active_pid or "[dim]idle[/dim]",
            _format_queue(step),
            remaining,
            done,
        )

    console.print(table)


def _play_steps(result: SimulationResult, speed: float, console: Console) -> None:
    """
    Walk the recorded trace with a StepCursor, printing the queue and the
    Gantt chart with the running interval highlighted at each step.
    """
    cursor = StepCursor(result)
    delay = cursor.interval(speed)
    console.print(f"[bold]Playing {len(cursor)} steps[/bold] at {speed:g} steps/s")
    console.print("[dim]Press Ctrl+C to skip playback.[/dim]")

    while True:
        step = cursor.current
        running = step.active_pid or "(idle)"
        console.print(f"t={step.time:3d}: {running:<8} queue: {_format_queue(step)}")
        panel, _ = build_rich_gantt(result.gantt_chart, current_time=cursor.time)
        console.print(panel)
        if cursor.at_end:
            break
        cursor.step_forward()
        time.sleep(delay)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "run" and args.speed <= 0:
        parser.error("--speed must be positive")

    configure_logging(args.verbose)
    console = Console()

    try:
        processes = load_workload(Path(args.workload))
        result = simulate(processes, args.quantum)
    except SchedulerError as exc:
        console.print(f"[red]Simulation failed: {escape(str(exc))}[/red]")
        return 1
    except (OSError, ValueError) as exc:
        console.print(f"[red]Could not load workload: {escape(str(exc))}[/red]")
        return 1

    logger.info("simulated %d processes in %d steps", len(result.processes), len(result.steps))

    if args.command == "run":
        if args.step:
            try:
                _play_steps(result, args.speed, console)
            except KeyboardInterrupt:
                console.print("[yellow]Playback skipped.[/yellow]")
            console.print()
        _print_result(result, console)
        return 0

    if args.command == "steps":
        _print_steps(result, console)
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
