from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHM_LABELS, ALGORITHMS, PRIORITY_ALGORITHMS, resolve_algorithm, run_algorithm
from .errors import SchedulingError, WorkloadFormatError
from .gantt import build_rich_gantt
from .metrics import compute_system_metrics, process_metrics, summarize_process_metrics
from .models import Process, ProcessMetrics, RunResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

# (header, ProcessMetrics attribute) pairs for the per-process table.
PROCESS_COLUMNS = [
    ("PID", "pid"),
    ("Arrive", "arrival_time"),
    ("Burst", "burst_time"),
    ("Start", "start_time"),
    ("Complete", "completion_time"),
    ("Wait", "waiting_time"),
    ("Turnaround", "turnaround_time"),
    ("Response", "response_time"),
    ("Priority", "priority"),
]

COMPARE_COLUMNS = ["Algorithm", "Quantum", "Avg waiting", "Avg turnaround", "Avg response", "Switches"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, RR, Priority NP/P).",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Logging verbosity.")

    workload_opts = argparse.ArgumentParser(add_help=False)
    workload_opts.add_argument("--workload", "-w", required=True, help="JSON, CSV or TXT workload file.")
    workload_opts.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Round-robin time quantum (default: 2); other algorithms ignore it.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", parents=[workload_opts], help="Simulate one algorithm.")
    run_parser.add_argument("--algorithm", "-a", required=True, help=f"One of: {', '.join(ALGORITHMS)}.")
    run_parser.add_argument("--step", action="store_true", help="Replay the schedule unit by unit.")
    run_parser.add_argument("--step-delay", type=float, default=0.3, help="Seconds per replayed unit.")

    compare_parser = subparsers.add_parser(
        "compare", parents=[workload_opts], help="Tabulate average metrics for several algorithms."
    )
    compare_parser.add_argument("--algorithms", "-a", nargs="+", default=list(ALGORITHMS))

    subparsers.add_parser("list", help="List the available algorithms.")

    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _table(title: str, headers: Sequence[str], rows: Iterable[Sequence[str]], left: Sequence[str] = ()) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    for header in headers:
        table.add_column(header, justify="left" if header in left else "right")
    for row in rows:
        table.add_row(*row)
    return table


def _process_row(m: ProcessMetrics) -> List[str]:
    return ["" if getattr(m, attr) is None else str(getattr(m, attr)) for _, attr in PROCESS_COLUMNS]


def _system_rows(result: RunResult) -> List[Tuple[str, str]]:
    system = compute_system_metrics(result)
    rows = [
        ("Avg waiting", f"{result.avg_waiting_time:.2f}"),
        ("Avg turnaround", f"{result.avg_turnaround_time:.2f}"),
    ]
    if result.avg_response_time is not None:
        rows.append(("Avg response", f"{result.avg_response_time:.2f}"))
    rows += [
        ("Makespan", str(system.makespan)),
        ("Idle time", str(system.idle_time)),
        ("Context switches", str(system.context_switches)),
        ("Throughput (proc/time)", f"{system.throughput:.3f}"),
        ("CPU utilization", f"{system.cpu_utilization:.1%}"),
        ("Starvation count", str(system.starvation_count)),
    ]
    return rows


def _print_result(result: RunResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {ALGORITHM_LABELS[result.algorithm]}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print()
    console.print(panel)
    if time_marks:
        console.print(time_marks)
    console.print()

    headers = [header for header, _ in PROCESS_COLUMNS]
    rows = [_process_row(m) for m in process_metrics(result)]
    console.print(_table("Per-process metrics", headers, rows, left=("PID",)))
    console.print()
    console.print(_table("System metrics", ["Metric", "Value"], _system_rows(result), left=("Metric",)))


def _animate_result(result: RunResult, delay: float, console: Console) -> None:
    """
    Replay the computed schedule one time unit per line.
    """
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {result.makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for entry in result.timeline:
        for t in range(entry.start_time, entry.end_time):
            if entry.is_idle:
                console.print(f"t={t:2d}: [dim]idle[/dim]")
            else:
                bar = "█" * (t - entry.start_time + 1)
                console.print(f"t={t:2d}: {entry.label} [green]{bar}[/green]")
            time.sleep(delay)


def _compare_rows(processes: List[Process], algorithms: List[str], quantum) -> List[List[str]]:
    has_priorities = all(p.priority is not None for p in processes)
    rows = []
    for name in algorithms:
        alg = resolve_algorithm(name)
        if alg in PRIORITY_ALGORITHMS and not has_priorities:
            logger.warning("skipping %s: workload has processes without a priority", alg)
            continue

        result = run_algorithm(alg, processes, quantum=quantum)
        summary = summarize_process_metrics(process_metrics(result))
        rows.append(
            [
                ALGORITHM_LABELS[alg],
                "" if result.quantum is None else str(result.quantum),
                f"{result.avg_waiting_time:.2f}",
                f"{result.avg_turnaround_time:.2f}",
                f"{summary['avg_response']:.2f}",
                str(result.context_switches),
            ]
        )
    return rows


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    console = Console()

    try:
        if args.command == "list":
            console.print(_table("Algorithms", ["Id", "Name"], ALGORITHM_LABELS.items(), left=("Id", "Name")))
            return 0

        processes = load_workload(Path(args.workload))

        if args.command == "run":
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console)
            return 0

        rows = _compare_rows(processes, args.algorithms, args.quantum)
        console.print(_table("Algorithm comparison", COMPARE_COLUMNS, rows, left=("Algorithm",)))
        return 0
    except (SchedulingError, WorkloadFormatError, OSError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
