from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from .engine import (
    LOWEST_PRIORITY,
    SHORTEST_BURST,
    SHORTEST_REMAINING,
    TimelineRecorder,
    WorkItem,
    average_times,
    is_int,
    make_work_items,
    run_non_preemptive,
    run_preemptive,
    validate_processes,
)
from .errors import EmptyInputError, InvalidQuantumError, UnknownAlgorithmError
from .metrics import count_context_switches
from .models import Process, RunResult, TimelineEntry

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2


def _finish(
    algorithm: str,
    processes: Iterable[Process],
    items: List[WorkItem],
    timeline: Tuple[TimelineEntry, ...],
    avg_response_time: Optional[float] = None,
    quantum: Optional[int] = None,
) -> RunResult:
    avg_wait, avg_turnaround = average_times(items)
    result = RunResult(
        algorithm=algorithm,
        processes=tuple(processes),
        timeline=timeline,
        avg_waiting_time=avg_wait,
        avg_turnaround_time=avg_turnaround,
        avg_response_time=avg_response_time,
        context_switches=count_context_switches(timeline),
        quantum=quantum,
    )
    logger.info(
        "%s: %d processes, makespan %d, avg wait %.2f, avg turnaround %.2f",
        algorithm,
        len(items),
        result.makespan,
        avg_wait,
        avg_turnaround,
    )
    return result


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> RunResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run in arrival order; equal arrivals keep their input order.
    """
    ordered = sorted(validate_processes(processes, "fcfs"), key=lambda p: p.arrival_time)
    items = make_work_items(ordered)

    recorder = TimelineRecorder()
    time = 0
    for w in items:
        if time < w.arrival_time:
            recorder.idle(time, w.arrival_time)
            time = w.arrival_time

        start = time
        time = w.run_for(w.remaining, time)
        recorder.run(w.pid, start, time)

    return _finish("fcfs", ordered, items, recorder.timeline())


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> RunResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time.
    """
    procs = validate_processes(processes, "sjf")
    items = make_work_items(procs)
    timeline = run_non_preemptive(items, SHORTEST_BURST)
    return _finish("sjf", procs, items, timeline)


def schedule_srtf(processes: List[Process], quantum: Optional[int] = None) -> RunResult:
    """
    Shortest Remaining Time First (preemptive SJF), re-evaluated every time unit.
    """
    procs = validate_processes(processes, "srtf")
    items = make_work_items(procs)
    timeline = run_preemptive(items, SHORTEST_REMAINING)
    return _finish("srtf", procs, items, timeline)


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> RunResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice is running are queued ahead of the
    process that was just preempted.
    """
    procs = validate_processes(processes, "rr")
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    if not is_int(quantum) or quantum <= 0:
        raise InvalidQuantumError(quantum)

    items = make_work_items(procs)
    not_arrived: Deque[WorkItem] = deque(sorted(items, key=lambda w: w.arrival_time))
    ready: Deque[WorkItem] = deque()

    def enqueue_new_arrivals(current_time: int) -> None:
        while not_arrived and not_arrived[0].arrival_time <= current_time:
            ready.append(not_arrived.popleft())

    recorder = TimelineRecorder()
    time = 0
    enqueue_new_arrivals(time)

    while ready or not_arrived:
        if not ready:
            nxt = not_arrived[0].arrival_time
            recorder.idle(time, nxt)
            time = nxt
            enqueue_new_arrivals(time)
            continue

        w = ready.popleft()
        if w.first_start is None:
            logger.debug("rr: t=%d first dispatch of %s (response %d)", time, w.pid, time - w.arrival_time)

        start = time
        time = w.run_for(min(quantum, w.remaining), time)
        recorder.run(w.pid, start, time)

        enqueue_new_arrivals(time)
        if not w.finished:
            ready.append(w)

    avg_response = sum(w.first_start - w.arrival_time for w in items) / len(items)
    return _finish("rr", procs, items, recorder.timeline(), avg_response_time=avg_response, quantum=quantum)


def schedule_priority_np(processes: List[Process], quantum: Optional[int] = None) -> RunResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Every process must
    carry a priority.
    """
    procs = validate_processes(processes, "priority_np", require_priority=True)
    items = make_work_items(procs)
    timeline = run_non_preemptive(items, LOWEST_PRIORITY)
    return _finish("priority_np", procs, items, timeline)


def schedule_priority_p(processes: List[Process], quantum: Optional[int] = None) -> RunResult:
    """
    Preemptive Priority scheduling; a newly arrived process with a lower
    priority value takes the CPU at the next time unit.
    """
    procs = validate_processes(processes, "priority_p", require_priority=True)
    items = make_work_items(procs)
    timeline = run_preemptive(items, LOWEST_PRIORITY)
    return _finish("priority_p", procs, items, timeline)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "srtf": schedule_srtf,
    "rr": schedule_rr,
    "priority_np": schedule_priority_np,
    "priority_p": schedule_priority_p,
}

ALGORITHM_LABELS: Dict[str, str] = {
    "fcfs": "First Come First Serve (FCFS)",
    "sjf": "Shortest Job First (SJF)",
    "srtf": "Shortest Remaining Time First (SRTF)",
    "rr": "Round Robin (RR)",
    "priority_np": "Priority (Non-Preemptive)",
    "priority_p": "Priority (Preemptive)",
}

ALIASES = {
    "priority_non_preemptive": "priority_np",
    "priority_preemptive": "priority_p",
}

PRIORITY_ALGORITHMS = frozenset({"priority_np", "priority_p"})


def resolve_algorithm(name: str) -> str:
    """
    Normalize an algorithm name to its registry id.
    """
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    if key not in ALGORITHMS:
        raise UnknownAlgorithmError(name, ALGORITHMS)
    return key


def run_algorithm(name: str, processes: Iterable[Process], quantum: Optional[int] = None) -> RunResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    key = resolve_algorithm(name)
    procs = list(processes)
    if not procs:
        raise EmptyInputError()

    logger.debug("dispatching %d processes to %s", len(procs), key)
    func = ALGORITHMS[key]
    return func(procs, quantum=quantum)
