from __future__ import annotations

from typing import Dict, List, Sequence

from .models import ProcessMetrics, RunResult, SystemMetrics, TimelineEntry


def count_context_switches(timeline: Sequence[TimelineEntry]) -> int:
    """
    Number of label changes between adjacent timeline entries.

    Transitions to and from idle count as switches. Every driver reports
    this figure, so results are comparable across algorithms.
    """
    return sum(1 for prev, cur in zip(timeline, timeline[1:]) if prev.label != cur.label)


def process_metrics(result: RunResult) -> List[ProcessMetrics]:
    """
    Recompute per-process metrics from the timeline alone.

    Completion is the end of a process's last entry, turnaround is
    completion minus arrival, waiting is turnaround minus burst. Start and
    response come from the first entry.
    """
    first_start: Dict[str, int] = {}
    last_end: Dict[str, int] = {}
    for entry in result.timeline:
        if entry.is_idle:
            continue
        first_start.setdefault(entry.pid, entry.start_time)
        last_end[entry.pid] = entry.end_time

    metrics: List[ProcessMetrics] = []
    for p in result.processes:
        completion_time = last_end[p.pid]
        turnaround_time = completion_time - p.arrival_time
        start_time = first_start[p.pid]
        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                start_time=start_time,
                completion_time=completion_time,
                waiting_time=turnaround_time - p.burst_time,
                turnaround_time=turnaround_time,
                response_time=start_time - p.arrival_time,
                priority=p.priority,
            )
        )
    return metrics


def compute_system_metrics(result: RunResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization for a finished run.
    """
    if not result.processes:
        return SystemMetrics(cpu_busy_time=0, idle_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = result.makespan
    cpu_busy_time = sum(e.duration for e in result.timeline if not e.is_idle)
    idle_time = sum(e.duration for e in result.timeline if e.is_idle)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    # Processes that waited more than twice the average are reported as starved.
    per_process = process_metrics(result)
    avg_wait = sum(m.waiting_time for m in per_process) / len(per_process)
    starvation_count = sum(1 for m in per_process if m.waiting_time > 2 * avg_wait)

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_time=idle_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        context_switches=count_context_switches(result.timeline),
        starvation_count=starvation_count,
    )


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
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
