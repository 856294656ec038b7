import pytest

from schedsim.algorithms import schedule_fcfs, schedule_rr
from schedsim.metrics import (
    compute_system_metrics,
    count_context_switches,
    process_metrics,
    summarize_process_metrics,
)
from schedsim.models import IDLE, Process, RunResult, TimelineEntry


def test_system_metrics_with_idle_gap():
    res = schedule_fcfs([Process("P1", 2, 3), Process("P2", 0, 1)])
    sys = compute_system_metrics(res)
    assert sys.cpu_busy_time == 4
    assert sys.idle_time == 1
    assert sys.makespan == 5
    assert sys.throughput == pytest.approx(0.4)
    assert sys.cpu_utilization == pytest.approx(0.8)
    assert sys.context_switches == 2
    assert sys.starvation_count == 0


def test_system_metrics_empty_result():
    sys = compute_system_metrics(RunResult(algorithm="fcfs"))
    assert sys.makespan == 0
    assert sys.throughput == 0.0


def test_process_metrics_from_rr_timeline():
    res = schedule_rr([Process("P1", 0, 5), Process("P2", 1, 3)], quantum=2)
    by_pid = {m.pid: m for m in process_metrics(res)}
    assert by_pid["P1"].completion_time == 8
    assert by_pid["P1"].waiting_time == 3
    assert by_pid["P2"].start_time == 2
    assert by_pid["P2"].response_time == 1
    assert by_pid["P2"].turnaround_time == 6


def test_context_switches_count_idle_transitions():
    timeline = [
        TimelineEntry("A", 0, 2, "A"),
        TimelineEntry(IDLE, 2, 3),
        TimelineEntry("B", 3, 4, "B"),
        TimelineEntry("A", 4, 5, "A"),
    ]
    assert count_context_switches(timeline) == 3
    assert count_context_switches([]) == 0


def test_summarize_empty():
    assert summarize_process_metrics([]) == {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}
