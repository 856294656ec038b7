import pytest

from schedsim.algorithms import (
    DEFAULT_QUANTUM,
    run_algorithm,
    schedule_fcfs,
    schedule_priority_np,
    schedule_priority_p,
    schedule_rr,
    schedule_sjf,
    schedule_srtf,
)
from schedsim.models import IDLE, Process


def _procs():
    return [
        Process("P1", arrival_time=0, burst_time=5, priority=2),
        Process("P2", arrival_time=1, burst_time=3, priority=1),
        Process("P3", arrival_time=2, burst_time=8, priority=3),
    ]


def _spans(result):
    return [(e.label, e.start_time, e.end_time) for e in result.timeline]


def test_fcfs_two_processes():
    res = schedule_fcfs([Process("P1", 0, 5), Process("P2", 1, 3)])
    assert _spans(res) == [("P1", 0, 5), ("P2", 5, 8)]
    assert res.avg_waiting_time == 2.0
    assert res.avg_turnaround_time == 6.0
    assert res.context_switches == 1
    assert res.avg_response_time is None


def test_fcfs_order():
    res = schedule_fcfs(_procs())
    assert [e.pid for e in res.timeline] == ["P1", "P2", "P3"]
    # waits: 0, 5-1, 8-2
    assert res.avg_waiting_time == pytest.approx((0 + 4 + 6) / 3)


def test_fcfs_sorts_by_arrival_and_inserts_idle():
    res = schedule_fcfs([Process("P1", 2, 3), Process("P2", 0, 1)])
    assert [p.pid for p in res.processes] == ["P2", "P1"]
    assert _spans(res) == [("P2", 0, 1), (IDLE, 1, 2), ("P1", 2, 5)]
    assert res.timeline[1].pid is None
    assert res.context_switches == 2


def test_fcfs_equal_arrivals_keep_input_order():
    res = schedule_fcfs([Process("B", 0, 2), Process("A", 0, 1)])
    assert [e.pid for e in res.timeline] == ["B", "A"]


def test_timeline_starts_at_zero_with_late_first_arrival():
    res = schedule_fcfs([Process("A", 3, 2)])
    assert _spans(res) == [(IDLE, 0, 3), ("A", 3, 5)]
    assert res.avg_waiting_time == 0.0


def test_sjf_order():
    res = schedule_sjf(_procs())
    assert [e.pid for e in res.timeline] == ["P1", "P2", "P3"]
    # P1 is alone at t=0, then P2 (3) beats P3 (8).
    assert _spans(res) == [("P1", 0, 5), ("P2", 5, 8), ("P3", 8, 16)]


def test_sjf_tie_goes_to_input_order():
    res = schedule_sjf([Process("A", 0, 4), Process("B", 0, 2), Process("C", 0, 2)])
    assert _spans(res) == [("B", 0, 2), ("C", 2, 4), ("A", 4, 8)]


def test_sjf_idles_until_earliest_arrival():
    res = schedule_sjf([Process("B", 7, 1), Process("A", 5, 2)])
    assert _spans(res) == [(IDLE, 0, 5), ("A", 5, 7), ("B", 7, 8)]


def test_srtf_preempts_on_shorter_arrival():
    res = schedule_srtf([Process("P1", 0, 8), Process("P2", 1, 4)])
    assert _spans(res) == [("P1", 0, 1), ("P2", 1, 5), ("P1", 5, 12)]
    # P1: turnaround 12, wait 4. P2: turnaround 4, wait 0.
    assert res.avg_waiting_time == 2.0
    assert res.avg_turnaround_time == 8.0
    assert res.context_switches == 2


def test_srtf_tie_keeps_first_in_input_order():
    res = schedule_srtf([Process("A", 0, 3), Process("B", 1, 2)])
    assert _spans(res) == [("A", 0, 3), ("B", 3, 5)]


def test_rr_quantum_2():
    res = schedule_rr([Process("P1", 0, 5), Process("P2", 1, 3)], quantum=2)
    assert _spans(res) == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P1", 4, 6),
        ("P2", 6, 7),
        ("P1", 7, 8),
    ]
    assert res.avg_response_time == 0.5
    assert res.avg_waiting_time == 3.0
    assert res.avg_turnaround_time == 7.0
    assert res.context_switches == len(res.timeline) - 1
    assert res.quantum == 2


def test_rr_default_quantum():
    res = schedule_rr([Process("P1", 0, 5), Process("P2", 1, 3)])
    assert res.quantum == DEFAULT_QUANTUM == 2
    assert res.timeline[0].end_time == 2


def test_rr_new_arrivals_queue_ahead_of_preempted_process():
    res = schedule_rr(
        [Process("P1", 0, 10), Process("P2", 0, 10), Process("P3", 3, 1)],
        quantum=2,
    )
    assert _spans(res)[:5] == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P1", 4, 6),
        ("P3", 6, 7),
        ("P2", 7, 9),
    ]


def test_rr_merges_back_to_back_slices_of_one_process():
    res = schedule_rr([Process("A", 0, 5)], quantum=2)
    assert _spans(res) == [("A", 0, 5)]
    assert res.context_switches == 0


def test_rr_idle_gap():
    res = schedule_rr([Process("A", 0, 1), Process("B", 3, 2)], quantum=2)
    assert _spans(res) == [("A", 0, 1), (IDLE, 1, 3), ("B", 3, 5)]
    assert res.avg_response_time == 0.0


def test_priority_static():
    res = schedule_priority_np(_procs())
    # P1 starts alone at 0; by t=5 P2 (priority 1) beats P3 (priority 3).
    assert res.timeline[0].pid == "P1"
    assert res.timeline[1].pid == "P2"


def test_priority_np_picks_lowest_value():
    res = schedule_priority_np(
        [Process("A", 0, 3, priority=3), Process("B", 0, 2, priority=1), Process("C", 1, 1, priority=2)]
    )
    assert _spans(res) == [("B", 0, 2), ("C", 2, 3), ("A", 3, 6)]


def test_priority_p_preempts_on_higher_priority_arrival():
    res = schedule_priority_p([Process("A", 0, 5, priority=2), Process("B", 2, 2, priority=1)])
    assert _spans(res) == [("A", 0, 2), ("B", 2, 4), ("A", 4, 7)]
    assert res.avg_waiting_time == 1.0
    assert res.avg_turnaround_time == 4.5


def test_priority_p_equal_priority_does_not_preempt():
    res = schedule_priority_p([Process("A", 0, 3, priority=1), Process("B", 1, 1, priority=1)])
    assert _spans(res) == [("A", 0, 3), ("B", 3, 4)]


def test_priority_p_with_idle_gap():
    res = schedule_priority_p([Process("A", 0, 1, priority=5), Process("B", 4, 2, priority=1)])
    assert _spans(res) == [("A", 0, 1), (IDLE, 1, 4), ("B", 4, 6)]
    assert res.context_switches == 2


@pytest.mark.parametrize(
    "name, expected",
    [
        ("fcfs", "fcfs"),
        ("FCFS", "fcfs"),
        ("priority_non_preemptive", "priority_np"),
        ("priority_preemptive", "priority_p"),
        (" rr ", "rr"),
    ],
)
def test_run_algorithm_resolves_names(name, expected):
    res = run_algorithm(name, _procs())
    assert res.algorithm == expected


def test_run_algorithm_passes_quantum_to_rr_only():
    assert run_algorithm("rr", _procs(), quantum=3).quantum == 3
    assert run_algorithm("fcfs", _procs(), quantum=3).quantum is None
