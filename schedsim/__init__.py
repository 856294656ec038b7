"""
schedsim package.

Simulates classical single-CPU scheduling algorithms (FCFS, SJF, SRTF,
Round Robin, Priority non-preemptive and preemptive) over a set of
CPU-bound processes and reports the execution timeline with its metrics.
"""

from .algorithms import ALGORITHMS, DEFAULT_QUANTUM, run_algorithm
from .errors import (
    EmptyInputError,
    InvalidProcessError,
    InvalidQuantumError,
    MissingPriorityError,
    NonTerminatingInputError,
    SchedulingError,
    UnknownAlgorithmError,
    WorkloadFormatError,
)
from .models import IDLE, Process, RunResult, TimelineEntry

__all__ = [
    "ALGORITHMS",
    "DEFAULT_QUANTUM",
    "IDLE",
    "EmptyInputError",
    "InvalidProcessError",
    "InvalidQuantumError",
    "MissingPriorityError",
    "NonTerminatingInputError",
    "Process",
    "RunResult",
    "SchedulingError",
    "TimelineEntry",
    "UnknownAlgorithmError",
    "WorkloadFormatError",
    "run_algorithm",
]
