from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

# Label used for timeline entries where the CPU has nothing to run.
IDLE = "Idle"


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: Optional[int] = None


@dataclass(frozen=True)
class TimelineEntry:
    """
    One contiguous interval of the Gantt chart: a process running, or the
    CPU sitting idle.
    """

    label: str
    start_time: int
    end_time: int
    pid: Optional[str] = None

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        return self.pid is None


@dataclass(frozen=True)
class RunResult:
    algorithm: str
    processes: Tuple[Process, ...] = field(default_factory=tuple)
    timeline: Tuple[TimelineEntry, ...] = field(default_factory=tuple)
    avg_waiting_time: float = 0.0
    avg_turnaround_time: float = 0.0
    avg_response_time: Optional[float] = None
    context_switches: Optional[int] = None
    quantum: Optional[int] = None

    @property
    def makespan(self) -> int:
        return self.timeline[-1].end_time if self.timeline else 0


@dataclass
class ProcessMetrics:
    pid: str
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: Optional[int] = None


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    context_switches: int = 0
    starvation_count: int = 0
