"""
Building blocks shared by the scheduling drivers.

Every driver copies the caller's processes into ``WorkItem`` records (the
only mutable state of a run), feeds them through one of the selection loops
below and records the result with a ``TimelineRecorder``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Optional, Tuple

from .errors import (
    EmptyInputError,
    InvalidProcessError,
    MissingPriorityError,
    NonTerminatingInputError,
)
from .models import IDLE, Process, TimelineEntry

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class WorkItem:
    """
    Per-run working copy of a process.

    ``eq=False`` keeps identity semantics, so two processes with identical
    fields are still tracked separately.
    """

    process: Process
    remaining: int
    first_start: Optional[int] = None
    completion_time: Optional[int] = None

    @property
    def pid(self) -> str:
        return self.process.pid

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time

    @property
    def burst_time(self) -> int:
        return self.process.burst_time

    @property
    def priority(self) -> Optional[int]:
        return self.process.priority

    @property
    def finished(self) -> bool:
        return self.remaining == 0

    def dispatch(self, time: int) -> None:
        if self.first_start is None:
            self.first_start = time

    def run_for(self, amount: int, time: int) -> int:
        """Run for ``amount`` units starting at ``time``; return the end time."""
        self.dispatch(time)
        self.remaining -= amount
        end = time + amount
        if self.remaining == 0:
            self.completion_time = end
        return end


@dataclass(frozen=True)
class SelectionPolicy:
    """
    How a selection loop picks the next item among the ready ones.

    The minimum ``key`` wins. Ties go to the item met first in input order,
    which is what ``min()`` returns.
    """

    name: str
    key: Callable[[WorkItem], int]


SHORTEST_BURST = SelectionPolicy("shortest-burst", lambda w: w.burst_time)
SHORTEST_REMAINING = SelectionPolicy("shortest-remaining", lambda w: w.remaining)
LOWEST_PRIORITY = SelectionPolicy("lowest-priority", lambda w: w.priority)


@dataclass
class TimelineRecorder:
    """
    Accumulates timeline entries, merging a new interval into the previous
    entry when both belong to the same label.
    """

    entries: List[TimelineEntry] = field(default_factory=list)

    def run(self, pid: str, start: int, end: int) -> None:
        self._append(TimelineEntry(label=pid, start_time=start, end_time=end, pid=pid))

    def idle(self, start: int, end: int) -> None:
        self._append(TimelineEntry(label=IDLE, start_time=start, end_time=end))

    def _append(self, entry: TimelineEntry) -> None:
        if entry.end_time <= entry.start_time:
            return
        if self.entries:
            last = self.entries[-1]
            if last.end_time != entry.start_time:
                raise RuntimeError(
                    f"Timeline gap or overlap: {last.end_time} -> {entry.start_time}"
                )
            if (last.label, last.pid) == (entry.label, entry.pid):
                self.entries[-1] = replace(last, end_time=entry.end_time)
                return
        self.entries.append(entry)

    def timeline(self) -> Tuple[TimelineEntry, ...]:
        return tuple(self.entries)


def is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(
    processes: Iterable[Process],
    algorithm: str,
    require_priority: bool = False,
) -> List[Process]:
    """
    Check the caller's input and return it as a list.

    Raises ``EmptyInputError``, ``InvalidProcessError``,
    ``NonTerminatingInputError`` or ``MissingPriorityError``.
    """
    procs = list(processes)
    if not procs:
        raise EmptyInputError()

    for p in procs:
        if not is_int(p.burst_time) or p.burst_time <= 0:
            raise NonTerminatingInputError(p.pid, p.burst_time)
        if not is_int(p.arrival_time):
            raise InvalidProcessError(p.pid, f"arrival time must be an integer, got {p.arrival_time!r}")
        if p.arrival_time < 0:
            raise InvalidProcessError(p.pid, f"arrival time must be >= 0, got {p.arrival_time}")

    if require_priority:
        missing = [p.pid for p in procs if p.priority is None]
        if missing:
            raise MissingPriorityError(algorithm, missing)

    return procs


def make_work_items(processes: Iterable[Process]) -> List[WorkItem]:
    return [WorkItem(process=p, remaining=p.burst_time) for p in processes]


def average_times(items: List[WorkItem]) -> Tuple[float, float]:
    """
    Mean waiting and turnaround time over finished work items.
    """
    total_wait = 0
    total_turnaround = 0
    for w in items:
        turnaround = w.completion_time - w.arrival_time
        total_turnaround += turnaround
        total_wait += turnaround - w.burst_time
    n = len(items)
    return total_wait / n, total_turnaround / n


def _next_arrival(pending: List[WorkItem]) -> int:
    return min(w.arrival_time for w in pending)


def run_non_preemptive(items: List[WorkItem], policy: SelectionPolicy) -> Tuple[TimelineEntry, ...]:
    """
    Repeatedly pick the best ready item by ``policy`` and run it to completion.

    When nothing is ready the CPU idles until the earliest pending arrival.
    """
    recorder = TimelineRecorder()
    pending = list(items)
    time = 0

    while pending:
        ready = [w for w in pending if w.arrival_time <= time]
        if not ready:
            nxt = _next_arrival(pending)
            recorder.idle(time, nxt)
            time = nxt
            continue

        chosen = min(ready, key=policy.key)
        logger.debug("%s: t=%d dispatch %s (%d ready)", policy.name, time, chosen.pid, len(ready))

        start = time
        time = chosen.run_for(chosen.remaining, time)
        recorder.run(chosen.pid, start, time)
        pending.remove(chosen)

    return recorder.timeline()


def run_preemptive(items: List[WorkItem], policy: SelectionPolicy) -> Tuple[TimelineEntry, ...]:
    """
    Unit-stepped preemptive loop.

    The choice is re-evaluated at every time unit, so an arrival that beats
    the running item by ``policy`` takes the CPU at the next unit boundary.
    """
    recorder = TimelineRecorder()
    pending = list(items)
    running: Optional[WorkItem] = None
    time = 0

    while pending:
        ready = [w for w in pending if w.arrival_time <= time]
        if not ready:
            nxt = _next_arrival(pending)
            recorder.idle(time, nxt)
            time = nxt
            running = None
            continue

        chosen = min(ready, key=policy.key)
        if running is not None and running is not chosen and not running.finished:
            logger.debug("%s: t=%d %s preempts %s", policy.name, time, chosen.pid, running.pid)

        start = time
        time = chosen.run_for(1, time)
        recorder.run(chosen.pid, start, time)
        if chosen.finished:
            pending.remove(chosen)
        running = chosen

    return recorder.timeline()
