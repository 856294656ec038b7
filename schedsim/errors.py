"""
Error kinds raised by the simulation engine and the workload loader.

Every error is a validation failure on caller-supplied input and is raised
before any simulation work happens. They all derive from ``ValueError`` so
callers that only care about "bad input" can catch that.
"""

from __future__ import annotations


class SchedulingError(ValueError):
    """Base class for everything the engine rejects."""


class EmptyInputError(SchedulingError):
    def __init__(self) -> None:
        super().__init__("No processes to schedule")


class MissingPriorityError(SchedulingError):
    def __init__(self, algorithm: str, pids) -> None:
        self.algorithm = algorithm
        self.pids = list(pids)
        super().__init__(
            f"Algorithm '{algorithm}' needs a priority for every process "
            f"(missing for: {', '.join(self.pids)})"
        )


class UnknownAlgorithmError(SchedulingError):
    def __init__(self, name: str, known) -> None:
        self.name = name
        super().__init__(f"Unknown algorithm '{name}' (choose from: {', '.join(known)})")


class InvalidProcessError(SchedulingError):
    def __init__(self, pid: str, reason: str) -> None:
        self.pid = pid
        super().__init__(f"Invalid process {pid!r}: {reason}")


class NonTerminatingInputError(InvalidProcessError):
    """A process whose burst time would never run down to zero."""

    def __init__(self, pid: str, burst_time) -> None:
        super().__init__(pid, f"burst time must be a positive integer, got {burst_time!r}")


class InvalidQuantumError(SchedulingError):
    def __init__(self, quantum) -> None:
        super().__init__(f"Round Robin requires a positive integer quantum, got {quantum!r}")


class WorkloadFormatError(ValueError):
    """A workload file could not be turned into processes."""
