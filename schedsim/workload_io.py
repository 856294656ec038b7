from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping, Optional

from .errors import WorkloadFormatError
from .models import Process

logger = logging.getLogger(__name__)

# Field separators tried, in order, on each line of a text workload.
TEXT_SEPARATORS = (",", ":", " ", "\t")

# Accepted spellings for each field in JSON/CSV rows.
_FIELD_NAMES = {
    "pid": ("pid", "id"),
    "arrival_time": ("arrival_time", "arrivalTime", "arrival"),
    "burst_time": ("burst_time", "burstTime", "burst"),
    "priority": ("priority",),
}


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON, CSV or plain text file into a list of
    Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)
    if suffix == ".txt":
        return parse_process_text(path.read_text(encoding="utf-8"))

    raise WorkloadFormatError(f"Unsupported workload format: {suffix} (use .json, .csv or .txt)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadFormatError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadFormatError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _lookup(mapping: Mapping, field: str):
    for name in _FIELD_NAMES[field]:
        if name in mapping:
            return mapping[name]
    raise KeyError(field)


def _process_from_mapping(mapping) -> Process:
    try:
        pid = str(_lookup(mapping, "pid"))
        arrival_time = int(_lookup(mapping, "arrival_time"))
        burst_time = int(_lookup(mapping, "burst_time"))
    except (KeyError, TypeError, ValueError) as exc:
        raise WorkloadFormatError(f"Invalid process entry: {mapping!r}") from exc

    try:
        priority_val = _lookup(mapping, "priority")
    except KeyError:
        priority_val = None

    try:
        priority = int(priority_val) if priority_val not in (None, "") else None
    except (TypeError, ValueError) as exc:
        raise WorkloadFormatError(f"Invalid priority in process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def _split_line(line: str) -> List[str]:
    for sep in TEXT_SEPARATORS:
        if sep in line:
            return [part.strip() for part in line.split(sep) if part.strip()]
    return [line]


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_process_text(text: str) -> List[Process]:
    """
    Parse the line-oriented process format: ``id,arrival,burst[,priority]``.

    The separator may be a comma, colon, space or tab. Blank lines and
    ``#`` comments are ignored; lines that do not yield an id plus integer
    arrival and burst times are skipped with a warning.
    """
    processes: List[Process] = []
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        parts = _split_line(line)
        if len(parts) < 3:
            logger.warning("line %d: expected at least 3 fields, skipping %r", lineno, line)
            continue

        arrival_time = _optional_int(parts[1])
        burst_time = _optional_int(parts[2])
        if arrival_time is None or burst_time is None:
            logger.warning("line %d: arrival/burst are not integers, skipping %r", lineno, line)
            continue

        processes.append(
            Process(
                pid=parts[0],
                arrival_time=arrival_time,
                burst_time=burst_time,
                priority=_optional_int(parts[3]) if len(parts) > 3 else None,
            )
        )

    return processes
