from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List

from .models import Process


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a process set from a JSON or CSV file, preserving file order.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return [_process_from_mapping(row) for row in reader]


def _parse_time(value) -> int:
    # JSON gives ints, CSV gives strings; floats and booleans are rejected
    if isinstance(value, bool):
        raise TypeError(f"boolean is not a time value: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value)
    raise TypeError(f"time values must be integers, got {value!r}")


def _process_from_mapping(mapping) -> Process:
    try:
        pid = str(mapping["pid"])
        arrival_time = _parse_time(mapping["arrival_time"])
        burst_time = _parse_time(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    name = mapping.get("name")
    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        name=str(name) if name not in (None, "") else None,
    )
