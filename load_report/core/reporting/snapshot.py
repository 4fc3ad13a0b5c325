"""
Metrics snapshot loading.

A snapshot is the finalized metrics of one run serialized as YAML or JSON:

    users: 10
    hosts: [http://localhost:8080]
    report_range: "2021-11-21 21:20:32 - 2021-11-21 21:25:32"
    phases:
      starting: "2021-11-21 21:20:32"
      started: "2021-11-21 21:20:34"
      stopping: "2021-11-21 21:25:30"
      stopped: "2021-11-21 21:25:32"
    requests:
      - method: GET
        name: /
        number_of_requests: 1200
        ...
        response_times: {12: 1000, 20: 200}
    tasks:
      - task_set: WebsiteUser
        tasks: [{task: "0.0", name: index, ...}]
    errors: [{occurrences: 3, error: "500 Internal Server Error: /"}]
    series:
      requests_per_second: [["2021-11-21 21:20:32", 123], ...]

Optional sections (``co_requests``, ``co_responses``, ``status_codes``,
``tasks``, ``errors``) are left out of the snapshot when the matching feature
was not active.
"""

import json
from dataclasses import fields
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ...utils.logging import get_logger
from ...utils.validation import ReportError, ValidationError, validate_int, validate_number
from .charts import PhaseWindow
from .report import ReportData
from .rows import (
    CORequestMetric,
    ErrorMetric,
    RequestMetric,
    ResponseMetric,
    StatusCodeMetric,
    TaskMetric,
    get_response_metric,
)

logger = get_logger(__name__)

SERIES_KEYS = [
    "requests_per_second",
    "errors_per_second",
    "average_response_time",
    "active_users",
    "tasks_per_second",
]


def _record(cls, entry: Any, section: str):
    """Build one metric record, checking its integer fields."""
    if not isinstance(entry, dict):
        raise ReportError(f"Invalid {section} entry: expected a mapping, got {type(entry).__name__}")

    names = {f.name for f in fields(cls)}
    values = {k: v for k, v in entry.items() if k in names}
    try:
        record = cls(**values)
        for f in fields(cls):
            if f.type is int:
                validate_int(getattr(record, f.name), f"{section}.{f.name}")
    except (TypeError, ValidationError) as e:
        raise ReportError(f"Invalid {section} entry: {e}") from e
    return record


def _histogram(raw: Any, section: str) -> Dict[int, int]:
    if not isinstance(raw, dict):
        raise ReportError(f"Invalid {section} response_times: expected a mapping")
    try:
        return {int(bucket): int(count) for bucket, count in raw.items()}
    except (TypeError, ValueError) as e:
        raise ReportError(f"Invalid {section} response_times: {e}") from e


def _response(entry: Dict[str, Any], section: str, precision: int) -> ResponseMetric:
    """Build a ResponseMetric from explicit percentiles or a raw histogram."""
    if "response_times" not in entry:
        return _record(ResponseMetric, entry, section)

    try:
        total = entry.get("total_count", entry.get("number_of_requests"))
        minimum = entry["response_time_minimum"]
        maximum = entry["response_time_maximum"]
        method, name = entry["method"], entry["name"]
    except KeyError as e:
        raise ReportError(f"Invalid {section} entry: missing {e}") from e
    if total is None:
        raise ReportError(f"Invalid {section} entry: missing total_count")
    try:
        validate_int(total, f"{section}.total_count")
        validate_int(minimum, f"{section}.response_time_minimum")
        validate_int(maximum, f"{section}.response_time_maximum")
    except ValidationError as e:
        raise ReportError(f"Invalid {section} entry: {e}") from e

    return get_response_metric(
        method,
        name,
        _histogram(entry["response_times"], section),
        total,
        minimum,
        maximum,
        precision,
    )


def _section(data: Dict[str, Any], key: str) -> Optional[List[Any]]:
    if key not in data or data[key] is None:
        return None
    entries = data[key]
    if not isinstance(entries, list):
        raise ReportError(f"Invalid {key}: expected a list")
    return entries


def _tasks(entries: List[Any]) -> List[TaskMetric]:
    """Flatten task sets into rows, each header followed by its tasks."""
    rows = []
    for task_set in entries:
        if not isinstance(task_set, dict) or "task_set" not in task_set:
            raise ReportError("Invalid tasks entry: expected a mapping with 'task_set'")
        rows.append(TaskMetric.task_set(task_set["task_set"]))
        for task in task_set.get("tasks", []):
            if not isinstance(task, dict):
                raise ReportError("Invalid tasks entry: expected a mapping")
            rows.append(_record(TaskMetric, dict(task, is_task_set=False), "tasks"))
    return rows


def _timestamp(value: Any, where: str):
    """Check one timestamp, turning a bare date into local midnight."""
    if isinstance(value, (str, datetime)):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise ReportError(f"Invalid {where} timestamp {value!r}: expected a string or datetime")


def _series(raw: Any, key: str) -> tuple:
    if not isinstance(raw, list):
        raise ReportError(f"Invalid series {key}: expected a list of [timestamp, value] pairs")
    points = []
    for point in raw:
        if not isinstance(point, (list, tuple)) or len(point) != 2:
            raise ReportError(f"Invalid series {key} point: {point!r}")
        try:
            validate_number(point[1], f"series.{key}")
        except ValidationError as e:
            raise ReportError(f"Invalid series {key} point: {e}") from e
        points.append((_timestamp(point[0], f"series {key}"), point[1]))
    return tuple(points)


def load_snapshot(data: Dict[str, Any], precision: int = 0) -> ReportData:
    """
    Create ReportData from a snapshot dictionary.

    Args:
        data: Snapshot dictionary
        precision: Decimal places for percentiles resolved from histograms

    Returns:
        ReportData instance

    Raises:
        ReportError: If required fields are missing or invalid
    """
    if not isinstance(data, dict):
        raise ReportError("Snapshot must be a mapping")

    for key in ("users", "hosts", "report_range"):
        if key not in data:
            raise ReportError(f"Snapshot is missing '{key}'")

    requests = [_record(RequestMetric, entry, "requests") for entry in _section(data, "requests") or []]

    if "responses" in data:
        responses = [_response(entry, "responses", precision) for entry in _section(data, "responses") or []]
    else:
        responses = [
            _response(entry, "requests", precision)
            for entry in _section(data, "requests") or []
            if "response_times" in entry
        ]

    co_requests = _section(data, "co_requests")
    co_responses = _section(data, "co_responses")
    status_codes = _section(data, "status_codes")
    tasks = _section(data, "tasks")
    errors = _section(data, "errors")

    phases = data.get("phases") or {}
    if not isinstance(phases, dict):
        raise ReportError("Invalid phases: expected a mapping")
    bounds = {
        key: None if phases.get(key) is None else _timestamp(phases[key], f"phases {key}")
        for key in ("starting", "started", "stopping", "stopped")
    }
    series = data.get("series") or {}
    unknown = set(series) - set(SERIES_KEYS)
    if unknown:
        logger.warning("Ignoring unknown series: %s", ", ".join(sorted(unknown)))

    report_data = ReportData(
        users=data["users"],
        hosts=data["hosts"],
        report_range=str(data["report_range"]),
        requests=tuple(requests),
        responses=tuple(responses),
        co_requests=None if co_requests is None else tuple(
            _record(CORequestMetric, entry, "co_requests") for entry in co_requests
        ),
        co_responses=None if co_responses is None else tuple(
            _response(entry, "co_responses", precision) for entry in co_responses
        ),
        status_codes=None if status_codes is None else tuple(
            _record(StatusCodeMetric, entry, "status_codes") for entry in status_codes
        ),
        tasks=None if tasks is None else tuple(_tasks(tasks)),
        errors=None if errors is None else tuple(
            _record(ErrorMetric, entry, "errors") for entry in errors
        ),
        starting=PhaseWindow.from_bounds(bounds["starting"], bounds["started"]),
        stopping=PhaseWindow.from_bounds(bounds["stopping"], bounds["stopped"]),
        **{key: _series(series[key], key) for key in SERIES_KEYS if key in series},
    )

    logger.debug(
        "Loaded snapshot: %d requests, %d responses, tasks=%s, errors=%s",
        len(report_data.requests), len(report_data.responses),
        report_data.tasks is not None, report_data.errors is not None,
    )
    return report_data


def load_snapshot_file(path: Union[str, Path], precision: int = 0) -> ReportData:
    """
    Load a snapshot from file (auto-detect YAML/JSON).

    Raises:
        FileNotFoundError: If file doesn't exist
        ReportError: If file format is unsupported or the snapshot is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    suffix = path.suffix.lower()
    get_logger(__name__, {"snapshot": path.name}).debug("Reading %s", path)

    with open(path, 'r', encoding='utf-8') as f:
        try:
            if suffix in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            elif suffix == '.json':
                data = json.load(f)
            else:
                raise ReportError(f"Unsupported snapshot file format: {suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ReportError(f"Failed to parse snapshot {path}: {e}") from e

    if not data:
        raise ReportError(f"Empty snapshot file: {path}")

    return load_snapshot(data, precision)
