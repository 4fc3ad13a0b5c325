"""Metric records and the table rows rendered from them.

Every record arrives fully aggregated: averages, rates and deviations are
computed by the statistics layer and handed over as display strings. The row
functions only lay values out as HTML. Free text (methods, names, task labels,
status code summaries, error descriptions) is escaped here, so a request name
such as ``/search?q=<b>`` cannot inject markup into the report.
"""

from dataclasses import dataclass
from typing import Mapping

from markupsafe import escape

from ..percentile import (
    REPORT_PERCENTILES,
    calculate_response_time_percentile,
    format_number,
)
from ...utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RequestMetric:
    """Metrics reported about requests."""

    method: str
    name: str
    number_of_requests: int
    number_of_failures: int
    response_time_average: str
    response_time_minimum: int
    response_time_maximum: int
    requests_per_second: str
    failures_per_second: str


@dataclass(frozen=True)
class CORequestMetric:
    """Metrics reported about requests with Coordinated Omission mitigation."""

    method: str
    name: str
    response_time_average: str
    response_time_standard_deviation: str
    response_time_maximum: int


@dataclass(frozen=True)
class ResponseMetric:
    """Response time percentiles for one request."""

    method: str
    name: str
    percentile_50: str
    percentile_60: str
    percentile_70: str
    percentile_80: str
    percentile_90: str
    percentile_95: str
    percentile_99: str
    percentile_100: str

    @property
    def percentiles(self) -> tuple:
        """The eight percentile strings in column order."""
        return (
            self.percentile_50,
            self.percentile_60,
            self.percentile_70,
            self.percentile_80,
            self.percentile_90,
            self.percentile_95,
            self.percentile_99,
            self.percentile_100,
        )


@dataclass(frozen=True)
class StatusCodeMetric:
    """Status code summary for one request."""

    method: str
    name: str
    status_codes: str


@dataclass(frozen=True)
class TaskMetric:
    """Metrics reported about a task, or a task set header.

    Task set headers only carry a name; the metric fields keep their defaults
    and are never rendered.
    """

    is_task_set: bool
    task: str
    name: str
    number_of_requests: int = 0
    number_of_failures: int = 0
    response_time_average: str = ""
    response_time_minimum: int = 0
    response_time_maximum: int = 0
    requests_per_second: str = ""
    failures_per_second: str = ""

    @classmethod
    def task_set(cls, name: str) -> "TaskMetric":
        """Build a header row for a task set."""
        return cls(is_task_set=True, task="", name=name)


@dataclass(frozen=True)
class ErrorMetric:
    """One distinct error and how often it occurred."""

    occurrences: int
    error: str


def get_response_metric(
    method: str,
    name: str,
    response_times: Mapping[int, int],
    total_request_count: int,
    response_time_minimum: int,
    response_time_maximum: int,
    precision: int = 0,
) -> ResponseMetric:
    """Resolve the report percentiles for one request into a ResponseMetric."""
    recorded = sum(response_times.values())
    if recorded < total_request_count:
        logger.warning(
            "%s %s: histogram holds %d of %d requests, upper percentiles fall back to max",
            method, name, recorded, total_request_count,
        )

    percentiles = [
        calculate_response_time_percentile(
            response_times,
            total_request_count,
            response_time_minimum,
            response_time_maximum,
            percent,
            precision,
        )
        for percent in REPORT_PERCENTILES
    ]

    return ResponseMetric(method, name, *percentiles)


def _metric_cells(
    number_of_requests: int,
    number_of_failures: int,
    response_time_average: str,
    response_time_minimum: int,
    response_time_maximum: int,
    requests_per_second: str,
    failures_per_second: str,
) -> str:
    # Shared by request and task rows so both tables line up column for column.
    return f"""
        <td>{format_number(number_of_requests)}</td>
        <td>{format_number(number_of_failures)}</td>
        <td>{response_time_average}</td>
        <td>{response_time_minimum}</td>
        <td>{response_time_maximum}</td>
        <td>{requests_per_second}</td>
        <td>{failures_per_second}</td>"""


def _percentile_cells(metric: ResponseMetric) -> str:
    return "".join(f"\n        <td>{value}</td>" for value in metric.percentiles)


def raw_request_metrics_row(metric: RequestMetric) -> str:
    """Build an individual row of raw request metrics."""
    cells = _metric_cells(
        metric.number_of_requests,
        metric.number_of_failures,
        metric.response_time_average,
        metric.response_time_minimum,
        metric.response_time_maximum,
        metric.requests_per_second,
        metric.failures_per_second,
    )
    return f"""<tr>
        <td>{escape(metric.method)}</td>
        <td>{escape(metric.name)}</td>{cells}
    </tr>"""


def response_metrics_row(metric: ResponseMetric) -> str:
    """Build an individual row of response time percentiles."""
    return f"""<tr>
        <td>{escape(metric.method)}</td>
        <td>{escape(metric.name)}</td>{_percentile_cells(metric)}
    </tr>"""


def coordinated_omission_request_metrics_row(metric: CORequestMetric) -> str:
    """Build an individual row of Coordinated Omission mitigated request metrics."""
    return f"""<tr>
        <td>{escape(metric.method)}</td>
        <td>{escape(metric.name)}</td>
        <td>{metric.response_time_average}</td>
        <td>{metric.response_time_standard_deviation}</td>
        <td>{metric.response_time_maximum}</td>
    </tr>"""


def coordinated_omission_response_metrics_row(metric: ResponseMetric) -> str:
    """Build an individual row of Coordinated Omission mitigated percentiles."""
    return response_metrics_row(metric)


def status_code_metrics_row(metric: StatusCodeMetric) -> str:
    """Build an individual row of status code metrics."""
    return f"""<tr>
        <td>{escape(metric.method)}</td>
        <td colspan="2">{escape(metric.name)}</td>
        <td colspan="3">{escape(metric.status_codes)}</td>
    </tr>"""


def task_metrics_row(metric: TaskMetric) -> str:
    """Build an individual row of task metrics.

    A task set renders as a single bold label spanning the whole table. A task
    renders its label across the two leading columns followed by the same seven
    metric columns as a request row.
    """
    if metric.is_task_set:
        return f"""<tr>
        <td colspan="9" align="left"><strong>{escape(metric.name)}</strong></td>
    </tr>"""

    cells = _metric_cells(
        metric.number_of_requests,
        metric.number_of_failures,
        metric.response_time_average,
        metric.response_time_minimum,
        metric.response_time_maximum,
        metric.requests_per_second,
        metric.failures_per_second,
    )
    return f"""<tr>
        <td colspan="2">{escape(metric.task)} {escape(metric.name)}</td>{cells}
    </tr>"""


def error_row(metric: ErrorMetric) -> str:
    """Build an individual error row."""
    return f"""<tr>
        <td>{format_number(metric.occurrences)}</td>
        <td colspan="3">{escape(metric.error)}</td>
    </tr>"""
