"""Report sections built from metric rows.

The request and response sections are always present. The remaining sections
belong to optional features (Coordinated Omission mitigation, status code
tracking, task tracking, recorded errors) and collapse to an empty string when
their rows are ``None`` or empty, leaving nothing behind in the document.
"""

from typing import Optional, Sequence

from .rows import (
    CORequestMetric,
    ErrorMetric,
    RequestMetric,
    ResponseMetric,
    StatusCodeMetric,
    TaskMetric,
    coordinated_omission_request_metrics_row,
    coordinated_omission_response_metrics_row,
    error_row,
    raw_request_metrics_row,
    response_metrics_row,
    status_code_metrics_row,
    task_metrics_row,
)
from ...utils.logging import get_logger

logger = get_logger(__name__)

PERCENTILE_HEADERS = """
                    <th>Method</th>
                    <th>Name</th>
                    <th>50%ile (ms)</th>
                    <th>60%ile (ms)</th>
                    <th>70%ile (ms)</th>
                    <th>80%ile (ms)</th>
                    <th>90%ile (ms)</th>
                    <th>95%ile (ms)</th>
                    <th>99%ile (ms)</th>
                    <th>100%ile (ms)</th>"""


def _join_rows(rows, render) -> str:
    return "\n        ".join(render(row) for row in rows)


def _omitted(section: str, rows) -> bool:
    if not rows:
        logger.debug("Omitting %s section: no rows", section)
        return True
    return False


def requests_section(rows: Sequence[RequestMetric], graph: str) -> str:
    """Build the request metrics section, preceded by its requests-per-second chart."""
    return f"""<div class="requests">
        <h2>Request Metrics</h2>

        {graph}

        <table>
            <thead>
                <tr>
                    <th>Method</th>
                    <th>Name</th>
                    <th># Requests</th>
                    <th># Fails</th>
                    <th>Average (ms)</th>
                    <th>Min (ms)</th>
                    <th>Max (ms)</th>
                    <th>RPS</th>
                    <th>Failures/s</th>
                </tr>
            </thead>
            <tbody>
        {_join_rows(rows, raw_request_metrics_row)}
            </tbody>
        </table>
    </div>"""


def responses_section(rows: Sequence[ResponseMetric], graph: str) -> str:
    """Build the response time section, preceded by its average response time chart."""
    return f"""<div class="responses">
        <h2>Response Time Metrics</h2>

        {graph}

        <table>
            <thead>
                <tr>{PERCENTILE_HEADERS}
                </tr>
            </thead>
            <tbody>
        {_join_rows(rows, response_metrics_row)}
            </tbody>
        </table>
    </div>"""


def coordinated_omission_requests_section(rows: Optional[Sequence[CORequestMetric]]) -> str:
    """Build the Coordinated Omission request table, if mitigation was triggered."""
    if _omitted("coordinated omission requests", rows):
        return ""

    return f"""<div class="co-requests">
        <h2>Request Metrics With Coordinated Omission Mitigation</h2>
        <table>
            <thead>
                <tr>
                    <th>Method</th>
                    <th>Name</th>
                    <th>Average (ms)</th>
                    <th>Standard deviation (ms)</th>
                    <th>Max (ms)</th>
                </tr>
            </thead>
            <tbody>
        {_join_rows(rows, coordinated_omission_request_metrics_row)}
            </tbody>
        </table>
    </div>"""


def coordinated_omission_responses_section(rows: Optional[Sequence[ResponseMetric]]) -> str:
    """Build the Coordinated Omission response table, if mitigation was triggered."""
    if _omitted("coordinated omission responses", rows):
        return ""

    return f"""<div class="co-responses">
        <h2>Response Time Metrics With Coordinated Omission Mitigation</h2>
        <table>
            <thead>
                <tr>{PERCENTILE_HEADERS}
                </tr>
            </thead>
            <tbody>
        {_join_rows(rows, coordinated_omission_response_metrics_row)}
            </tbody>
        </table>
    </div>"""


def status_codes_section(rows: Optional[Sequence[StatusCodeMetric]]) -> str:
    """Build the status code table, if status codes were tracked."""
    if _omitted("status codes", rows):
        return ""

    return f"""<div class="status-codes">
        <h2>Status Code Metrics</h2>
        <table>
            <thead>
                <tr>
                    <th>Method</th>
                    <th colspan="2">Name</th>
                    <th colspan="3">Status Codes</th>
                </tr>
            </thead>
            <tbody>
        {_join_rows(rows, status_code_metrics_row)}
            </tbody>
        </table>
    </div>"""


def tasks_section(rows: Optional[Sequence[TaskMetric]], graph: str) -> str:
    """Build the task table and its tasks-per-second chart, if tasks were tracked.

    Rows are rendered in the order given; each task set header must already
    precede the tasks that belong to it.
    """
    if _omitted("tasks", rows):
        return ""

    return f"""<div class="tasks">
        <h2>Task Metrics</h2>

        {graph}

        <table>
            <thead>
                <tr>
                    <th colspan="2">Task</th>
                    <th># Times Run</th>
                    <th># Fails</th>
                    <th>Average (ms)</th>
                    <th>Min (ms)</th>
                    <th>Max (ms)</th>
                    <th>RPS</th>
                    <th>Failures/s</th>
                </tr>
            </thead>
            <tbody>
        {_join_rows(rows, task_metrics_row)}
            </tbody>
        </table>
    </div>"""


def users_section(graph: str) -> str:
    """Build the user metrics section around the active users chart."""
    return f"""<div class="users">
        <h2>User Metrics</h2>

        {graph}
    </div>"""


def errors_section(rows: Optional[Sequence[ErrorMetric]], graph: str) -> str:
    """Build the errors table and its errors-per-second chart, if any errors occurred."""
    if _omitted("errors", rows):
        return ""

    return f"""<div class="errors">
        <h2>Errors</h2>

        {graph}

        <table>
            <thead>
                <tr>
                    <th>#</th>
                    <th colspan="3">Error</th>
                </tr>
            </thead>
            <tbody>
        {_join_rows(rows, error_row)}
            </tbody>
        </table>
    </div>"""
