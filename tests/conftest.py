"""Test configuration for load-report."""

import logging

import pytest

from load_report.core.reporting.charts import PhaseWindow
from load_report.core.reporting.report import ReportData
from load_report.core.reporting.rows import (
    ErrorMetric,
    RequestMetric,
    ResponseMetric,
    StatusCodeMetric,
    TaskMetric,
)


@pytest.fixture
def sample_series():
    """Provide a short requests-per-second series."""
    return [
        ("2021-11-21 21:20:32", 123),
        ("2021-11-21 21:20:33", 111),
        ("2021-11-21 21:20:34", 99),
        ("2021-11-21 21:20:35", 134),
    ]


@pytest.fixture
def request_metric():
    """Provide a request metric for GET /."""
    return RequestMetric(
        method="GET",
        name="/",
        number_of_requests=1200,
        number_of_failures=3,
        response_time_average="14.52",
        response_time_minimum=9,
        response_time_maximum=120,
        requests_per_second="4.00",
        failures_per_second="0.01",
    )


@pytest.fixture
def response_metric():
    """Provide response percentiles for GET /."""
    return ResponseMetric("GET", "/", "10", "14", "14", "14", "20", "20", "50", "120")


@pytest.fixture
def report_data(request_metric, response_metric, sample_series):
    """Provide run data with every optional feature active."""
    return ReportData(
        users=10,
        hosts=["http://localhost:8080"],
        report_range="2021-11-21 21:20:32 - 2021-11-21 21:25:32",
        requests=(request_metric,),
        responses=(response_metric,),
        status_codes=(StatusCodeMetric("GET", "/", "1,197 [200], 3 [500]"),),
        tasks=(
            TaskMetric.task_set("WebsiteUser"),
            TaskMetric(
                is_task_set=False,
                task="0.0",
                name="index",
                number_of_requests=1200,
                number_of_failures=3,
                response_time_average="14.52",
                response_time_minimum=9,
                response_time_maximum=120,
                requests_per_second="4.00",
                failures_per_second="0.01",
            ),
        ),
        errors=(ErrorMetric(3, "500 Internal Server Error: /"),),
        requests_per_second=tuple(sample_series),
        errors_per_second=(("2021-11-21 21:20:33", 3),),
        average_response_time=tuple(sample_series),
        active_users=(("2021-11-21 21:20:32", 5), ("2021-11-21 21:20:34", 10)),
        tasks_per_second=tuple(sample_series),
        starting=PhaseWindow("2021-11-21 21:20:32", "2021-11-21 21:20:34"),
        stopping=PhaseWindow("2021-11-21 21:25:30", "2021-11-21 21:25:32"),
    )


@pytest.fixture
def snapshot_data():
    """Provide a metrics snapshot as it would be read from YAML or JSON."""
    return {
        "users": 10,
        "hosts": ["http://localhost:8080"],
        "report_range": "2021-11-21 21:20:32 - 2021-11-21 21:25:32",
        "phases": {
            "starting": "2021-11-21 21:20:32",
            "started": "2021-11-21 21:20:34",
            "stopping": "2021-11-21 21:25:30",
            "stopped": "2021-11-21 21:25:32",
        },
        "requests": [
            {
                "method": "GET",
                "name": "/",
                "number_of_requests": 1200,
                "number_of_failures": 3,
                "response_time_average": "14.52",
                "response_time_minimum": 9,
                "response_time_maximum": 120,
                "requests_per_second": "4.00",
                "failures_per_second": "0.01",
                "response_times": {"10": 600, "14": 400, "20": 150, "50": 40, "120": 10},
            },
            {
                "method": "POST",
                "name": "/login",
                "number_of_requests": 150,
                "number_of_failures": 0,
                "response_time_average": "26.67",
                "response_time_minimum": 18,
                "response_time_maximum": 45,
                "requests_per_second": "0.50",
                "failures_per_second": "0.00",
                "response_times": {"20": 100, "40": 50},
            },
        ],
        "status_codes": [
            {"method": "GET", "name": "/", "status_codes": "1,197 [200], 3 [500]"},
            {"method": "POST", "name": "/login", "status_codes": "150 [200]"},
        ],
        "tasks": [
            {
                "task_set": "WebsiteUser",
                "tasks": [
                    {
                        "task": "0.0",
                        "name": "index",
                        "number_of_requests": 1200,
                        "number_of_failures": 3,
                        "response_time_average": "14.52",
                        "response_time_minimum": 9,
                        "response_time_maximum": 120,
                        "requests_per_second": "4.00",
                        "failures_per_second": "0.01",
                    },
                    {
                        "task": "0.1",
                        "name": "login",
                        "number_of_requests": 150,
                        "number_of_failures": 0,
                        "response_time_average": "26.67",
                        "response_time_minimum": 18,
                        "response_time_maximum": 45,
                        "requests_per_second": "0.50",
                        "failures_per_second": "0.00",
                    },
                ],
            },
        ],
        "errors": [{"occurrences": 3, "error": "500 Internal Server Error: /"}],
        "series": {
            "requests_per_second": [["2021-11-21 21:20:32", 123], ["2021-11-21 21:20:33", 111]],
            "errors_per_second": [["2021-11-21 21:20:33", 3]],
            "average_response_time": [["2021-11-21 21:20:32", 14], ["2021-11-21 21:20:33", 15]],
            "active_users": [["2021-11-21 21:20:32", 5], ["2021-11-21 21:20:34", 10]],
            "tasks_per_second": [["2021-11-21 21:20:32", 40], ["2021-11-21 21:20:33", 41]],
        },
    }


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back after tests that call setup_logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
