"""Tests for metric rows."""

import logging
import re

import pytest

from load_report.core.reporting.rows import (
    CORequestMetric,
    ErrorMetric,
    RequestMetric,
    ResponseMetric,
    StatusCodeMetric,
    TaskMetric,
    coordinated_omission_request_metrics_row,
    coordinated_omission_response_metrics_row,
    error_row,
    get_response_metric,
    raw_request_metrics_row,
    response_metrics_row,
    status_code_metrics_row,
    task_metrics_row,
)


def cells(row):
    """Return the (attributes, content) of every cell in a row."""
    return re.findall(r"<td([^>]*)>(.*?)</td>", row, re.S)


def column_count(row):
    """Count the table columns a row spans."""
    total = 0
    for attributes, _ in cells(row):
        match = re.search(r'colspan="(\d+)"', attributes)
        total += int(match.group(1)) if match else 1
    return total


class TestRequestRow:
    """Tests for raw_request_metrics_row."""

    def test_renders_nine_columns(self, request_metric):
        """Test every request metric gets its own cell."""
        row = raw_request_metrics_row(request_metric)
        contents = [content for _, content in cells(row)]

        assert contents == ["GET", "/", "1,200", "3", "14.52", "9", "120", "4.00", "0.01"]
        assert row.startswith("<tr>")
        assert row.rstrip().endswith("</tr>")

    def test_negative_values_render_as_is(self):
        """Test upstream values are not sanitized."""
        metric = RequestMetric("GET", "/", -1, 0, "0", 0, 0, "0", "0")
        assert "<td>-1</td>" in raw_request_metrics_row(metric)

    @pytest.mark.parametrize("name, escaped", [
        ("/search?q=<script>", "/search?q=&lt;script&gt;"),
        ("/a&b", "/a&amp;b"),
        ('/say"hi"', "/say&#34;hi&#34;"),
        ("/it's", "/it&#39;s"),
    ])
    def test_names_are_escaped(self, name, escaped):
        """Test HTML-significant characters in names cannot inject markup."""
        metric = RequestMetric("GET", name, 1, 0, "1", 1, 1, "1", "0")
        row = raw_request_metrics_row(metric)

        assert f"<td>{escaped}</td>" in row
        assert "<script>" not in row


class TestResponseRows:
    """Tests for response time rows."""

    def test_percentiles_in_column_order(self, response_metric):
        """Test the eight percentiles follow method and name."""
        contents = [content for _, content in cells(response_metrics_row(response_metric))]
        assert contents == ["GET", "/", "10", "14", "14", "14", "20", "20", "50", "120"]

    def test_coordinated_omission_row_matches_layout(self, response_metric):
        """Test the mitigated table uses the same columns."""
        assert coordinated_omission_response_metrics_row(response_metric) == response_metrics_row(response_metric)

    def test_coordinated_omission_request_row(self):
        """Test the mitigated request row."""
        row = coordinated_omission_request_metrics_row(
            CORequestMetric("GET", "/", "15.20", "3.41", 250)
        )
        contents = [content for _, content in cells(row)]
        assert contents == ["GET", "/", "15.20", "3.41", "250"]


class TestGetResponseMetric:
    """Tests for get_response_metric."""

    def test_resolves_report_percentiles(self):
        """Test percentiles are resolved from the histogram."""
        histogram = {10: 600, 14: 400, 20: 150, 50: 40, 120: 10}
        metric = get_response_metric("GET", "/", histogram, 1200, 9, 120)

        assert metric.method == "GET"
        assert metric.name == "/"
        assert metric.percentiles == ("10", "14", "14", "14", "20", "20", "50", "120")

    def test_percentiles_are_non_decreasing(self):
        """Test numeric order of the resolved strings."""
        histogram = {5: 1, 90: 3, 1000: 4, 2000: 2}
        metric = get_response_metric("GET", "/", histogram, 10, 5, 2000)
        values = [int(value.replace(",", "")) for value in metric.percentiles]

        assert values == sorted(values)

    def test_undercount_logs_warning(self, caplog):
        """Test an undercounting histogram is reported and clamped to max."""
        with caplog.at_level(logging.WARNING):
            metric = get_response_metric("GET", "/slow", {10: 2}, 10, 10, 5000)

        assert metric.percentile_100 == "5,000"
        assert "histogram holds 2 of 10 requests" in caplog.text

    def test_empty_histogram(self):
        """Test a request never made resolves to the minimum everywhere."""
        metric = get_response_metric("GET", "/", {}, 0, 0, 0)
        assert set(metric.percentiles) == {"0"}


class TestTaskRow:
    """Tests for task_metrics_row."""

    def test_task_set_renders_single_label_cell(self):
        """Test a task set header spans the whole table."""
        row = task_metrics_row(TaskMetric.task_set("WebsiteUser"))
        row_cells = cells(row)

        assert len(row_cells) == 1
        assert 'colspan="9"' in row_cells[0][0]
        assert row_cells[0][1] == "<strong>WebsiteUser</strong>"
        assert column_count(row) == 9

    def test_task_matches_request_columns(self, request_metric):
        """Test a task with the same metrics renders the request table's metric cells."""
        task = TaskMetric(
            is_task_set=False,
            task="0.0",
            name="index",
            number_of_requests=request_metric.number_of_requests,
            number_of_failures=request_metric.number_of_failures,
            response_time_average=request_metric.response_time_average,
            response_time_minimum=request_metric.response_time_minimum,
            response_time_maximum=request_metric.response_time_maximum,
            requests_per_second=request_metric.requests_per_second,
            failures_per_second=request_metric.failures_per_second,
        )
        task_row = task_metrics_row(task)
        request_row = raw_request_metrics_row(request_metric)

        assert column_count(task_row) == column_count(request_row) == 9
        assert cells(task_row)[0] == (' colspan="2"', "0.0 index")
        assert cells(task_row)[1:] == cells(request_row)[2:]

    def test_task_label_is_escaped(self):
        """Test task names are escaped."""
        row = task_metrics_row(TaskMetric(is_task_set=False, task="1.0", name="<b>"))
        assert "&lt;b&gt;" in row
        assert "<b>" not in row


class TestStatusCodeRow:
    """Tests for status_code_metrics_row."""

    def test_layout(self):
        """Test name and status codes span multiple columns."""
        row = status_code_metrics_row(StatusCodeMetric("GET", "/", "1,197 [200], 3 [500]"))

        assert cells(row) == [
            ("", "GET"),
            (' colspan="2"', "/"),
            (' colspan="3"', "1,197 [200], 3 [500]"),
        ]


class TestErrorRow:
    """Tests for error_row."""

    def test_layout(self):
        """Test occurrences and error description."""
        row = error_row(ErrorMetric(1234, "500 Internal Server Error: /"))
        assert cells(row) == [("", "1,234"), (' colspan="3"', "500 Internal Server Error: /")]

    def test_error_description_is_escaped(self):
        """Test error descriptions echoed from responses cannot inject markup."""
        row = error_row(ErrorMetric(1, "<html><body>502 Bad Gateway</body></html>"))

        assert "&lt;html&gt;&lt;body&gt;502 Bad Gateway" in row
        assert "<body>" not in row
