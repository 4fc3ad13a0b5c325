"""
Load Test Report Generator
Assembles the request, response, task, status code and error sections and the
time series charts into a single self-contained HTML document.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

from jinja2 import Template, TemplateError
from markupsafe import escape

from ... import __title__, __version__
from ...config import DEFAULT_ECHARTS_URL, ReportConfig
from ...utils.logging import get_logger
from ...utils.validation import ReportError
from .charts import (
    PhaseWindow,
    Series,
    graph_average_response_time_template,
    graph_eps_template,
    graph_rps_template,
    graph_tasks_per_second_template,
    graph_users_per_second_template,
)
from .rows import (
    CORequestMetric,
    ErrorMetric,
    RequestMetric,
    ResponseMetric,
    StatusCodeMetric,
    TaskMetric,
)
from .tables import (
    coordinated_omission_requests_section,
    coordinated_omission_responses_section,
    errors_section,
    requests_section,
    responses_section,
    status_codes_section,
    tasks_section,
    users_section,
)

logger = get_logger(__name__)

REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ title }}</title>
    <style>
        .container {
            width: 1000px;
            margin: 0 auto;
            padding: 10px;
            background: #173529;
            font-family: Arial, Helvetica, sans-serif;
            font-size: 14px;
            color: #fff;
        }

        .info span {
            color: #b3c3bc;
        }

        table {
            border-collapse: collapse;
            text-align: center;
            width: 100%;
        }

        td, th {
            border: 1px solid #cad9ea;
            color: #666;
            height: 30px;
        }

        thead th {
            background-color: #cce8eb;
            width: 100px;
        }

        tr:nth-child(odd) {
            background: #fff;
        }

        tr:nth-child(even) {
            background: #f5fafa;
        }

        .graph {
            margin-bottom: 1em;
        }

        .footer {
            margin-top: 2em;
            color: #b3c3bc;
            text-align: center;
        }
    </style>
    <script src="{{ echarts_url }}"></script>
</head>
<body>
    <div class="container">
        <h1>{{ title }}</h1>

        <div class="info">
            <p>Users: <span>{{ users }}</span></p>
            <p>Target Host: <span>{{ hosts }}</span></p>
            <p>Report Range: <span>{{ report_range }}</span></p>
        </div>

        {{ requests }}

        {{ co_requests }}

        {{ responses }}

        {{ co_responses }}

        {{ status_codes }}

        {{ tasks }}

        {{ users_section }}

        {{ errors }}

        <div class="footer">
            <small><em>{{ generator_name }} v{{ generator_version }}</em></small>
        </div>
    </div>
</body>
</html>
"""


@dataclass(frozen=True)
class ReportMetadata:
    """Run details shown at the top and bottom of the report."""

    users: Union[int, str]
    hosts: Union[str, Sequence[str]]
    report_range: str
    generator_name: str = __title__
    generator_version: str = __version__

    @property
    def hosts_display(self) -> str:
        if isinstance(self.hosts, str):
            return str(escape(self.hosts))
        return ", ".join(str(escape(host)) for host in self.hosts)


@dataclass(frozen=True)
class ReportTemplates:
    """Rendered fragments for every section of the report, in document order.

    Optional sections hold an empty string when they are omitted.
    """

    requests: str
    responses: str
    users: str
    co_requests: str = ""
    co_responses: str = ""
    status_codes: str = ""
    tasks: str = ""
    errors: str = ""


@dataclass(frozen=True)
class ReportData:
    """Everything a report is rendered from, as handed over after a run.

    Optional row collections are ``None`` when the matching feature was not
    active during the run.
    """

    users: Union[int, str]
    hosts: Union[str, Sequence[str]]
    report_range: str
    requests: Sequence[RequestMetric] = ()
    responses: Sequence[ResponseMetric] = ()
    co_requests: Optional[Sequence[CORequestMetric]] = None
    co_responses: Optional[Sequence[ResponseMetric]] = None
    status_codes: Optional[Sequence[StatusCodeMetric]] = None
    tasks: Optional[Sequence[TaskMetric]] = None
    errors: Optional[Sequence[ErrorMetric]] = None
    requests_per_second: Series = field(default_factory=tuple)
    errors_per_second: Series = field(default_factory=tuple)
    average_response_time: Series = field(default_factory=tuple)
    active_users: Series = field(default_factory=tuple)
    tasks_per_second: Series = field(default_factory=tuple)
    starting: Optional[PhaseWindow] = None
    stopping: Optional[PhaseWindow] = None


def build_report(
    metadata: ReportMetadata,
    templates: ReportTemplates,
    title: str = "Load Test Report",
    echarts_url: str = DEFAULT_ECHARTS_URL,
) -> str:
    """Build the html report.

    Args:
        metadata: Users, hosts, time range and generator of the run.
        templates: Rendered section fragments.
        title: Document title and heading.
        echarts_url: Location of the ECharts script the charts depend on.

    Returns:
        The complete HTML document.

    Raises:
        ReportError: If the document template fails to render.
    """
    try:
        return Template(REPORT_TEMPLATE).render(
            title=escape(title),
            echarts_url=escape(echarts_url),
            users=escape(str(metadata.users)),
            hosts=metadata.hosts_display,
            report_range=escape(metadata.report_range),
            generator_name=escape(metadata.generator_name),
            generator_version=escape(metadata.generator_version),
            requests=templates.requests,
            co_requests=templates.co_requests,
            responses=templates.responses,
            co_responses=templates.co_responses,
            status_codes=templates.status_codes,
            tasks=templates.tasks,
            users_section=templates.users,
            errors=templates.errors,
        )
    except TemplateError as e:
        raise ReportError(f"Failed to render report template: {e}") from e


def build_templates(data: ReportData) -> ReportTemplates:
    """Render every section of the report from finalized run data."""
    starting, stopping = data.starting, data.stopping

    return ReportTemplates(
        requests=requests_section(
            data.requests, graph_rps_template(data.requests_per_second, starting, stopping)
        ),
        responses=responses_section(
            data.responses,
            graph_average_response_time_template(data.average_response_time, starting, stopping),
        ),
        users=users_section(
            graph_users_per_second_template(data.active_users, starting, stopping)
        ),
        co_requests=coordinated_omission_requests_section(data.co_requests),
        co_responses=coordinated_omission_responses_section(data.co_responses),
        status_codes=status_codes_section(data.status_codes),
        # Charts for optional sections are only built when the section is shown.
        tasks=tasks_section(
            data.tasks,
            graph_tasks_per_second_template(data.tasks_per_second, starting, stopping)
            if data.tasks else "",
        ),
        errors=errors_section(
            data.errors,
            graph_eps_template(data.errors_per_second, starting, stopping)
            if data.errors else "",
        ),
    )


def generate_report(data: ReportData, config: Optional[ReportConfig] = None) -> str:
    """Render a complete report from run data.

    Args:
        data: Finalized metrics of the run.
        config: Report configuration; defaults are used when omitted.

    Returns:
        The complete HTML document.
    """
    config = config or ReportConfig()

    logger.info(
        "Generating report for %d requests, %d errors",
        len(data.requests), len(data.errors or ()),
    )

    metadata = ReportMetadata(
        users=data.users,
        hosts=data.hosts,
        report_range=data.report_range,
        generator_name=config.generator_name,
        generator_version=config.generator_version,
    )

    return build_report(
        metadata,
        build_templates(data),
        title=config.title,
        echarts_url=config.echarts_url,
    )


def write_report(html: str, output_file: Union[str, Path]) -> Path:
    """Write a rendered report to disk, creating parent directories.

    Returns:
        The path written.
    """
    path = Path(output_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding='utf-8')

    logger.info("Report generated: %s", path)
    return path
