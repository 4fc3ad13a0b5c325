"""Time series charts rendered with ECharts.

Every chart in the report is a line chart over a time axis. The launch and
shutdown phases of the run are shaded on top of the series as mark areas:
``Starting`` spans the ramp-up window and ``Stopping`` the ramp-down window.
Either window may be missing (a run stopped during ramp-up never has a
stopping window), and a missing window simply contributes no area.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence, Tuple, Union

from jinja2 import Template, TemplateError
from jinja2.utils import htmlsafe_json_dumps

from ...utils.logging import get_logger
from ...utils.validation import ReportError

logger = get_logger(__name__)

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

Timestamp = Union[datetime, date, str]
Series = Sequence[Tuple[Timestamp, Union[int, float]]]

GRAPH_TEMPLATE = """<div class="graph">
            <div id="{{ html_id }}" style="width: 1000px; height:500px; background: white;"></div>

            <script type="text/javascript">
                var chartDom = document.getElementById('{{ html_id }}');
                var myChart = echarts.init(chartDom);

                myChart.setOption({
                    color: ['#2c664f'],
                    tooltip: { trigger: 'axis' },
                    toolbox: {
                        feature: {
                            dataZoom: { yAxisIndex: 'none' },
                            restore: {},
                            saveAsImage: {}
                        }
                    },
                    dataZoom: [
                        {
                            type: 'inside',
                            start: 0,
                            end: 100,
                            fillerColor: 'rgba(34, 80, 61, 0.25)',
                            selectedDataBackground: {
                                lineStyle: { color: '#2c664f' },
                                areaStyle: { color: '#378063' }
                            }
                        },
                        {
                            start: 0,
                            end: 100,
                            fillerColor: 'rgba(34, 80, 61, 0.25)',
                            selectedDataBackground: {
                                lineStyle: { color: '#2c664f' },
                                areaStyle: { color: '#378063' }
                            }
                        }
                    ],
                    xAxis: { type: 'time' },
                    yAxis: {
                        name: '{{ y_axis_label }}',
                        nameLocation: 'center',
                        nameRotate: 90,
                        nameGap: 45,
                        type: 'value'
                    },
                    series: [
                        {
                            type: 'line',
                            symbol: 'none',
                            sampling: 'lttb',
                            lineStyle: { color: '#2c664f' },
                            areaStyle: { color: '#378063' },
                            markArea: {
                                itemStyle: { color: 'rgba(6, 6, 6, 0.10)' },
                                data: [{{ mark_areas }}]
                            },
                            data: {{ data }}
                        }
                    ]
                });
            </script>
        </div>"""

MARK_AREA_TEMPLATE = "[{ name: '{{ name }}', xAxis: {{ start }} }, { xAxis: {{ end }} }]"


def format_timestamp(value: Timestamp) -> str:
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS`` in local time.

    Strings are assumed to be formatted already and pass through untouched.
    Naive datetimes are taken to be local time; aware ones are converted. A
    plain date stands for local midnight.

    Raises:
        ReportError: If the value is not a string, date or datetime.
    """
    if isinstance(value, str):
        return value
    if not isinstance(value, date):
        raise ReportError(f"Invalid timestamp {value!r}: expected a string or datetime")
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime(DATETIME_FORMAT)


@dataclass(frozen=True)
class PhaseWindow:
    """The start and end of a launch or shutdown phase."""

    start: Timestamp
    end: Timestamp

    @classmethod
    def from_bounds(
        cls, start: Optional[Timestamp], end: Optional[Timestamp]
    ) -> Optional["PhaseWindow"]:
        """Pair two optional bounds, or return None unless both are known."""
        if start is None or end is None:
            return None
        return cls(start, end)


def mark_area(name: str, window: Optional[PhaseWindow]) -> str:
    """Render one shaded mark area, or an empty string for a missing window."""
    if window is None:
        return ""
    try:
        return Template(MARK_AREA_TEMPLATE).render(
            name=name,
            start=htmlsafe_json_dumps(format_timestamp(window.start)),
            end=htmlsafe_json_dumps(format_timestamp(window.end)),
        )
    except TemplateError as e:
        raise ReportError(f"Failed to render {name} mark area: {e}") from e


def build_chart(
    html_id: str,
    y_axis_label: str,
    data: Series,
    starting: Optional[PhaseWindow] = None,
    stopping: Optional[PhaseWindow] = None,
) -> str:
    """Build the markup for one time series chart.

    Args:
        html_id: DOM id of the element the chart is mounted on.
        y_axis_label: Name shown along the value axis.
        data: ``(timestamp, value)`` points in chronological order.
        starting: Ramp-up window to shade, if known.
        stopping: Ramp-down window to shade, if known.

    Returns:
        A ``<div class="graph">`` fragment with its inline script.

    Raises:
        ReportError: If the chart template fails to render.
    """
    areas = [
        area
        for area in (mark_area("Starting", starting), mark_area("Stopping", stopping))
        if area
    ]
    values = [[format_timestamp(label), value] for label, value in data]

    logger.debug("Building chart %s: %d points, %d mark areas", html_id, len(values), len(areas))

    try:
        return Template(GRAPH_TEMPLATE).render(
            html_id=html_id,
            y_axis_label=y_axis_label,
            mark_areas=", ".join(areas),
            data=htmlsafe_json_dumps(values, separators=(",", ":")),
        )
    except TemplateError as e:
        raise ReportError(f"Failed to render chart {html_id}: {e}") from e


def graph_rps_template(
    rps: Series,
    starting: Optional[PhaseWindow] = None,
    stopping: Optional[PhaseWindow] = None,
) -> str:
    """Build a requests per second graph."""
    return build_chart("graph-rps", "Requests #", rps, starting, stopping)


def graph_eps_template(
    eps: Series,
    starting: Optional[PhaseWindow] = None,
    stopping: Optional[PhaseWindow] = None,
) -> str:
    """Build an errors per second graph."""
    return build_chart("graph-eps", "Errors #", eps, starting, stopping)


def graph_average_response_time_template(
    response_times: Series,
    starting: Optional[PhaseWindow] = None,
    stopping: Optional[PhaseWindow] = None,
) -> str:
    """Build an average response time graph."""
    return build_chart(
        "graph-avg-response-time", "Response time [ms]", response_times, starting, stopping
    )


def graph_users_per_second_template(
    active_users: Series,
    starting: Optional[PhaseWindow] = None,
    stopping: Optional[PhaseWindow] = None,
) -> str:
    """Build an active users graph."""
    return build_chart("graph-active-users", "Active users #", active_users, starting, stopping)


def graph_tasks_per_second_template(
    tps: Series,
    starting: Optional[PhaseWindow] = None,
    stopping: Optional[PhaseWindow] = None,
) -> str:
    """Build a tasks per second graph."""
    return build_chart("graph-tps", "Tasks #", tps, starting, stopping)
