"""HTML report rendering: rows, sections, charts and the assembled document."""

from .charts import PhaseWindow, build_chart
from .report import (
    ReportData,
    ReportMetadata,
    ReportTemplates,
    build_report,
    generate_report,
    write_report,
)
from .snapshot import load_snapshot, load_snapshot_file

__all__ = [
    "PhaseWindow",
    "ReportData",
    "ReportMetadata",
    "ReportTemplates",
    "build_chart",
    "build_report",
    "generate_report",
    "load_snapshot",
    "load_snapshot_file",
    "write_report",
]
