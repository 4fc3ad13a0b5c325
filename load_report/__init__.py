"""Post-run HTML summary reports for load-testing sessions."""

__title__ = "load-report"
__version__ = "0.1.0"
