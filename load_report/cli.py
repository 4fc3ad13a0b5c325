"""Command-line interface for load-report."""

import sys

import click

from . import __version__
from .config import Config
from .core.reporting.report import generate_report, write_report
from .core.reporting.snapshot import load_snapshot_file
from .utils.logging import get_logger, setup_logging
from .utils.validation import ReportError, ValidationError

logger = get_logger(__name__)


def _load_config(path):
    config = Config.from_file(path) if path else Config()
    config.apply_env_overrides()
    config.validate()
    return config


@click.group()
@click.version_option(version=__version__)
@click.option("--config", type=click.Path(exists=True), help="Path to config file (YAML or JSON)")
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.pass_context
def cli(ctx, config, verbose, log_file):
    """Load Report - HTML summary reports for load test runs."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["log_file"] = log_file


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(), help="Report file to write (default: from config; '-' for stdout)")
@click.option("--precision", type=int, help="Decimal places for response time percentiles")
@click.option("--title", help="Report title")
@click.pass_context
def render(ctx, snapshot, output, precision, title):
    """Render an HTML report from a metrics SNAPSHOT file."""
    try:
        config = _load_config(ctx.obj["config"])
        setup_logging(
            level=config.logging.level,
            log_file=ctx.obj["log_file"] or config.logging.log_file,
            verbose=ctx.obj["verbose"] or config.logging.verbose,
        )

        if precision is not None:
            config.report.precision = precision
        if title:
            config.report.title = title
        config.report.validate()

        data = load_snapshot_file(snapshot, precision=config.report.precision)
        html = generate_report(data, config.report)

        output = output or config.report.output_file
        if output == "-":
            click.echo(html)
            return

        path = write_report(html, output)
        click.echo(f"✓ Report written to: {path}", err=True)

    except (ReportError, ValidationError, ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.obj["verbose"]:
            logger.exception("Report generation failed")
        sys.exit(1)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate(ctx, snapshot):
    """Check that a metrics SNAPSHOT file can be rendered."""
    setup_logging(log_file=ctx.obj["log_file"], verbose=ctx.obj["verbose"])
    try:
        data = load_snapshot_file(snapshot)
    except (ReportError, OSError) as e:
        click.echo(f"✗ Invalid snapshot: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Snapshot is valid: {snapshot}")
    click.echo(f"  Requests:      {len(data.requests)}")
    click.echo(f"  Responses:     {len(data.responses)}")
    for label, rows in (
        ("CO requests", data.co_requests),
        ("Status codes", data.status_codes),
        ("Tasks", data.tasks),
        ("Errors", data.errors),
    ):
        click.echo(f"  {label + ':':<14} {'disabled' if rows is None else len(rows)}")
