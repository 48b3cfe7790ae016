"""
Click-based CLI for chopchop.

This module only ORCHESTRATES:
- Parses flags into a RunConfig
- Loads signatures
- Invokes the scanner
- Exports results and picks the exit code
"""

import signal
import threading
from contextlib import contextmanager

import click
from rich.console import Console

from chopchop import __version__
from chopchop.actions.export import export_results
from chopchop.actions.reporters.rich_reporter import RichReporter
from chopchop.config import ConfigError, build_config
from chopchop.engine.policy import exit_code
from chopchop.logs import setup_logging
from chopchop.model.severity import Severity
from chopchop.model.signature import SignatureError
from chopchop.parser.signatures import load_signatures
from chopchop.scanner.orchestrator import Scanner

console = Console()

SEVERITY_CHOICE = click.Choice(Severity.labels(), case_sensitive=False)


class ConfigurationFailed(click.ClickException):
    """Invalid signatures or run configuration. Nothing was scanned."""

    exit_code = 2


def _init_logging(verbosity: str):
    try:
        return setup_logging(verbosity)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--verbosity'") from e


def _load(signatures: str):
    try:
        return load_signatures(signatures)
    except SignatureError as e:
        raise ConfigurationFailed(str(e)) from e


@contextmanager
def _cancel_on_signal(cancel: threading.Event, logger):
    """Turn SIGINT/SIGTERM into a cooperative scan cancellation."""

    def handler(signum, frame):
        logger.warning("Keyboard interrupt detected.")
        cancel.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            previous[sig] = signal.signal(sig, handler)
        except ValueError:
            # Not in the main thread
            pass
    try:
        yield cancel
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)


@click.group()
@click.version_option(version=__version__, prog_name="chopchop")
def main() -> None:
    """chopchop: scan endpoints for exposed services, files and folders.

    Signature-driven: every probe and every pass/fail condition comes from
    the YAML signature file.
    """


@main.command()
@click.argument("urls", nargs=-1)
@click.option("--url-file", "-u", type=click.Path(), default=None, help="File with one URL per line")
@click.option(
    "--signatures", "-c", default="chopchop.yml", show_default=True,
    envvar="CHOPCHOP_SIGNATURES", help="Path to signature file",
)
@click.option(
    "--threads", type=int, default=1, show_default=True,
    envvar="CHOPCHOP_THREADS", help="Maximum number of concurrent requests",
)
@click.option("--timeout", "-t", type=float, default=10, show_default=True, help="Timeout (in s) for each HTTP request")
@click.option("--insecure", "-k", is_flag=True, help="Do not verify TLS certificates")
@click.option(
    "--export", "-e", "exports", multiple=True, default=("stdout",), show_default=True,
    help="Export format: stdout, csv, json (repeatable)",
)
@click.option("--export-filename", default=None, help="Base filename for csv/json exports")
@click.option(
    "--max-severity", "-b", type=SEVERITY_CHOICE, default=None,
    help="Fail the CI pipeline only if a hit is at or over this severity",
)
@click.option("--plugin-filters", multiple=True, help="Only run checks whose name contains this (repeatable)")
@click.option("--severity-filter", type=SEVERITY_CHOICE, default=None, help="Only run checks with this severity")
@click.option("--prefix", default="", help="Prefix added before each URL")
@click.option("--suffix", default="", help="Suffix added after each URL, before the endpoint")
@click.option("--verbosity", "-v", default="warning", show_default=True, help="Log level (debug, info, warning, error)")
@click.pass_context
def scan(
    ctx: click.Context,
    urls: tuple[str, ...],
    url_file: str | None,
    signatures: str,
    threads: int,
    timeout: float,
    insecure: bool,
    exports: tuple[str, ...],
    export_filename: str | None,
    max_severity: str | None,
    plugin_filters: tuple[str, ...],
    severity_filter: str | None,
    prefix: str,
    suffix: str,
    verbosity: str,
) -> None:
    """Scan endpoints to check if services/files/folders are exposed.

    Exit code is 1 when hits are found, unless --max-severity is set and no
    hit reaches it. Invalid signatures or options exit with 2.
    """
    logger = _init_logging(verbosity)

    try:
        config = build_config(
            urls=urls,
            url_file=url_file,
            threads=threads,
            timeout=timeout,
            insecure=insecure,
            plugin_filters=plugin_filters,
            severity_filter=severity_filter,
            max_severity=max_severity,
            prefix=prefix,
            suffix=suffix,
            export=exports,
            export_filename=export_filename,
        )
    except ConfigError as e:
        raise ConfigurationFailed(str(e)) from e

    sigs = _load(signatures)

    scanner = Scanner(logger=logger.getChild("scanner"))
    with _cancel_on_signal(threading.Event(), logger) as cancel:
        result = scanner.scan(sigs, config, cancel_event=cancel)

    export_results(result.hits, config.export, config.export_filename, console=console)

    code = exit_code(result.hits, config.max_severity)
    if result.cancelled:
        code = 1
    ctx.exit(code)


@main.command()
@click.option(
    "--signatures", "-c", default="chopchop.yml", show_default=True,
    envvar="CHOPCHOP_SIGNATURES", help="Path to signature file",
)
@click.option("--severity", "-s", type=SEVERITY_CHOICE, default=None, help="Only list checks with this severity")
@click.option("--verbosity", "-v", default="warning", show_default=True, help="Log level (debug, info, warning, error)")
def plugins(signatures: str, severity: str | None, verbosity: str) -> None:
    """List checks of the signature file."""
    _init_logging(verbosity)
    sigs = _load(signatures)
    if severity:
        sigs = sigs.filter_by_severity(severity)
    RichReporter(console).report_plugins(sigs)


if __name__ == "__main__":
    main()
