"""Run configuration for a single scan.

The CLI collects raw option values and hands them to build_config(), which
validates them and returns an immutable RunConfig. Nothing here touches the
network.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from chopchop.model.severity import Severity

EXPORT_FORMATS = ("stdout", "csv", "json")


class ConfigError(ValueError):
    """Raised when the run configuration is invalid."""


@dataclass(frozen=True)
class RunConfig:
    """Everything a scan needs besides the signatures.

    Attributes:
        targets: Domains or base URLs to probe.
        threads: Maximum number of requests in flight at once.
        timeout: Per-request timeout in seconds.
        insecure: Skip TLS certificate verification.
        plugin_filters: Keep only checks whose name contains one of these.
        severity_filter: Keep only checks with exactly this severity.
        max_severity: CI blocking threshold. None never blocks.
        prefix: Prepended to every target when building URLs.
        suffix: Appended to every target before the endpoint.
        export: Output formats (stdout, csv, json).
        export_filename: Base filename for file exports, without extension.
    """

    targets: tuple[str, ...]
    threads: int = 1
    timeout: float = 10.0
    insecure: bool = False
    plugin_filters: tuple[str, ...] = ()
    severity_filter: Severity | None = None
    max_severity: Severity | None = None
    prefix: str = ""
    suffix: str = ""
    export: tuple[str, ...] = ("stdout",)
    export_filename: str = field(default_factory=lambda: default_export_filename())


def default_export_filename() -> str:
    return "chopchop_" + datetime.datetime.now().strftime("%Y%m%d-%H%M%S")


def load_targets(path: str | Path) -> list[str]:
    """Read one domain per line, skipping blank lines and ``#`` comments."""
    target_file = Path(path).expanduser()
    try:
        content = target_file.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read URL file {target_file}: {e}") from e

    targets: list[str] = []
    for line in content.splitlines():
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        targets.append(text)
    return targets


def parse_severity(value: str | None, option: str) -> Severity | None:
    if value is None or not value.strip():
        return None
    try:
        return Severity.parse(value)
    except ValueError as e:
        raise ConfigError(f"Invalid {option}: {e}") from e


def build_config(
    urls: Iterable[str] = (),
    url_file: str | None = None,
    threads: int = 1,
    timeout: float = 10.0,
    insecure: bool = False,
    plugin_filters: Iterable[str] = (),
    severity_filter: str | None = None,
    max_severity: str | None = None,
    prefix: str = "",
    suffix: str = "",
    export: Iterable[str] = ("stdout",),
    export_filename: str | None = None,
) -> RunConfig:
    """Validate raw option values and build a RunConfig.

    Raises:
        ConfigError: If no target is given or an option is out of range.
    """
    targets = [u.strip() for u in urls if u and u.strip()]
    if url_file:
        targets.extend(load_targets(url_file))
    # Keep first occurrence order
    targets = list(dict.fromkeys(targets))
    if not targets:
        raise ConfigError("No URL to scan. Pass URLs as arguments or use --url-file.")

    if threads < 1:
        raise ConfigError(f"Invalid threads value {threads}: must be at least 1.")
    if timeout <= 0:
        raise ConfigError(f"Invalid timeout value {timeout}: must be positive.")

    formats = tuple(dict.fromkeys(f.strip().lower() for f in export if f and f.strip()))
    unknown = [f for f in formats if f not in EXPORT_FORMATS]
    if unknown:
        raise ConfigError(
            f"Unknown export format(s): {', '.join(unknown)}. Valid formats: {', '.join(EXPORT_FORMATS)}."
        )

    return RunConfig(
        targets=tuple(targets),
        threads=threads,
        timeout=float(timeout),
        insecure=insecure,
        plugin_filters=tuple(f for f in plugin_filters if f),
        severity_filter=parse_severity(severity_filter, "severity filter"),
        max_severity=parse_severity(max_severity, "max severity"),
        prefix=prefix or "",
        suffix=suffix or "",
        export=formats or ("stdout",),
        export_filename=export_filename or default_export_filename(),
    )
