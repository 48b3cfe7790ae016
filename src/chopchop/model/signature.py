"""Signature model - Plugins, checks and the filters applied before a scan.

A Signatures object is never mutated by filtering. Every filter builds a
fresh Signatures so the loaded rule set can be shared between scans.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator

from chopchop.model.severity import Severity


class SignatureError(ValueError):
    """Raised when a signature file is malformed or incomplete."""


@dataclass(frozen=True)
class Check:
    """A single rule evaluated against one HTTP response.

    Attributes:
        name: Check name, also reported as the plugin name of a hit.
        description: What an exposure of this kind means.
        remediation: How to fix it.
        severity: Severity label as written in the signature file.
        status_code: Exact status code required, if any.
        match: At least one entry must appear in the body.
        all_match: Every entry must appear in the body.
        no_match: No entry may appear in the body.
        headers: ``name:substring`` entries that must be present.
        no_headers: ``name:substring`` entries whose header must be absent.
    """

    name: str
    description: str | None = None
    remediation: str | None = None
    severity: str | None = None
    status_code: int | None = None
    match: tuple[str, ...] = ()
    all_match: tuple[str, ...] = ()
    no_match: tuple[str, ...] = ()
    headers: tuple[str, ...] = ()
    no_headers: tuple[str, ...] = ()

    @property
    def level(self) -> Severity:
        """Parsed severity. Only safe on validated signatures."""
        return Severity.parse(self.severity or "")


@dataclass(frozen=True)
class Plugin:
    """A group of checks sharing the same endpoint(s)."""

    endpoints: tuple[str, ...]
    checks: tuple[Check, ...] = ()
    name: str = ""
    query_string: str = ""
    follow_redirects: bool = True

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        return ", ".join(self.endpoints) or "<no endpoint>"


@dataclass(frozen=True)
class Signatures:
    """The full rule set loaded for a scan."""

    plugins: tuple[Plugin, ...] = field(default_factory=tuple)
    insecure: bool = False

    @property
    def checks_count(self) -> int:
        return sum(len(p.checks) for p in self.plugins)

    def iter_checks(self) -> Iterator[tuple[Plugin, Check]]:
        for plugin in self.plugins:
            for check in plugin.checks:
                yield plugin, check

    def filter_by_severity(self, level: Severity | str) -> Signatures:
        """Keep only checks whose severity is exactly ``level``."""
        wanted = Severity.parse(level)

        def keep(check: Check) -> bool:
            try:
                return check.level == wanted
            except ValueError:
                return False

        return self._filter_checks(keep)

    def filter_by_names(self, names: Iterable[str]) -> Signatures:
        """Keep only checks whose name contains one of ``names`` (case-insensitive)."""
        needles = [n.lower() for n in names if n]
        if not needles:
            return self
        return self._filter_checks(
            lambda check: any(n in check.name.lower() for n in needles)
        )

    def _filter_checks(self, keep) -> Signatures:
        plugins: list[Plugin] = []
        for plugin in self.plugins:
            checks = tuple(c for c in plugin.checks if keep(c))
            if checks:
                plugins.append(replace(plugin, checks=checks))
        return replace(self, plugins=tuple(plugins))

    def validate(self) -> None:
        """Ensure every check carries the mandatory fields.

        Raises:
            SignatureError: On the first incomplete check, naming the plugin
                and check.
        """
        for plugin in self.plugins:
            if not plugin.endpoints:
                raise SignatureError(f"Plugin {plugin.label!r} has no endpoint. Stopping execution.")
            for check in plugin.checks:
                where = f"check {check.name!r} of plugin {plugin.label!r}"
                if not check.name:
                    raise SignatureError(f"Missing name field in plugin {plugin.label!r} checks. Stopping execution.")
                if check.description is None:
                    raise SignatureError(f"Missing description field in {where}. Stopping execution.")
                if check.remediation is None:
                    raise SignatureError(f"Missing remediation field in {where}. Stopping execution.")
                if check.severity is None:
                    raise SignatureError(f"Missing severity field in {where}. Stopping execution.")
                try:
                    Severity.parse(check.severity)
                except ValueError as e:
                    raise SignatureError(f"{e} ({where})") from e
