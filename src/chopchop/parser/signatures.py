"""Signature file parser.

Loads the YAML signature file, checks its shape with pydantic and converts
it into the frozen Signatures model. Expected layout::

    insecure: false
    plugins:
      - endpoint: "/.git/config"
        follow_redirects: false
        checks:
          - name: Git exposed
            description: Git repository is publicly readable
            remediation: Deny access to /.git
            severity: High
            status_code: 200
            match: ["[core]"]

Shape problems (wrong types, bad YAML) and missing mandatory check fields
are both reported as SignatureError before any request is sent.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from chopchop.model.signature import Check, Plugin, SignatureError, Signatures


def _as_str_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (str, int, float)):
        value = [value]
    if isinstance(value, list):
        return [str(v) if isinstance(v, (int, float)) else v for v in value]
    return value


class CheckSpec(BaseModel):
    """One entry of a plugin's ``checks`` list."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    description: Optional[str] = None
    remediation: Optional[str] = None
    severity: Optional[str] = None
    status_code: Optional[int] = None
    match: list[str] = Field(default_factory=list)
    all_match: list[str] = Field(default_factory=list)
    no_match: list[str] = Field(default_factory=list)
    headers: list[str] = Field(default_factory=list)
    no_headers: list[str] = Field(default_factory=list)

    @field_validator("match", "all_match", "no_match", "headers", "no_headers", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> Any:
        return _as_str_list(value)

    def to_check(self) -> Check:
        return Check(
            name=self.name.strip(),
            description=self.description,
            remediation=self.remediation,
            severity=self.severity,
            status_code=self.status_code,
            match=tuple(self.match),
            all_match=tuple(self.all_match),
            no_match=tuple(self.no_match),
            headers=tuple(self.headers),
            no_headers=tuple(self.no_headers),
        )


class PluginSpec(BaseModel):
    """One entry of the top-level ``plugins`` list."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    endpoint: Optional[str] = None
    endpoints: list[str] = Field(default_factory=list)
    query_string: Optional[str] = None
    follow_redirects: Optional[bool] = None
    checks: list[CheckSpec] = Field(default_factory=list)

    @field_validator("endpoints", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> Any:
        return _as_str_list(value)

    def to_plugin(self) -> Plugin:
        endpoints: list[str] = []
        for ep in ([self.endpoint] if self.endpoint else []) + self.endpoints:
            ep = ep.strip()
            if ep and ep not in endpoints:
                endpoints.append(ep)
        return Plugin(
            name=self.name.strip(),
            endpoints=tuple(endpoints),
            query_string=(self.query_string or "").strip().lstrip("?"),
            follow_redirects=self.follow_redirects is not False,
            checks=tuple(c.to_check() for c in self.checks),
        )


class SignatureFile(BaseModel):
    """Top-level document of a signature file."""

    model_config = ConfigDict(extra="ignore")

    insecure: bool = False
    plugins: list[PluginSpec] = Field(default_factory=list)

    def to_signatures(self) -> Signatures:
        return Signatures(
            plugins=tuple(p.to_plugin() for p in self.plugins),
            insecure=self.insecure,
        )


def parse_signatures(text: str, source: str = "<string>") -> Signatures:
    """Parse and validate signature YAML text.

    Raises:
        SignatureError: If the YAML is invalid, mistyped or incomplete.
    """
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SignatureError(f"Invalid YAML in {source}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise SignatureError(f"Invalid signature file {source}: expected a mapping with a 'plugins' list")

    try:
        document = SignatureFile.model_validate(raw)
    except ValidationError as e:
        raise SignatureError(f"Invalid signature file {source}:\n{_format_errors(e)}") from e

    signatures = document.to_signatures()
    signatures.validate()
    return signatures


def load_signatures(path: str | Path) -> Signatures:
    """Read, parse and validate a signature file from disk."""
    sig_file = Path(path).expanduser()
    try:
        text = sig_file.read_text(encoding="utf-8")
    except OSError as e:
        raise SignatureError(f"Cannot read signature file {sig_file}: {e}") from e
    return parse_signatures(text, source=str(sig_file))


def _format_errors(error: ValidationError) -> str:
    lines = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ()))
        lines.append(f"  {location}: {item.get('msg', 'invalid value')}")
    return "\n".join(lines)
