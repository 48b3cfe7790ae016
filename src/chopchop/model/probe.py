"""Probe response - What the matcher sees of one HTTP response."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ProbeResponse:
    """Status, headers and decoded body of a single probe.

    ``headers`` maps each header name, as received, to all of its values.
    """

    status_code: int
    body: str = ""
    headers: dict[str, list[str]] = field(default_factory=dict)
    url: str = ""

    def header_values(self, name: str) -> list[str] | None:
        """Return every value of header ``name``, or None if it is absent.

        Field names are compared case-insensitively.
        """
        wanted = name.strip().lower()
        found: list[str] | None = None
        for key, values in self.headers.items():
            if key.lower() == wanted:
                found = (found or []) + list(values)
        return found
