"""Blocking policy.

Decides whether a scan should fail a CI pipeline:
- No threshold configured: never block, but any hit still exits non-zero.
- Threshold configured: block when the worst hit is at or above it.
- No hits: always exit 0.
"""

from __future__ import annotations

from typing import Iterable

from chopchop.model.hit import Hit
from chopchop.model.severity import Severity


def max_severity(hits: Iterable[Hit]) -> Severity | None:
    """Highest severity among ``hits``, or None when there are none."""
    return max((h.severity for h in hits), default=None)


def should_block(threshold: Severity | str | None, severities: Iterable[Severity]) -> bool:
    """True when ``threshold`` is set and reached by one of ``severities``."""
    if threshold is None or threshold == "":
        return False
    level = Severity.parse(threshold)
    worst = max(severities, default=None)
    return worst is not None and worst >= level


def exit_code(hits: list[Hit], threshold: Severity | str | None) -> int:
    """Process exit code for a finished scan."""
    if not hits:
        return 0
    if threshold is None or threshold == "":
        return 1
    return 1 if should_block(threshold, (h.severity for h in hits)) else 0
