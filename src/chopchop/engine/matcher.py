"""Response matcher - Decides whether one check matches one probe response.

All configured conditions are conjunctive. Conditions that are not set
(no status code, empty lists) never cause a failure. Evaluation stops at
the first failing condition. Header names are compared case-insensitively,
whatever case the server used.
"""

from chopchop.model.probe import ProbeResponse
from chopchop.model.signature import Check


def match(check: Check, response: ProbeResponse) -> bool:
    """Return True if ``response`` satisfies every condition of ``check``."""
    if check.status_code is not None and response.status_code != check.status_code:
        return False

    body = response.body

    if not all(needle in body for needle in check.all_match):
        return False

    if check.match and not any(needle in body for needle in check.match):
        return False

    if any(needle in body for needle in check.no_match):
        return False

    for entry in check.headers:
        name, value = split_header_rule(entry)
        values = response.header_values(name)
        if values is None:
            return False
        if value and not any(value in v for v in values):
            return False

    # A forbidden header fails the check as soon as it is present,
    # whatever its value.
    for entry in check.no_headers:
        name, _ = split_header_rule(entry)
        if response.header_values(name) is not None:
            return False

    return True


def split_header_rule(entry: str) -> tuple[str, str]:
    """Split a ``name:substring`` rule on its first colon."""
    name, _, value = entry.partition(":")
    return name.strip(), value.strip()
