"""Hit dataclass - Evidence that a check matched a probed URL."""

from dataclasses import dataclass

from chopchop.model.severity import Severity


@dataclass(frozen=True)
class Hit:
    """A check that matched the response of one tested URL.

    Attributes:
        domain: Target domain as supplied by the user.
        plugin_name: Name of the matching check.
        endpoint: Endpoint path of the plugin that was probed.
        url: Full URL that was requested.
        severity: Severity of the matching check.
        remediation: Remediation text of the matching check.
        description: Description of the matching check.
    """

    domain: str
    plugin_name: str
    endpoint: str
    url: str
    severity: Severity
    remediation: str
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "domain": self.domain,
            "plugin_name": self.plugin_name,
            "endpoint": self.endpoint,
            "url": self.url,
            "severity": self.severity.value,
            "remediation": self.remediation,
            "description": self.description,
        }
