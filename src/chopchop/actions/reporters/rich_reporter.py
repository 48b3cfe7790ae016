"""Rich Reporter Implementation."""

from rich.markup import escape
from rich.table import Table

from chopchop.actions.reporters.base import BaseReporter
from chopchop.model.hit import Hit
from chopchop.model.severity import Severity
from chopchop.model.signature import Signatures

SEVERITY_STYLES = {
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
    Severity.INFORMATIONAL: "dim",
}


class RichReporter(BaseReporter):
    """Terminal table output using Rich."""

    def report_hits(self, hits: list[Hit], output_path: str | None = None) -> None:
        """Print one row per hit, with a total in the footer."""
        if not hits:
            self.console.print("[green]No vulnerabilities found.[/]")
            return

        table = Table(show_header=True, header_style="bold white", show_footer=True)
        table.add_column("Domain")
        table.add_column("Plugin Name")
        table.add_column("Severity", footer="Total")
        table.add_column("Tested URL", footer=str(len(hits)))
        table.add_column("Remediation")

        for hit in hits:
            style = SEVERITY_STYLES.get(hit.severity, "white")
            table.add_row(
                escape(hit.domain),
                escape(hit.plugin_name),
                f"[{style}]{hit.severity.value}[/]",
                escape(hit.url),
                escape(hit.remediation),
            )

        self.console.print(table)

    def report_plugins(self, signatures: Signatures) -> int:
        """List every check of ``signatures``. Returns the number listed."""
        table = Table(show_header=True, header_style="bold white", show_footer=True)
        table.add_column("URL")
        table.add_column("Plugin Name")
        table.add_column("Severity", footer="Total Checks")
        table.add_column("Description", footer=str(signatures.checks_count))

        for plugin, check in signatures.iter_checks():
            table.add_row(
                escape(", ".join(plugin.endpoints)),
                escape(check.name),
                escape(check.severity or ""),
                escape(check.description or ""),
            )

        self.console.print(table)
        return signatures.checks_count
