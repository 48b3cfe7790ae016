"""CSV Reporter Implementation."""

import csv
import io

from chopchop.actions.reporters.base import BaseReporter
from chopchop.model.hit import Hit

HEADER = ["Domain", "Plugin Name", "Endpoint", "URL", "Severity", "Remediation"]


class CsvReporter(BaseReporter):
    """Spreadsheet-friendly CSV export, one row per hit."""

    extension = "csv"

    def report_hits(self, hits: list[Hit], output_path: str | None = None) -> None:
        if output_path is None:
            buffer = io.StringIO()
            self._write(buffer, hits)
            self.console.print(buffer.getvalue(), end="", markup=False, highlight=False)
            return
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            self._write(f, hits)

    @staticmethod
    def _write(stream, hits: list[Hit]) -> None:
        writer = csv.writer(stream)
        writer.writerow(HEADER)
        for hit in hits:
            writer.writerow(
                [hit.domain, hit.plugin_name, hit.endpoint, hit.url, hit.severity.value, hit.remediation]
            )
