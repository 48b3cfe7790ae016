"""JSON Reporter Implementation."""

import json
from pathlib import Path

from chopchop.actions.reporters.base import BaseReporter
from chopchop.model.hit import Hit


class JsonReporter(BaseReporter):
    """Machine-readable JSON export, hits grouped per domain."""

    extension = "json"

    def report_hits(self, hits: list[Hit], output_path: str | None = None) -> None:
        data = self.to_document(hits)
        text = json.dumps(data, indent=2)
        if output_path is None:
            self.console.print(text, markup=False, highlight=False)
            return
        Path(output_path).write_text(text + "\n", encoding="utf-8")

    @staticmethod
    def to_document(hits: list[Hit]) -> dict:
        domains: dict[str, list[dict[str, str]]] = {}
        for hit in hits:
            domains.setdefault(hit.domain, []).append(hit.to_dict())
        return {
            "domains": [
                {"domain": domain, "hits": domain_hits}
                for domain, domain_hits in domains.items()
            ]
        }
