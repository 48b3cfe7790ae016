"""Export Action - Hand scan results to the selected reporters.

The scan engine never writes files; this is the only place that does.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from rich.console import Console

from chopchop.actions.reporters import BaseReporter, CsvReporter, JsonReporter, RichReporter
from chopchop.model.hit import Hit

logger = logging.getLogger(__name__)

REPORTERS: dict[str, type[BaseReporter]] = {
    "stdout": RichReporter,
    "csv": CsvReporter,
    "json": JsonReporter,
}


def export_results(
    hits: list[Hit],
    formats: Iterable[str],
    filename: str,
    console: Console | None = None,
) -> list[Path]:
    """Render ``hits`` in every requested format.

    File formats are written to ``<filename>.<ext>``; stdout goes to
    ``console``. Returns the paths of the files written.
    """
    console = console or Console()
    written: list[Path] = []
    for fmt in formats:
        try:
            reporter_cls = REPORTERS[fmt]
        except KeyError:
            raise ValueError(f"Unknown export format: {fmt}") from None
        reporter = reporter_cls(console)
        if reporter.extension is None:
            reporter.report_hits(hits)
            continue
        path = Path(f"{filename}.{reporter.extension}")
        reporter.report_hits(hits, output_path=str(path))
        logger.info("Results exported to %s", path)
        written.append(path)
    return written
