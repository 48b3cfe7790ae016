"""Reporter implementations, one per export format."""

from chopchop.actions.reporters.base import BaseReporter
from chopchop.actions.reporters.csv_reporter import CsvReporter
from chopchop.actions.reporters.json_reporter import JsonReporter
from chopchop.actions.reporters.rich_reporter import RichReporter

__all__ = ["BaseReporter", "CsvReporter", "JsonReporter", "RichReporter"]
