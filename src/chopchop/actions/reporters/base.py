"""Base Reporter Interface."""

from abc import ABC, abstractmethod

from rich.console import Console

from chopchop.model.hit import Hit


class BaseReporter(ABC):
    """Abstract base class for all hit reporters."""

    #: File extension for reporters that write to disk, None for the console.
    extension: str | None = None

    def __init__(self, console: Console) -> None:
        self.console = console

    @abstractmethod
    def report_hits(self, hits: list[Hit], output_path: str | None = None) -> None:
        """Render hits to the console or to ``output_path``."""
        ...
