"""Result aggregator - The single point where workers hand in hits."""

from __future__ import annotations

import threading

from chopchop.model.hit import Hit


class ResultCollector:
    """Thread-safe, append-only collection of hits."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hits: list[Hit] = []

    def add(self, hit: Hit) -> None:
        with self._lock:
            self._hits.append(hit)

    def extend(self, hits: list[Hit]) -> None:
        with self._lock:
            self._hits.extend(hits)

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)

    def snapshot(self) -> list[Hit]:
        """Hits collected so far, in final presentation order."""
        with self._lock:
            hits = list(self._hits)
        return sort_hits(hits)


def sort_hits(hits: list[Hit]) -> list[Hit]:
    """Order by domain, worst severity first, then check name and URL."""
    return sorted(hits, key=lambda h: (h.domain, -h.severity.rank, h.plugin_name, h.url))
