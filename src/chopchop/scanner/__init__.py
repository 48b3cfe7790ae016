"""Scanner package - Sends probe requests and collects hits.

Scanners only fetch and dispatch. Deciding whether a response is a hit is
the matcher's job.
"""

from chopchop.scanner.http_probe import HttpProber
from chopchop.scanner.orchestrator import ScanResult, ScanTarget, Scanner, build_targets

__all__ = ["HttpProber", "ScanResult", "ScanTarget", "Scanner", "build_targets"]
