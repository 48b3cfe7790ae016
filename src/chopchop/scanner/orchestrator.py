"""Scan orchestrator - Fans probe requests out over a bounded worker pool.

Each unit of work probes one URL and evaluates every check of the plugin
that produced it. The worker pool size is the concurrency limit: at most
``threads`` requests are ever in flight. Hits are handed to a single
ResultCollector, the only state shared between workers.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Iterable

import httpx

from chopchop.config import RunConfig
from chopchop.engine.aggregator import ResultCollector
from chopchop.engine.matcher import match
from chopchop.model.hit import Hit
from chopchop.model.signature import Plugin, Signatures
from chopchop.scanner.http_probe import HttpProber


@dataclass(frozen=True)
class ScanTarget:
    domain: str
    plugin: Plugin
    endpoint: str
    url: str


@dataclass
class ScanResult:
    """Outcome of one scan."""

    hits: list[Hit] = field(default_factory=list)
    elapsed: float = 0.0
    probed: int = 0
    failed: int = 0
    cancelled: bool = False

    @property
    def hit(self) -> bool:
        return bool(self.hits)


def build_url(prefix: str, domain: str, suffix: str, endpoint: str, query_string: str = "") -> str:
    base = f"{prefix}{domain}{suffix}"
    if base.endswith("/") and endpoint.startswith("/"):
        base = base[:-1]
    url = base + endpoint
    if query_string:
        url += "?" + query_string
    return url


def build_targets(
    domains: Iterable[str],
    signatures: Signatures,
    prefix: str = "",
    suffix: str = "",
) -> list[ScanTarget]:
    """Expand domain x plugin x endpoint into the list of URLs to probe."""
    targets: list[ScanTarget] = []
    for domain in domains:
        for plugin in signatures.plugins:
            for endpoint in plugin.endpoints:
                targets.append(
                    ScanTarget(
                        domain=domain,
                        plugin=plugin,
                        endpoint=endpoint,
                        url=build_url(prefix, domain, suffix, endpoint, plugin.query_string),
                    )
                )
    return targets


def prepare_signatures(signatures: Signatures, config: RunConfig) -> Signatures:
    """Apply the run's severity and name filters."""
    if config.severity_filter is not None:
        signatures = signatures.filter_by_severity(config.severity_filter)
    if config.plugin_filters:
        signatures = signatures.filter_by_names(config.plugin_filters)
    return signatures


class Scanner:
    """Runs a scan of every target against every plugin."""

    POLL_INTERVAL = 0.05

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)

    def scan(
        self,
        signatures: Signatures,
        config: RunConfig,
        cancel_event: threading.Event | None = None,
    ) -> ScanResult:
        """Probe all targets and collect hits.

        Setting ``cancel_event`` stops launching new probes; the call then
        returns promptly with the hits collected so far.
        """
        start = time.monotonic()
        cancel = cancel_event or threading.Event()
        signatures = prepare_signatures(signatures, config)
        targets = build_targets(config.targets, signatures, config.prefix, config.suffix)
        insecure = config.insecure or signatures.insecure
        if insecure:
            self.logger.info("Launching scan without validating the SSL certificate")
        self.logger.info(
            "Scanning %d URL(s): %d target(s), %d check(s), %d thread(s)",
            len(targets), len(config.targets), signatures.checks_count, config.threads,
        )

        collector = ResultCollector()
        result = ScanResult()
        prober = HttpProber(
            timeout=config.timeout,
            insecure=insecure,
            transport=self.transport,
            logger=self.logger,
        )
        executor = ThreadPoolExecutor(max_workers=config.threads, thread_name_prefix="chopchop-probe")
        try:
            pending: set[Future] = {
                executor.submit(self._probe, prober, target, collector, cancel)
                for target in targets
            }
            while pending and not cancel.is_set():
                done, pending = wait(pending, timeout=self.POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for future in done:
                    outcome = future.result()
                    if outcome is None:
                        continue
                    result.probed += 1
                    if not outcome:
                        result.failed += 1
        finally:
            result.cancelled = cancel.is_set()
            executor.shutdown(wait=not result.cancelled, cancel_futures=True)
            if not result.cancelled:
                prober.close()

        if result.cancelled:
            self.logger.warning("Scan cancelled, returning partial results")
        result.hits = collector.snapshot()
        result.elapsed = time.monotonic() - start
        self.logger.info("Scan execution time: %.3fs", result.elapsed)
        return result

    def _probe(
        self,
        prober: HttpProber,
        target: ScanTarget,
        collector: ResultCollector,
        cancel: threading.Event,
    ) -> bool | None:
        """Probe one URL. Returns None if skipped, False on network failure."""
        if cancel.is_set():
            return None
        self.logger.debug("Testing URL: %s", target.url)
        response = prober.fetch(target.url, follow_redirects=target.plugin.follow_redirects)
        if cancel.is_set():
            return None
        if response is None:
            return False

        hits = []
        for check in target.plugin.checks:
            if not match(check, response):
                continue
            hit = Hit(
                domain=target.domain,
                plugin_name=check.name,
                endpoint=target.endpoint,
                url=target.url,
                severity=check.level,
                remediation=check.remediation or "",
                description=check.description or "",
            )
            self.logger.info(
                "Hit found: %s on %s (severity %s)", hit.plugin_name, hit.url, hit.severity.value
            )
            hits.append(hit)
        collector.extend(hits)
        return True
