"""Tests for the scan orchestrator.

Uses httpx.MockTransport as a fake web server so no network is needed.
"""

import dataclasses
import threading
import time

import httpx

from chopchop.config import build_config
from chopchop.model.severity import Severity
from chopchop.model.signature import Check, Plugin, Signatures
from chopchop.parser.signatures import parse_signatures
from chopchop.scanner.http_probe import HttpProber
from chopchop.scanner.orchestrator import Scanner, build_targets, build_url


def _admin_signatures() -> Signatures:
    check = Check(
        name="Admin panel",
        description="Admin login page is reachable",
        remediation="Restrict access to /admin",
        severity="High",
        status_code=200,
        match=("Login",),
    )
    return Signatures(plugins=(Plugin(endpoints=("/admin",), checks=(check,)),))


def _many_endpoints(count: int) -> Signatures:
    check = Check(name="Any", description="d", remediation="r", severity="Low")
    endpoints = tuple(f"/path-{i}" for i in range(count))
    return Signatures(plugins=(Plugin(endpoints=endpoints, checks=(check,)),))


def test_build_url_joins_parts():
    assert build_url("", "https://example.com", "", "/admin") == "https://example.com/admin"
    assert build_url("https://", "example.com", ":8443", "/x", "a=1") == "https://example.com:8443/x?a=1"
    assert build_url("", "https://example.com/", "", "/admin") == "https://example.com/admin"


def test_build_targets_expands_domain_plugin_endpoint(sample_signatures_yaml):
    sigs = parse_signatures(sample_signatures_yaml)
    targets = build_targets(["https://a.test", "https://b.test"], sigs)
    # 3 plugins with 1 + 2 + 1 endpoints, for 2 domains
    assert len(targets) == 8
    urls = {t.url for t in targets}
    assert "https://a.test/.git/HEAD" in urls
    assert "https://b.test/status?full=true" in urls


def test_scan_reports_hit_for_matching_response(routes_transport):
    transport = routes_transport({"https://open.test/admin": (200, "<form>Login</form>")})
    config = build_config(urls=["https://open.test", "https://closed.test"])

    result = Scanner(transport=transport).scan(_admin_signatures(), config)

    assert len(result.hits) == 1
    hit = result.hits[0]
    assert hit.domain == "https://open.test"
    assert hit.plugin_name == "Admin panel"
    assert hit.url == "https://open.test/admin"
    assert hit.endpoint == "/admin"
    assert hit.severity is Severity.HIGH
    assert hit.remediation == "Restrict access to /admin"
    assert result.probed == 2
    assert result.failed == 0
    assert result.cancelled is False


def test_scan_404_yields_no_hit(routes_transport):
    transport = routes_transport({"https://x.test/admin": (404, "Login")})
    config = build_config(urls=["https://x.test"])
    result = Scanner(transport=transport).scan(_admin_signatures(), config)
    assert result.hits == []
    assert result.hit is False


def test_scan_evaluates_every_check_of_the_plugin(routes_transport):
    checks = (
        Check(name="Any 200", description="d", remediation="r", severity="Low", status_code=200),
        Check(name="Body", description="d", remediation="r", severity="Medium", match=("secret",)),
        Check(name="Never", description="d", remediation="r", severity="High", match=("nope",)),
    )
    sigs = Signatures(plugins=(Plugin(endpoints=("/env",), checks=checks),))
    transport = routes_transport({"/env": (200, "secret=1")})

    result = Scanner(transport=transport).scan(sigs, build_config(urls=["https://x.test"]))

    assert [h.plugin_name for h in result.hits] == ["Body", "Any 200"]


def test_scan_applies_prefix_suffix_and_query_string(sample_signatures_yaml):
    seen: list[str] = []
    lock = threading.Lock()

    def handler(request: httpx.Request) -> httpx.Response:
        with lock:
            seen.append(str(request.url))
        return httpx.Response(404)

    config = build_config(urls=["example.com"], prefix="https://", suffix=":8443")
    Scanner(transport=httpx.MockTransport(handler)).scan(parse_signatures(sample_signatures_yaml), config)

    assert sorted(seen) == sorted(
        [
            "https://example.com:8443/admin",
            "https://example.com:8443/.git/config",
            "https://example.com:8443/.git/HEAD",
            "https://example.com:8443/status?full=true",
        ]
    )


def test_scan_applies_run_filters(sample_signatures_yaml):
    seen: list[str] = []
    lock = threading.Lock()

    def handler(request: httpx.Request) -> httpx.Response:
        with lock:
            seen.append(request.url.path)
        return httpx.Response(200, text="")

    config = build_config(urls=["https://x.test"], severity_filter="Medium")
    result = Scanner(transport=httpx.MockTransport(handler)).scan(
        parse_signatures(sample_signatures_yaml), config
    )

    assert sorted(seen) == ["/.git/HEAD", "/.git/config"]
    assert {h.plugin_name for h in result.hits} == {"Git exposed"}


def test_plugin_can_disable_redirect_following(routes_transport):
    redirect = (302, "", {"Location": "https://x.test/login"})
    transport = routes_transport({"/a": redirect, "/b": redirect, "/login": (200, "Login")})
    no_follow = Check(name="Redirects", description="d", remediation="r", severity="Low", status_code=302)
    follow = Check(name="Lands on login", description="d", remediation="r", severity="Low", match=("Login",))
    sigs = Signatures(
        plugins=(
            Plugin(endpoints=("/a",), checks=(no_follow,), follow_redirects=False),
            Plugin(endpoints=("/b",), checks=(follow,)),
        )
    )

    result = Scanner(transport=transport).scan(sigs, build_config(urls=["https://x.test"]))

    assert sorted(h.plugin_name for h in result.hits) == ["Lands on login", "Redirects"]


def test_network_errors_do_not_abort_the_scan():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "down.test":
            raise httpx.ConnectError("connection refused", request=request)
        if request.url.host == "slow.test":
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200, text="Login")

    config = build_config(urls=["https://down.test", "https://slow.test", "https://up.test"], threads=3)
    result = Scanner(transport=httpx.MockTransport(handler)).scan(_admin_signatures(), config)

    assert [h.domain for h in result.hits] == ["https://up.test"]
    assert result.probed == 3
    assert result.failed == 2


def test_slow_body_is_cut_at_timeout_and_yields_no_hit():
    def dripping():
        for byte in b"Login-secret":
            time.sleep(0.1)
            yield bytes([byte])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=dripping())

    config = build_config(urls=["https://slow.test"], timeout=0.4)
    start = time.monotonic()
    result = Scanner(transport=httpx.MockTransport(handler)).scan(_admin_signatures(), config)
    elapsed = time.monotonic() - start

    assert result.hits == []
    assert result.failed == 1
    assert elapsed < 1.0


def _record_insecure(monkeypatch) -> list[bool]:
    seen: list[bool] = []

    class RecordingProber(HttpProber):
        def __init__(self, **kwargs):
            seen.append(kwargs["insecure"])
            super().__init__(**kwargs)

    monkeypatch.setattr("chopchop.scanner.orchestrator.HttpProber", RecordingProber)
    return seen


def test_insecure_flag_turns_off_tls_verification(monkeypatch):
    seen = _record_insecure(monkeypatch)
    transport = httpx.MockTransport(lambda request: httpx.Response(404))

    Scanner(transport=transport).scan(_admin_signatures(), build_config(urls=["https://x.test"]))
    Scanner(transport=transport).scan(_admin_signatures(), build_config(urls=["https://x.test"], insecure=True))

    assert seen == [False, True]


def test_insecure_signature_file_turns_off_tls_verification(monkeypatch):
    seen = _record_insecure(monkeypatch)
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    sigs = dataclasses.replace(_admin_signatures(), insecure=True)

    Scanner(transport=transport).scan(sigs, build_config(urls=["https://x.test"]))

    assert seen == [True]


def test_concurrency_never_exceeds_thread_limit():
    lock = threading.Lock()
    state = {"in_flight": 0, "max": 0}
    delay = 0.1

    def handler(request: httpx.Request) -> httpx.Response:
        with lock:
            state["in_flight"] += 1
            state["max"] = max(state["max"], state["in_flight"])
        time.sleep(delay)
        with lock:
            state["in_flight"] -= 1
        return httpx.Response(200, text="")

    config = build_config(urls=["https://x.test"], threads=2)
    start = time.monotonic()
    result = Scanner(transport=httpx.MockTransport(handler)).scan(_many_endpoints(10), config)
    elapsed = time.monotonic() - start

    assert len(result.hits) == 10
    assert state["max"] <= 2
    # 10 requests, 2 at a time: at least 5 rounds of `delay`
    assert elapsed >= 5 * delay * 0.9


def test_cancellation_returns_partial_results_promptly():
    delay = 0.3

    def handler(request: httpx.Request) -> httpx.Response:
        time.sleep(delay)
        return httpx.Response(200, text="")

    cancel = threading.Event()
    timer = threading.Timer(delay * 1.5, cancel.set)
    config = build_config(urls=["https://x.test"], threads=1)

    timer.start()
    start = time.monotonic()
    try:
        result = Scanner(transport=httpx.MockTransport(handler)).scan(
            _many_endpoints(10), config, cancel_event=cancel
        )
    finally:
        timer.cancel()
    elapsed = time.monotonic() - start

    assert result.cancelled is True
    assert elapsed < 10 * delay / 2
    assert 1 <= len(result.hits) < 10


def test_cancel_before_start_sends_nothing():
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200)

    cancel = threading.Event()
    cancel.set()
    result = Scanner(transport=httpx.MockTransport(handler)).scan(
        _many_endpoints(5), build_config(urls=["https://x.test"], threads=2), cancel_event=cancel
    )

    assert result.cancelled is True
    assert result.hits == []
    assert len(calls) <= 2
