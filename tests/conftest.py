"""Pytest configuration and fixtures for chopchop tests."""

import httpx
import pytest

SAMPLE_SIGNATURES = """
plugins:
  - endpoint: "/admin"
    checks:
      - name: Admin-Panel
        description: Admin login page is reachable
        remediation: Restrict access to /admin
        severity: High
        status_code: 200
        match:
          - "Login"
  - endpoints:
      - "/.git/config"
      - "/.git/HEAD"
    follow_redirects: false
    checks:
      - name: Git exposed
        description: Git repository is readable
        remediation: Deny access to /.git
        severity: Medium
        status_code: 200
  - endpoint: "/status"
    query_string: "full=true"
    checks:
      - name: Status page
        description: Status page is public
        remediation: Protect the status page
        severity: Low
      - name: Debug banner
        description: Debug banner shown
        remediation: Turn off debug mode
        severity: Informational
        all_match:
          - "DEBUG"
"""


@pytest.fixture
def sample_signatures_yaml() -> str:
    return SAMPLE_SIGNATURES


@pytest.fixture
def routes_transport():
    """Build a MockTransport answering from a routing table.

    Keys are full URLs or paths. Values are ``(status, body)`` or
    ``(status, body, headers)`` tuples. Anything else gets an empty 404.
    """

    def factory(routes: dict) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            entry = routes.get(str(request.url)) or routes.get(request.url.path)
            if entry is None:
                return httpx.Response(404, text="")
            status, body, *rest = entry
            headers = rest[0] if rest else {}
            return httpx.Response(status, text=body, headers=headers)

        return httpx.MockTransport(handler)

    return factory
