"""HTTP prober - One GET per URL, failures reported as "no response"."""

from __future__ import annotations

import logging
import time

import httpx

from chopchop import __version__
from chopchop.model.probe import ProbeResponse

USER_AGENT = f"chopchop/{__version__}"


class HttpProber:
    """Sends probe requests through a single shared httpx client.

    Redirect handling is decided per request so each plugin can opt out.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        insecure: bool = False,
        transport: httpx.BaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.timeout = timeout
        self.client = httpx.Client(
            verify=not insecure,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    def __enter__(self) -> "HttpProber":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def fetch(self, url: str, follow_redirects: bool = True) -> ProbeResponse | None:
        """GET ``url``. Returns None on timeout or any transport failure.

        ``timeout`` bounds the whole request, body included, not only each
        individual network read.
        """
        deadline = time.monotonic() + self.timeout
        try:
            with self.client.stream("GET", url, follow_redirects=follow_redirects) as resp:
                chunks: list[bytes] = []
                for chunk in resp.iter_bytes():
                    chunks.append(chunk)
                    if time.monotonic() > deadline:
                        self.logger.warning("Timeout of HTTP request to %s: body not received within %ss", url, self.timeout)
                        return None
                body = b"".join(chunks).decode(resp.encoding or "utf-8", errors="replace")
        except httpx.TimeoutException as e:
            self.logger.warning("Timeout of HTTP request to %s: %s", url, e)
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.warning("HTTP request to %s failed: %s", url, e)
            return None

        headers: dict[str, list[str]] = {}
        for raw_name, raw_value in resp.headers.raw:
            name = raw_name.decode("latin-1")
            headers.setdefault(name, []).append(raw_value.decode("latin-1"))

        return ProbeResponse(
            status_code=resp.status_code,
            body=body,
            headers=headers,
            url=str(resp.url),
        )
