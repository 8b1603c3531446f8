"""Single-shot HTTP probing via httpx."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone

import httpx

from sitewatch.config import PollConfig
from sitewatch.models.runtime import Observation

logger = logging.getLogger("sitewatch.prober")

CONNECTION_ERROR_LABEL = "Connection Error"
UNKNOWN_STATUS_LABEL = "Unknown Status"

_STATUS_LABELS: dict[int, str] = {
    200: "OK",
    301: "Moved Permanently",
    302: "Found",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


def status_label(code: int) -> str:
    """Map an HTTP status code to its dashboard label."""
    return _STATUS_LABELS.get(code, UNKNOWN_STATUS_LABEL)


def probe(client: httpx.Client, target: str) -> Observation:
    """GET ``target`` once and classify the outcome. Never raises for network failures."""
    started_at = datetime.now(timezone.utc)
    start = time.perf_counter()
    try:
        # Body is never read; closing the stream discards it.
        with client.stream("GET", target) as response:
            elapsed = timedelta(seconds=time.perf_counter() - start)
            code = response.status_code
    except (httpx.RequestError, httpx.InvalidURL) as exc:
        logger.warning("Error checking %s: %r", target, exc)
        return Observation(
            status_code=0,
            status_label=CONNECTION_ERROR_LABEL,
            observed_at=started_at,
            latency=timedelta(0),
        )

    label = status_label(code)
    logger.info("Checked %s - Status: %s, Response time: %s", target, label, elapsed)
    return Observation(
        status_code=code,
        status_label=label,
        observed_at=started_at,
        latency=elapsed,
    )


class Prober:
    """Owns an httpx client and probes targets with it."""

    def __init__(
        self,
        config: PollConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        config = config or PollConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=config.timeout_seconds,
            follow_redirects=config.follow_redirects,
        )

    def __call__(self, target: str) -> Observation:
        return probe(self._client, target)

    def __enter__(self) -> Prober:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
