"""Credential-free backend liveness checks with their own short timeout."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import time

import httpx

from dashboard_client.core.config import DEFAULT_HEALTH_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

HEALTH_PATH = "/health"


async def _get_health(
    base_url: str,
    *,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.Response:
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        return await asyncio.wait_for(
            client.get(f"{base_url.rstrip('/')}{HEALTH_PATH}"),
            timeout=timeout,
        )


async def check_api_health(
    base_url: str,
    *,
    timeout: float = DEFAULT_HEALTH_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Return True when the backend health route answers 2xx."""
    try:
        response = await _get_health(base_url, timeout=timeout, transport=transport)
    except (asyncio.TimeoutError, httpx.HTTPError) as exc:
        logger.error("API Health Check Failed: %r", exc)
        return False
    return response.is_success


@dataclass(frozen=True)
class BackendStatus:
    """Outcome of one backend probe."""

    url: str | None
    status: str
    response_time_ms: int

    @property
    def response_time(self) -> str:
        return f"{self.response_time_ms}ms"

    def as_dict(self) -> dict[str, str | None]:
        return {"url": self.url, "status": self.status, "responseTime": self.response_time}


class BackendProbe:
    """Time a health request against the configured backend."""

    def __init__(
        self,
        base_url: str | None,
        *,
        timeout_seconds: float = DEFAULT_HEALTH_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def probe(self) -> BackendStatus:
        if not self._base_url:
            return BackendStatus(url=None, status="unknown", response_time_ms=0)

        started = time.monotonic()
        try:
            response = await _get_health(
                self._base_url,
                timeout=self._timeout_seconds,
                transport=self._transport,
            )
        except (asyncio.TimeoutError, httpx.HTTPError) as exc:
            logger.warning("Backend unreachable at %s: %r", self._base_url, exc)
            status = "unreachable"
        else:
            status = "healthy" if response.is_success else "unhealthy"

        elapsed_ms = int((time.monotonic() - started) * 1000)
        return BackendStatus(url=self._base_url, status=status, response_time_ms=elapsed_ms)
