"""Asynchronous transport client for the dashboard backend."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
import io
import logging
import time
from typing import Any
from typing import BinaryIO

import httpx

from dashboard_client.core.config import ClientSettings
from dashboard_client.core.config import get_client_settings
from dashboard_client.core.errors import ApiError
from dashboard_client.core.errors import ErrorKind
from dashboard_client.core.errors import normalize_connectivity_error
from dashboard_client.core.errors import normalize_status_error
from dashboard_client.core.session import FileCredentialStore
from dashboard_client.core.session import MemoryCredentialStore
from dashboard_client.core.session import SessionContext
from dashboard_client.transport.interceptors import AuthInterceptor
from dashboard_client.transport.retry import DEFAULT_MAX_ATTEMPTS
from dashboard_client.transport.retry import with_retry

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

ProgressCallback = Callable[[int], None]


class _UploadProgress:
    """Turn byte counts into non-decreasing integer percentages."""

    def __init__(self, total: int, callback: ProgressCallback | None) -> None:
        self._total = total
        self._sent = 0
        self._last = -1
        self._callback = callback

    def advance(self, size: int) -> None:
        self._sent += size
        if self._total:
            self._emit(min(self._sent * 100 // self._total, 100))

    def finish(self) -> None:
        self._emit(100)

    def _emit(self, percent: int) -> None:
        if self._callback is None or percent <= self._last:
            return
        self._last = percent
        self._callback(percent)


class ApiClient:
    """Send requests through the auth hooks and error normalizer."""

    def __init__(
        self,
        *,
        base_url: str,
        session: SessionContext | None = None,
        timeout_seconds: float = 30.0,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        normalized = base_url.rstrip("/")
        if not normalized:
            raise ValueError("base_url is required")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self.session = session or SessionContext()
        self._base_url = normalized
        self._timeout_seconds = timeout_seconds
        self._interceptor = AuthInterceptor(self.session)
        self._client = httpx.AsyncClient(
            base_url=normalized,
            timeout=timeout_seconds,
            headers={**DEFAULT_HEADERS, **dict(headers or {})},
            event_hooks=self._interceptor.event_hooks(),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings | None = None,
        *,
        session: SessionContext | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ApiClient:
        """Build a client from process settings."""
        settings = settings or get_client_settings()
        if session is None:
            store = (
                FileCredentialStore(settings.credential_file)
                if settings.credential_file
                else MemoryCredentialStore()
            )
            session = SessionContext(store)
        return cls(
            base_url=settings.effective_base_url,
            session=session,
            timeout_seconds=settings.request_timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    async def aclose(self) -> None:
        """Close underlying transport resources."""
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: Mapping[str, Any] | None = None,
    ) -> Any:
        """Issue one request and return the decoded JSON payload."""
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body
        if query:
            kwargs["params"] = {key: value for key, value in query.items() if value is not None}
        response = await self._dispatch(method, path, **kwargs)
        return self._decode(response)

    async def get(self, path: str, query: Mapping[str, Any] | None = None) -> Any:
        return await self.send("GET", path, query=query)

    async def get_with_retry(
        self,
        path: str,
        query: Mapping[str, Any] | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        *,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> Any:
        """GET with bounded backoff; the only retrying entry point."""
        return await with_retry(lambda: self.get(path, query), max_attempts, sleep=sleep)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.send("POST", path, body)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.send("PUT", path, body)

    async def patch(self, path: str, body: Any = None) -> Any:
        return await self.send("PATCH", path, body)

    async def delete(self, path: str) -> Any:
        return await self.send("DELETE", path)

    async def upload(
        self,
        path: str,
        file: bytes | BinaryIO,
        on_progress: ProgressCallback | None = None,
        *,
        filename: str = "upload",
        field: str = "file",
        content_type: str = "application/octet-stream",
    ) -> Any:
        """POST a multipart file, streaming it and reporting percent progress.

        The file object is read lazily while the body is sent. ``bytes`` are
        wrapped in a buffer and streamed the same way.
        """
        source = io.BytesIO(file) if isinstance(file, bytes) else file
        encoded = httpx.Request(
            "POST",
            f"{self._base_url}/",
            files={field: (filename, source, content_type)},
        )
        headers = {"Content-Type": encoded.headers["Content-Type"]}
        total = 0
        if "Content-Length" in encoded.headers:
            total = int(encoded.headers["Content-Length"])
            headers["Content-Length"] = str(total)
        progress = _UploadProgress(total, on_progress)

        async def _stream():
            for chunk in encoded.stream:
                yield chunk
                progress.advance(len(chunk))
            progress.finish()

        response = await self._dispatch("POST", path, content=_stream(), headers=headers)
        return self._decode(response)

    async def _dispatch(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        method = method.upper()
        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._client.request(method, path, **kwargs),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise normalize_connectivity_error(exc) from exc
        except httpx.RequestError as exc:
            raise normalize_connectivity_error(exc) from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("API Response [%s] %s - %dms", method, path, elapsed_ms)

        if response.is_error:
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise normalize_status_error(response, exc) from exc
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                status_code=response.status_code,
                message="La respuesta del servidor no es un JSON válido.",
                cause=exc,
                data=response.text,
                kind=ErrorKind.UNEXPECTED,
            ) from exc
