"""Unit tests for the transport client and its auth hooks."""

from __future__ import annotations

import asyncio
import io
import json
import logging

import httpx
import pytest

from dashboard_client.core.errors import CONNECTIVITY_MESSAGE
from dashboard_client.core.errors import ApiError
from dashboard_client.core.errors import ErrorKind
from dashboard_client.core.session import MemoryCredentialStore
from dashboard_client.core.session import SessionContext
from dashboard_client.transport.client import ApiClient


def test_constructor_validates_configuration() -> None:
    with pytest.raises(ValueError):
        ApiClient(base_url="/")
    with pytest.raises(ValueError):
        ApiClient(base_url="https://backend.example.test", timeout_seconds=0)


def test_send_attaches_bearer_default_headers_and_query(make_api_client) -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"code": 200, "data": []}, request=request)

    session = SessionContext(MemoryCredentialStore("secret-token"))

    async def _run():
        async with make_api_client(handler, session=session) as api:
            return await api.get("/api/list-tests-participant", {"participant_external_id": "p-1", "page": None})

    assert asyncio.run(_run()) == {"code": 200, "data": []}
    request = captured[0]
    assert request.headers["Authorization"] == "Bearer secret-token"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["Content-Type"] == "application/json"
    assert request.url.path == "/api/list-tests-participant"
    assert dict(request.url.params) == {"participant_external_id": "p-1"}


def test_send_without_credential_omits_authorization(make_api_client) -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"token": "x"}, request=request)

    async def _run() -> None:
        async with make_api_client(handler) as api:
            await api.post("/api/auth/login", {"email": "a@b.c", "password": "pw"})

    asyncio.run(_run())

    assert "Authorization" not in captured[0].headers
    assert json.loads(captured[0].content) == {"email": "a@b.c", "password": "pw"}


def test_empty_success_body_decodes_to_none(make_api_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204, request=request)

    async def _run():
        async with make_api_client(handler) as api:
            return await api.delete("/api/delete-test/t-1")

    assert asyncio.run(_run()) is None


def test_non_json_success_body_raises_normalized_error(make_api_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>", request=request)

    async def _run():
        async with make_api_client(handler) as api:
            return await api.get("/api/users")

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(_run())

    assert exc_info.value.status_code == 200
    assert exc_info.value.data == "<html>"


def test_status_errors_are_normalized_with_body(make_api_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"message": "Edad fuera de rango"}, request=request)

    async def _run():
        async with make_api_client(handler) as api:
            return await api.post("/api/users", {"edad": 300})

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(_run())

    error = exc_info.value
    assert error.status_code == 422
    assert error.message == "Edad fuera de rango"
    assert error.kind == ErrorKind.VALIDATION
    assert error.data == {"message": "Edad fuera de rango"}
    assert isinstance(error.cause, httpx.HTTPStatusError)
    assert error.__cause__ is error.cause


def test_not_found_error_keeps_original_status_error(make_api_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, request=request)

    async def _run():
        async with make_api_client(handler) as api:
            return await api.get("/api/users")

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(_run())

    error = exc_info.value
    assert error.status_code == 404
    assert isinstance(error.cause, httpx.HTTPStatusError)
    assert error.cause.response.status_code == 404


def test_network_failure_becomes_connectivity_error(make_api_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    async def _run():
        async with make_api_client(handler) as api:
            return await api.get("/api/users")

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(_run())

    error = exc_info.value
    assert error.status_code is None
    assert error.message == CONNECTIVITY_MESSAGE
    assert isinstance(error.cause, httpx.ConnectError)


def test_slow_backend_times_out_as_connectivity_error(make_api_client) -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={}, request=request)

    async def _run():
        async with make_api_client(handler, timeout_seconds=0.05) as api:
            return await api.get("/api/users")

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(asyncio.wait_for(_run(), timeout=2))

    assert exc_info.value.status_code is None
    assert exc_info.value.kind == ErrorKind.CONNECTIVITY


def test_unauthorized_response_clears_credential_and_redirects(make_api_client) -> None:
    session = SessionContext(MemoryCredentialStore("expired-token"))
    navigations: list[str] = []
    session.redirect.subscribe(navigations.append)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "token expired"}, request=request)

    async def _run():
        async with make_api_client(handler, session=session) as api:
            return await api.get("/api/users")

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(_run())

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Sesión expirada. Por favor inicia sesión nuevamente."
    assert session.credential is None
    assert session.redirect.pending == "/auth/signin"
    assert navigations == ["/auth/signin"]


def test_concurrent_unauthorized_responses_redirect_once(make_api_client) -> None:
    session = SessionContext(MemoryCredentialStore("expired-token"))
    navigations: list[str] = []
    session.redirect.subscribe(navigations.append)
    sent_tokens: list[str | None] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        sent_tokens.append(request.headers.get("Authorization"))
        await asyncio.sleep(0.01)
        return httpx.Response(401, request=request)

    async def _run():
        async with make_api_client(handler, session=session) as api:
            return await asyncio.gather(
                api.get("/api/users"),
                api.get("/api/list-test"),
                return_exceptions=True,
            )

    results = asyncio.run(_run())

    assert sent_tokens == ["Bearer expired-token", "Bearer expired-token"]
    assert all(isinstance(result, ApiError) and result.status_code == 401 for result in results)
    assert navigations == ["/auth/signin"]
    assert session.credential is None


def test_completed_requests_are_logged_with_elapsed_time(make_api_client, caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={}, request=request)

    async def _run() -> None:
        async with make_api_client(handler) as api:
            await api.get("/api/list-assessment")

    with caplog.at_level(logging.INFO, logger="dashboard_client.transport.client"):
        asyncio.run(_run())

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("API Response [GET] /api/list-assessment - ") for message in messages)


def test_upload_streams_multipart_and_reports_progress(make_api_client) -> None:
    received: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        received["content_type"] = request.headers["Content-Type"]
        received["length"] = request.headers.get("Content-Length")
        received["body"] = request.content
        return httpx.Response(200, json={"code": 200, "data": {"url": "/files/photo.png"}}, request=request)

    progress: list[int] = []
    payload = b"\x89PNG" + b"x" * (64 * 1024 * 3)

    async def _run():
        async with make_api_client(handler) as api:
            return await api.upload(
                "/api/upload",
                io.BytesIO(payload),
                progress.append,
                filename="photo.png",
                content_type="image/png",
            )

    result = asyncio.run(_run())

    assert result == {"code": 200, "data": {"url": "/files/photo.png"}}
    assert str(received["content_type"]).startswith("multipart/form-data; boundary=")
    assert int(str(received["length"])) == len(received["body"])
    assert b'filename="photo.png"' in received["body"]
    assert payload in received["body"]
    assert progress == sorted(progress)
    assert len(progress) == len(set(progress))
    assert all(0 <= value <= 100 for value in progress)
    assert progress[-1] == 100


def test_upload_of_empty_file_still_completes_progress(make_api_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 200}, request=request)

    progress: list[int] = []

    async def _run() -> None:
        async with make_api_client(handler) as api:
            await api.upload("/api/upload", b"", progress.append)

    asyncio.run(_run())

    assert progress[-1] == 100


class _RecordingFile(io.BytesIO):
    def __init__(self, payload: bytes) -> None:
        super().__init__(payload)
        self.reads: list[int] = []

    def read(self, size: int | None = -1) -> bytes:
        chunk = super().read(size)
        self.reads.append(len(chunk))
        return chunk


def test_upload_reads_file_object_incrementally(make_api_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"code": 200}, request=request)

    source = _RecordingFile(b"y" * (64 * 1024 * 4))
    progress: list[int] = []

    async def _run() -> None:
        async with make_api_client(handler) as api:
            await api.upload("/api/upload", source, progress.append, filename="scan.pdf")

    asyncio.run(_run())

    assert len([size for size in source.reads if size]) > 1
    assert max(source.reads) < len(source.getvalue())
    assert len(progress) > 2
    assert progress[-1] == 100
