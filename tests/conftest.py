"""Shared pytest fixtures for dashboard client test suites."""

from collections.abc import Callable
from collections.abc import Generator
from pathlib import Path
import sys

import httpx
import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dashboard_client.core.config import ClientSettings  # noqa: E402
from dashboard_client.core.session import SessionContext  # noqa: E402
from dashboard_client.transport.client import ApiClient  # noqa: E402

BACKEND_URL = "https://backend.example.test"


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide an API test client for the local liveness route."""
    from dashboard_client.main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_api_client() -> Callable[..., ApiClient]:
    """Build transport clients answering through an in-process handler."""

    def _make(
        handler: Callable[[httpx.Request], object],
        *,
        session: SessionContext | None = None,
        timeout_seconds: float = 30.0,
    ) -> ApiClient:
        return ApiClient(
            base_url=BACKEND_URL,
            session=session,
            timeout_seconds=timeout_seconds,
            transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def settings() -> ClientSettings:
    """Deterministic settings independent of the test environment."""
    return ClientSettings(
        api_base_url=BACKEND_URL,
        request_timeout_seconds=30.0,
        health_timeout_seconds=5.0,
        standalone_output=True,
        environment="test",
        version="2.3.4",
        build_time="2026-10-01T00:00:00Z",
    )
