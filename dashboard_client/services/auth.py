"""Authentication operations."""

from __future__ import annotations

import logging

from dashboard_client.schemas.auth import LoginRequest
from dashboard_client.schemas.auth import LoginResponse
from dashboard_client.schemas.envelope import validate_payload
from dashboard_client.transport.client import ApiClient

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/login"


async def login(client: ApiClient, credentials: LoginRequest) -> LoginResponse:
    """Exchange credentials for a session token and store it. Never retried."""
    raw = await client.post(LOGIN_PATH, credentials.model_dump())
    session = validate_payload(LoginResponse, raw)
    client.session.sign_in(session.token)
    logger.info("Signed in as %s", credentials.email)
    return session


async def logout(client: ApiClient) -> None:
    """Forget the stored credential."""
    client.session.sign_out()
