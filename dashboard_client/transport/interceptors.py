"""Request/response hooks installed on every transport client."""

from __future__ import annotations

import logging

import httpx

from dashboard_client.core.session import SessionContext

logger = logging.getLogger(__name__)


class AuthInterceptor:
    """Attach the stored bearer credential and react to authorization failures."""

    def __init__(self, session: SessionContext) -> None:
        self._session = session

    async def on_request(self, request: httpx.Request) -> None:
        token = self._session.credential
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def on_response(self, response: httpx.Response) -> None:
        if response.status_code != 401:
            return
        if self._session.invalidate():
            logger.warning(
                "Session invalidated after 401 on %s %s",
                response.request.method,
                response.request.url.path,
            )

    def event_hooks(self) -> dict[str, list]:
        """Return the hook mapping accepted by ``httpx.AsyncClient``."""
        return {"request": [self.on_request], "response": [self.on_response]}
