"""FastAPI application entrypoint exposing the local liveness route."""

import logging

from fastapi import FastAPI
from fastapi import Request

from dashboard_client.api.health import router as health_router
from dashboard_client.core.config import get_client_settings

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "origin-when-cross-origin",
    "X-XSS-Protection": "1; mode=block",
}

app = FastAPI(title="Dashboard client")


@app.middleware("http")
async def apply_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(SECURITY_HEADERS)
    return response


app.include_router(health_router)
logger.info("Client settings: %s", get_client_settings().safe_for_logging())
