"""Local liveness route reporting backend reachability in the body."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone
import logging
import platform

from fastapi import APIRouter
from fastapi import Depends
from fastapi.responses import JSONResponse

from dashboard_client.core.config import ClientSettings
from dashboard_client.core.config import get_client_settings
from dashboard_client.schemas.health import BackendReport
from dashboard_client.schemas.health import HealthFailure
from dashboard_client.schemas.health import HealthReport
from dashboard_client.schemas.health import RuntimeReport
from dashboard_client.transport.health import BackendProbe

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])

NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_backend_probe(settings: ClientSettings = Depends(get_client_settings)) -> BackendProbe:
    """Build the backend probe with its own short timeout."""
    return BackendProbe(settings.api_base_url, timeout_seconds=settings.health_timeout_seconds)


@router.get("/health", response_model=HealthReport)
async def health_endpoint(
    settings: ClientSettings = Depends(get_client_settings),
    probe: BackendProbe = Depends(get_backend_probe),
) -> JSONResponse:
    """Report process liveness; 503 only when this check itself fails."""
    try:
        backend = await probe.probe()
        report = HealthReport(
            status="healthy",
            timestamp=_utc_timestamp(),
            version=settings.version,
            environment=settings.environment,
            backend=BackendReport(**backend.as_dict()),
            runtime=RuntimeReport(
                python=platform.python_version(),
                build_time=settings.build_time,
                output=settings.output_mode,
            ),
        )
    except Exception:
        logger.exception("Health check failed")
        failure = HealthFailure(timestamp=_utc_timestamp(), environment=settings.environment)
        return JSONResponse(status_code=503, content=failure.model_dump(), headers=NO_CACHE_HEADERS)

    return JSONResponse(status_code=200, content=report.model_dump(), headers=NO_CACHE_HEADERS)
