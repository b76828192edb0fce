"""Client configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_API_BASE_URL = "http://localhost:5000/api"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_HEALTH_TIMEOUT_SECONDS = 5.0
DEFAULT_ENVIRONMENT = "development"
DEFAULT_VERSION = "1.0.0"


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    return float(raw)


def _get_bool_env(name: str) -> bool:
    return os.getenv(name, "").strip().lower() == "true"


def redact_secret(secret: str | None) -> str:
    """Return a non-recoverable placeholder for sensitive values."""
    if not secret:
        return "<empty>"
    return "<redacted>"


@dataclass(frozen=True)
class ClientSettings:
    """Process-wide settings, read once at startup and never mutated."""

    api_base_url: str | None
    request_timeout_seconds: float
    health_timeout_seconds: float
    standalone_output: bool
    environment: str
    version: str
    build_time: str
    credential_file: str | None = None

    @property
    def effective_base_url(self) -> str:
        """Base URL the transport uses, falling back to the local default."""
        return self.api_base_url or DEFAULT_API_BASE_URL

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def output_mode(self) -> str:
        return "standalone" if self.standalone_output else "default"

    def safe_for_logging(self) -> dict[str, str | float | bool | None]:
        """Return client settings safe for logs."""
        return {
            "api_base_url": self.effective_base_url,
            "request_timeout_seconds": self.request_timeout_seconds,
            "health_timeout_seconds": self.health_timeout_seconds,
            "output_mode": self.output_mode,
            "environment": self.environment,
            "credential_file": redact_secret(self.credential_file),
        }


def get_api_config(settings: ClientSettings | None = None) -> dict[str, str | float | bool]:
    """Summarize the transport configuration for diagnostics screens."""
    settings = settings or get_client_settings()
    return {
        "base_url": settings.effective_base_url,
        "timeout": settings.request_timeout_seconds,
        "is_production": settings.is_production,
        "output": settings.output_mode,
    }


@lru_cache(maxsize=1)
def get_client_settings() -> ClientSettings:
    """Load client settings from the environment."""
    return ClientSettings(
        api_base_url=os.getenv("DASHBOARD_API_URL") or None,
        request_timeout_seconds=_get_float_env(
            "DASHBOARD_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS
        ),
        health_timeout_seconds=_get_float_env(
            "DASHBOARD_HEALTH_TIMEOUT_SECONDS", DEFAULT_HEALTH_TIMEOUT_SECONDS
        ),
        standalone_output=_get_bool_env("DASHBOARD_OUTPUT_STANDALONE"),
        environment=os.getenv("DASHBOARD_ENV", DEFAULT_ENVIRONMENT),
        version=os.getenv("DASHBOARD_VERSION", DEFAULT_VERSION),
        build_time=os.getenv("DASHBOARD_BUILD_TIME", "unknown"),
        credential_file=os.getenv("DASHBOARD_CREDENTIAL_FILE") or None,
    )
