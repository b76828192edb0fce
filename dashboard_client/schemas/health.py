"""Pydantic schemas for the local liveness route."""

from __future__ import annotations

from pydantic import BaseModel


class BackendReport(BaseModel):
    """Reachability of the remote backend as seen from this process."""

    url: str | None = None
    status: str
    responseTime: str


class RuntimeReport(BaseModel):
    """Build and interpreter details of this process."""

    python: str
    build_time: str
    output: str


class HealthReport(BaseModel):
    """Body returned while the local process is up."""

    status: str
    timestamp: str
    version: str
    environment: str
    backend: BackendReport
    runtime: RuntimeReport


class HealthFailure(BaseModel):
    """Body returned when the health logic itself fails."""

    status: str = "unhealthy"
    timestamp: str
    error: str = "Internal health check error"
    environment: str
