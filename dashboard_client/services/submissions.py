"""Shared handling for create/update requests answered with a code envelope."""

from __future__ import annotations

from collections.abc import Awaitable
import logging
from typing import Any

from pydantic import BaseModel

from dashboard_client.core.errors import ApiError
from dashboard_client.schemas.envelope import SubmissionResult
from dashboard_client.schemas.envelope import resolve_submission

logger = logging.getLogger(__name__)


def dump_payload(payload: BaseModel | dict[str, Any]) -> dict[str, Any]:
    """Serialize a request body, dropping unset optional fields."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(exclude_none=True)
    return dict(payload)


async def submit(request: Awaitable[Any], *, default_message: str) -> SubmissionResult:
    """Await a mutating request and fold validation failures into field errors.

    Field errors arrive either as a ``code == 400`` envelope or as an HTTP
    error body carrying an ``errors`` mapping. Every other failure propagates.
    """
    try:
        raw = await request
    except ApiError as exc:
        field_errors = exc.field_errors()
        if field_errors is None:
            raise
        logger.info("Submission rejected with %d field errors", len(field_errors))
        return SubmissionResult(message=exc.message, field_errors=field_errors)

    return resolve_submission(raw, default_message=default_message)
