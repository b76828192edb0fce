"""Participant operations."""

from __future__ import annotations

import logging
from urllib.parse import quote

from dashboard_client.core.errors import ApiError
from dashboard_client.schemas.envelope import CodeEnvelope
from dashboard_client.schemas.envelope import SubmissionResult
from dashboard_client.schemas.envelope import validate_items
from dashboard_client.schemas.envelope import validate_payload
from dashboard_client.schemas.participant import Participant
from dashboard_client.schemas.participant import UpdateParticipantData
from dashboard_client.services.submissions import dump_payload
from dashboard_client.services.submissions import submit
from dashboard_client.transport.client import ApiClient
from dashboard_client.transport.retry import DEFAULT_MAX_ATTEMPTS

logger = logging.getLogger(__name__)

PARTICIPANTS_PATH = "/api/users"
SEARCH_PATH = "/api/users/search"


def _participant_path(participant_id: str) -> str:
    if not participant_id:
        raise ValueError("participant_id is required")
    return f"{PARTICIPANTS_PATH}/{quote(participant_id, safe='')}"


async def get_participants(
    client: ApiClient,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> list[Participant]:
    """List participants; an empty backend answer yields ``[]``."""
    raw = await client.get_with_retry(PARTICIPANTS_PATH, max_attempts=max_attempts)
    data = CodeEnvelope.parse(raw).unwrap("Error al obtener participantes")
    return validate_items(Participant, data)


async def create_participant(client: ApiClient, data: Participant) -> SubmissionResult:
    """Create a standard participant."""
    return await submit(
        client.post(PARTICIPANTS_PATH, dump_payload(data)),
        default_message="Error al registrar el participante",
    )


async def search_participant_by_dni(client: ApiClient, dni: str) -> Participant | None:
    """Find a participant by national id.

    Returns ``None`` both when nobody matches and when the request fails, so
    callers cannot tell the two apart.
    """
    try:
        raw = await client.post(SEARCH_PATH, {"dni": dni})
        data = CodeEnvelope.parse(raw).unwrap("Participante no encontrado")
        if not data:
            return None
        return validate_payload(Participant, data)
    except ApiError as exc:
        logger.info("DNI search returned no participant: %s", exc.message)
        return None


async def get_participant(
    client: ApiClient,
    participant_id: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Participant:
    """Fetch one participant by external id."""
    raw = await client.get_with_retry(_participant_path(participant_id), max_attempts=max_attempts)
    data = CodeEnvelope.parse(raw).unwrap("Participante no encontrado")
    return validate_payload(Participant, data)


async def update_participant(
    client: ApiClient,
    participant_id: str,
    data: UpdateParticipantData,
) -> SubmissionResult:
    """Update editable participant fields; a 404 envelope raises."""
    return await submit(
        client.put(_participant_path(participant_id), dump_payload(data)),
        default_message="Participante no encontrado",
    )
