"""Anthropometric assessment operations."""

from __future__ import annotations

from urllib.parse import quote

from dashboard_client.schemas.assessment import AssessmentData
from dashboard_client.schemas.assessment import AssessmentResponseData
from dashboard_client.schemas.assessment import ParticipantAssessments
from dashboard_client.schemas.envelope import CodeEnvelope
from dashboard_client.schemas.envelope import SubmissionResult
from dashboard_client.schemas.envelope import validate_items
from dashboard_client.schemas.envelope import validate_payload
from dashboard_client.services.submissions import dump_payload
from dashboard_client.services.submissions import submit
from dashboard_client.transport.client import ApiClient
from dashboard_client.transport.retry import DEFAULT_MAX_ATTEMPTS

SAVE_ASSESSMENT_PATH = "/api/save-assessment"
LIST_ASSESSMENT_PATH = "/api/list-assessment"


async def save_assessment(client: ApiClient, data: AssessmentData) -> SubmissionResult:
    """Store one set of measurements. Never retried."""
    return await submit(
        client.post(SAVE_ASSESSMENT_PATH, dump_payload(data)),
        default_message="Error al guardar la evaluación",
    )


async def get_records(
    client: ApiClient,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> list[AssessmentResponseData]:
    """List every stored assessment."""
    raw = await client.get_with_retry(LIST_ASSESSMENT_PATH, max_attempts=max_attempts)
    data = CodeEnvelope.parse(raw).unwrap("Error al obtener las evaluaciones")
    return validate_items(AssessmentResponseData, data)


async def get_assessments_by_participant(
    client: ApiClient,
    participant_external_id: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> ParticipantAssessments:
    """Fetch a participant together with their assessment history."""
    path = f"/api/participants/{quote(participant_external_id, safe='')}/assessments"
    raw = await client.get_with_retry(path, max_attempts=max_attempts)
    data = CodeEnvelope.parse(raw).unwrap("Error al obtener las evaluaciones del participante")
    return validate_payload(ParticipantAssessments, data)
