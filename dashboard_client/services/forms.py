"""Test-form operations.

Most endpoints answer with the ``{code, data, msg}`` envelope; the test detail
endpoint answers with ``{status, data, msg}`` instead.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from dashboard_client.schemas.envelope import CodeEnvelope
from dashboard_client.schemas.envelope import StatusEnvelope
from dashboard_client.schemas.envelope import SubmissionResult
from dashboard_client.schemas.envelope import resolve_submission
from dashboard_client.schemas.envelope import validate_items
from dashboard_client.schemas.forms import RegisterTestFormData
from dashboard_client.schemas.forms import TestData
from dashboard_client.schemas.forms import TestListItem
from dashboard_client.schemas.forms import TestListItemForParticipant
from dashboard_client.services.submissions import dump_payload
from dashboard_client.services.submissions import submit
from dashboard_client.transport.client import ApiClient
from dashboard_client.transport.retry import DEFAULT_MAX_ATTEMPTS

PROGRESS_ERROR_MESSAGE = "Error al obtener progreso"
TEST_DETAIL_ERROR_MESSAGE = "Error al obtener el detalle del test"


async def get_tests(
    client: ApiClient,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> list[TestListItem]:
    """List the test catalogue with ``already_done`` coerced to a bool."""
    raw = await client.get_with_retry("/api/list-test", max_attempts=max_attempts)
    data = CodeEnvelope.parse(raw).unwrap("Error al obtener los tests")
    return validate_items(TestListItem, data)


async def save_test(client: ApiClient, data: TestData) -> SubmissionResult:
    """Create a test form. Never retried."""
    return await submit(
        client.post("/api/save-test", dump_payload(data)),
        default_message="Error al guardar el test",
    )


async def register_form(client: ApiClient, data: RegisterTestFormData) -> SubmissionResult:
    """Record the results of applying a test to a participant."""
    return await submit(
        client.post("/api/apply_test", dump_payload(data)),
        default_message="Error al registrar el test",
    )


async def get_tests_for_participant(
    client: ApiClient,
    participant_external_id: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> list[TestListItemForParticipant]:
    """List tests with their completion state for one participant."""
    raw = await client.get_with_retry(
        "/api/list-tests-participant",
        {"participant_external_id": participant_external_id},
        max_attempts=max_attempts,
    )
    data = CodeEnvelope.parse(raw).unwrap("Error al obtener los tests del participante")
    return validate_items(TestListItemForParticipant, data)


async def get_participant_progress(
    client: ApiClient,
    participant_external_id: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Any:
    """Fetch progress data; any code other than 200 raises even on HTTP 2xx."""
    raw = await client.get_with_retry(
        "/api/participant-progress",
        {"participant_external_id": participant_external_id},
        max_attempts=max_attempts,
    )
    return CodeEnvelope.parse(raw).unwrap(PROGRESS_ERROR_MESSAGE)


async def get_test_by_id(
    client: ApiClient,
    external_id: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Any:
    """Fetch a test definition; ``status != "ok"`` raises, ``data`` is returned as-is."""
    raw = await client.get_with_retry(
        f"/api/get-test/{quote(external_id, safe='')}",
        max_attempts=max_attempts,
    )
    return StatusEnvelope.parse(raw).unwrap(TEST_DETAIL_ERROR_MESSAGE)


async def update_test(client: ApiClient, test_external_id: str, data: TestData) -> SubmissionResult:
    """Replace a test definition; transport errors propagate unchanged."""
    body = {**dump_payload(data), "test_external_id": test_external_id}
    raw = await client.put("/api/update-test", body)
    return resolve_submission(raw, default_message="Error al actualizar el test")


async def delete_test(client: ApiClient, external_id: str) -> Any:
    """Delete a test definition; transport errors propagate unchanged."""
    raw = await client.delete(f"/api/delete-test/{quote(external_id, safe='')}")
    return CodeEnvelope.parse(raw).unwrap("Error al eliminar el test")
