"""Response envelopes returned by the backend.

The backend wraps payloads in one of two incompatible shapes. Each endpoint is
bound to exactly one of them by the service that calls it; bodies are never
sniffed to guess which shape they carry.
"""

from __future__ import annotations

from typing import Any
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

from dashboard_client.core.errors import EnvelopeError

ModelT = TypeVar("ModelT", bound=BaseModel)

MALFORMED_ENVELOPE_MESSAGE = "Respuesta del servidor con formato inesperado."


class CodeEnvelope(BaseModel):
    """``{code, data, msg}`` envelope: 200 success, 400 field errors, 404 not found."""

    model_config = ConfigDict(extra="allow")

    code: int
    data: Any = None
    msg: str | None = None

    @classmethod
    def parse(cls, raw: Any) -> CodeEnvelope:
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise EnvelopeError(message=MALFORMED_ENVELOPE_MESSAGE, data=raw, cause=exc) from exc

    @property
    def ok(self) -> bool:
        return self.code == 200

    def field_errors(self) -> dict[str, str] | None:
        if self.code != 400 or not isinstance(self.data, dict) or not self.data:
            return None
        return {str(field): str(issue) for field, issue in self.data.items()}

    def unwrap(self, default_message: str) -> Any:
        """Return ``data`` on success or raise the failure the envelope encodes."""
        if self.ok:
            return self.data
        raise EnvelopeError(
            message=self.msg or default_message,
            status_code=self.code,
            data=self.data,
        )


class StatusEnvelope(BaseModel):
    """``{status, data, msg}`` envelope: ``status == "ok"`` is success."""

    model_config = ConfigDict(extra="allow")

    status: str
    data: Any = None
    msg: str | None = None

    @classmethod
    def parse(cls, raw: Any) -> StatusEnvelope:
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise EnvelopeError(message=MALFORMED_ENVELOPE_MESSAGE, data=raw, cause=exc) from exc

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def unwrap(self, default_message: str) -> Any:
        if self.ok:
            return self.data
        raise EnvelopeError(message=self.msg or default_message, data=self.data)


class SubmissionResult(BaseModel):
    """Outcome of a form submission: saved payload or per-field errors."""

    data: Any = None
    message: str | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.field_errors


def resolve_submission(raw: Any, *, default_message: str) -> SubmissionResult:
    """Interpret a code envelope answering a create/update request."""
    envelope = CodeEnvelope.parse(raw)
    if envelope.ok:
        return SubmissionResult(data=envelope.data, message=envelope.msg)

    field_errors = envelope.field_errors()
    if field_errors is not None:
        return SubmissionResult(message=envelope.msg, field_errors=field_errors)

    raise EnvelopeError(
        message=envelope.msg or default_message,
        status_code=envelope.code,
        data=envelope.data,
    )


def validate_payload(model: type[ModelT], data: Any) -> ModelT:
    """Validate an unwrapped payload, failing as an envelope error."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise EnvelopeError(message=MALFORMED_ENVELOPE_MESSAGE, data=data, cause=exc) from exc


def validate_items(model: type[ModelT], data: Any) -> list[ModelT]:
    """Validate an unwrapped list payload; a missing list yields ``[]``."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise EnvelopeError(message=MALFORMED_ENVELOPE_MESSAGE, data=data)
    return [validate_payload(model, item) for item in data]
