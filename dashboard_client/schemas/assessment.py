"""Pydantic schemas for anthropometric assessment payloads."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict

from dashboard_client.schemas.participant import Participant


class AssessmentData(BaseModel):
    """Measurements submitted for one participant."""

    model_config = ConfigDict(extra="allow")

    participant_external_id: str
    weight: float
    height: float
    waist_perimeter: float | None = None
    arm_perimeter: float | None = None
    leg_perimeter: float | None = None
    calf_perimeter: float | None = None
    date: str | None = None


class AssessmentResponseData(BaseModel):
    """Stored assessment with its derived indicators."""

    model_config = ConfigDict(extra="allow")

    external_id: str | None = None
    participant_external_id: str | None = None
    bmi: float | None = None
    date: str | None = None


class ParticipantAssessments(BaseModel):
    """A participant together with their assessment history."""

    participant: Participant
    assessments: list[AssessmentResponseData] = []
