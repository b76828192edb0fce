"""Pydantic schemas for test-form payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator


class TestData(BaseModel):
    """Definition of a test form as created or edited by staff."""

    model_config = ConfigDict(extra="allow")

    name: str
    description: str | None = None
    frequency_months: int | None = None
    exercises: list[dict[str, Any]] = []


class TestListItem(BaseModel):
    """Row of the test catalogue."""

    model_config = ConfigDict(extra="allow")

    external_id: str
    name: str
    already_done: bool = False

    @field_validator("already_done", mode="before")
    @classmethod
    def _coerce_already_done(cls, value: Any) -> bool:
        return bool(value)


class TestListItemForParticipant(TestListItem):
    """Test available to, or already applied to, one participant."""

    last_applied_at: str | None = None


class RegisterTestFormData(BaseModel):
    """Results of applying a test to a participant."""

    model_config = ConfigDict(extra="allow")

    participant_external_id: str
    test_external_id: str
    results: list[dict[str, Any]] = []
