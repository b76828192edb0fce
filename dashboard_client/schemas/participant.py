"""Pydantic schemas for participant payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict

ParticipantType = Literal["ESTUDIANTE", "DOCENTE", "ADMINISTRATIVO", "EXTERNO"]
ParticipantState = Literal["ACTIVO", "INACTIVO"]


class Participant(BaseModel):
    """Participant record as returned by the users endpoints."""

    model_config = ConfigDict(extra="allow")

    id: int | None = None
    external_id: str | None = None
    nombre: str
    apellido: str
    dni: str
    edad: int
    tipo: ParticipantType
    correo: str | None = None
    telefono: str | None = None
    direccion: str | None = None
    estado: ParticipantState | None = None


class UpdateParticipantData(BaseModel):
    """Editable participant fields submitted by the edit form."""

    firstName: str = ""
    lastName: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    age: int = 0
    dni: str = ""
