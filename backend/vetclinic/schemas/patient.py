"""
VetClinic Backend — Patient Schemas
=====================================

What:  API contracts for patient (pet) records.
Why:   Record field names stay in Spanish, matching the documents existing
       clients already read and write. Result messages travel under the
       `message` key of the shared envelopes, not the older `msg`.

Read models:
    PatientSummary → items of GET /api/pacientes (no `salida`, no timestamps)
    PatientDetail  → GET /api/paciente/{id} (adds `salida`)

Write models:
    PatientCreate  → POST /api/paciente/registro
    PatientUpdate  → PUT /api/paciente/actualizar/{id}; only UPDATABLE_FIELDS,
                     anything else is rejected
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_core import PydanticCustomError

from vetclinic.schemas.common import MessageResponse, ObjectIdStr, PhoneStr, RequestModel

UPDATABLE_FIELDS = frozenset({
    "nombre",
    "propietario",
    "email",
    "celular",
    "convencional",
    "sintomas",
    "ingreso",
    "salida",
    "estado",
})

# Fields that may be explicitly set to null on update
NULLABLE_FIELDS = frozenset({"convencional"})


class VeterinarianSummary(BaseModel):
    """Owner reference expanded inside patient responses."""
    id: ObjectIdStr = Field(alias="_id", description="Veterinarian identifier")
    nombre: str
    apellido: str

    model_config = {"populate_by_name": True}


class PatientSummary(BaseModel):
    id: ObjectIdStr = Field(alias="_id", description="Patient identifier (ObjectId)")
    nombre: str = Field(description="Pet name")
    propietario: str = Field(description="Owner full name")
    email: str = Field(description="Owner contact email")
    celular: str = Field(description="Owner mobile phone")
    convencional: Optional[str] = Field(default=None, description="Owner landline phone")
    sintomas: str = Field(description="Reported symptoms")
    ingreso: Optional[datetime] = Field(default=None, description="Admission date")
    estado: bool = Field(description="Active record (false once retired)")
    veterinario: Optional[VeterinarianSummary] = Field(
        default=None,
        description="Owning veterinarian; null if it no longer exists",
    )

    model_config = {"populate_by_name": True}


class PatientDetail(PatientSummary):
    salida: Optional[datetime] = Field(default=None, description="Discharge date")


class PatientCreate(RequestModel):
    """
    Registration body. `veterinario`, `estado` defaults and timestamps are
    assigned by the server.
    """
    nombre: str
    propietario: str
    email: str
    celular: PhoneStr
    convencional: Optional[PhoneStr] = None
    sintomas: str
    ingreso: Optional[datetime] = None
    salida: Optional[datetime] = None
    estado: bool = True
    # Owner id sent by old clients; honored only with LEGACY_OWNER_FROM_BODY
    id: Optional[str] = Field(default=None, description="Deprecated owner id")


class PatientUpdate(RequestModel):
    """Partial update restricted to UPDATABLE_FIELDS."""
    nombre: Optional[str] = None
    propietario: Optional[str] = None
    email: Optional[str] = None
    celular: Optional[PhoneStr] = None
    convencional: Optional[PhoneStr] = None
    sintomas: Optional[str] = None
    ingreso: Optional[datetime] = None
    salida: Optional[datetime] = None
    estado: Optional[bool] = None

    model_config = {"str_strip_whitespace": True, "extra": "forbid"}

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "PatientUpdate":
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in NULLABLE_FIELDS:
                raise PydanticCustomError(
                    "null_field",
                    "El campo {field} no puede ser nulo",
                    {"field": name},
                )
        return self

    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class PatientCreated(MessageResponse):
    id: str = Field(description="Identifier of the new patient")


PatientList = List[PatientSummary]
