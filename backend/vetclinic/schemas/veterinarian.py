"""
VetClinic Backend — Veterinarian Schemas
==========================================

What:  API contracts for veterinarian accounts: registration, login, profile.
Why:   The password hash never leaves the service layer; every read model
       here omits it.
"""

from typing import Optional

from pydantic import BaseModel, Field

from vetclinic.schemas.common import ObjectIdStr, PhoneStr, RequestModel

PROFILE_FIELDS = frozenset({"nombre", "apellido", "direccion", "telefono", "email"})


class VeterinarianRegister(RequestModel):
    nombre: str
    apellido: str
    direccion: Optional[str] = None
    telefono: Optional[PhoneStr] = None
    email: str
    password: str = Field(min_length=1)


class LoginRequest(RequestModel):
    email: str
    password: str


class VeterinarianProfile(BaseModel):
    id: ObjectIdStr = Field(alias="_id", description="Veterinarian identifier (ObjectId)")
    nombre: str
    apellido: str
    direccion: Optional[str] = None
    telefono: Optional[PhoneStr] = None
    email: str
    status: bool = True

    model_config = {"populate_by_name": True}


class LoginResponse(VeterinarianProfile):
    token: str = Field(description="Bearer token for the Authorization header")


class VeterinarianUpdate(RequestModel):
    """Profile update restricted to PROFILE_FIELDS."""
    nombre: Optional[str] = None
    apellido: Optional[str] = None
    direccion: Optional[str] = None
    telefono: Optional[PhoneStr] = None
    email: Optional[str] = None

    model_config = {"str_strip_whitespace": True, "extra": "forbid"}

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class PasswordUpdate(RequestModel):
    passwordactual: str
    passwordnuevo: str = Field(min_length=1)
