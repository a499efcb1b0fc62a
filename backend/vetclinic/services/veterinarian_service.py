"""
VetClinic Backend — Veterinarian Service
==========================================

What:  Account operations for veterinarians: register, login, profile reads
       and updates, password change.
Who:   Constructed per request by `dependencies.get_veterinarian_service`.

The `password` field (a bcrypt hash) is read only by login and password
change; every other lookup excludes it.
"""

import logging
from datetime import datetime, timezone

from vetclinic.exceptions import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from vetclinic.schemas.common import MessageResponse
from vetclinic.schemas.veterinarian import (
    LoginRequest,
    LoginResponse,
    PasswordUpdate,
    VeterinarianProfile,
    VeterinarianRegister,
    VeterinarianUpdate,
)
from vetclinic.services.patient_service import parse_object_id
from vetclinic.services.security import create_access_token, hash_password, verify_password
from vetclinic.store.base import VETERINARIANS, Document, DocumentStore

logger = logging.getLogger(__name__)

RESOURCE = "veterinario"
PRIVATE_FIELDS = ("password", "__v")


class VeterinarianService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def _ensure_email_available(self, email: str, current_id=None) -> None:
        existing = await self.store.find_one(VETERINARIANS, {"email": email}, exclude=PRIVATE_FIELDS)
        if existing is not None and existing["_id"] != current_id:
            raise ValidationError(
                message="Lo sentimos, el email ya se encuentra registrado",
                field="email",
            )

    async def register(self, payload: VeterinarianRegister) -> MessageResponse:
        await self._ensure_email_available(payload.email)

        now = datetime.now(timezone.utc)
        document = payload.model_dump()
        document["password"] = hash_password(payload.password)
        document["status"] = True
        document["createdAt"] = now
        document["updatedAt"] = now

        vet_id = await self.store.insert(VETERINARIANS, document)
        logger.info("Veterinarian %s registered", vet_id)
        return MessageResponse(message="Registro exitoso del veterinario")

    async def login(self, payload: LoginRequest) -> LoginResponse:
        """
        Exchange email and password for a bearer token.

        Raises:
            NotFoundError: Unknown email.
            PermissionDeniedError: Account deactivated (`status = false`).
            AuthenticationError: Wrong password.
        """
        vet = await self.store.find_one(VETERINARIANS, {"email": payload.email})
        if vet is None:
            raise NotFoundError(
                resource=RESOURCE,
                message="Lo sentimos, el usuario no se encuentra registrado",
            )
        if not vet.get("status", True):
            raise PermissionDeniedError(message="Lo sentimos, la cuenta está desactivada")
        if not verify_password(payload.password, vet.get("password", "")):
            logger.warning("Failed login for veterinarian %s", vet["_id"])
            raise AuthenticationError(message="Lo sentimos, el password no es el correcto")

        token = create_access_token(str(vet["_id"]))
        profile = {k: v for k, v in vet.items() if k not in PRIVATE_FIELDS}
        return LoginResponse.model_validate({**profile, "token": token})

    def profile(self, veterinarian: Document) -> VeterinarianProfile:
        return VeterinarianProfile.model_validate(veterinarian)

    async def get_veterinarian(self, vet_id: str) -> VeterinarianProfile:
        oid = parse_object_id(vet_id, resource=RESOURCE)
        vet = await self.store.find_by_id(VETERINARIANS, oid, exclude=PRIVATE_FIELDS)
        if vet is None:
            raise NotFoundError(resource=RESOURCE, resource_id=vet_id)
        return VeterinarianProfile.model_validate(vet)

    async def update_profile(
        self,
        veterinarian: Document,
        vet_id: str,
        payload: VeterinarianUpdate,
    ) -> MessageResponse:
        """
        Update the caller's own profile.

        Raises:
            NotFoundError: Malformed id or no such veterinarian.
            PermissionDeniedError: `vet_id` is not the caller.
            ValidationError: Nothing to update, or the new email is taken.
        """
        oid = parse_object_id(vet_id, resource=RESOURCE)
        if oid != veterinarian["_id"]:
            raise PermissionDeniedError(message="Lo sentimos, solo puedes actualizar tu propio perfil")

        changes = payload.changes()
        if not changes:
            raise ValidationError(message="Debes enviar al menos un campo para actualizar")
        if "email" in changes:
            await self._ensure_email_available(changes["email"], current_id=oid)

        changes["updatedAt"] = datetime.now(timezone.utc)
        if not await self.store.update_by_id(VETERINARIANS, oid, changes):
            raise NotFoundError(resource=RESOURCE, resource_id=vet_id)
        logger.info("Veterinarian %s updated profile", vet_id)
        return MessageResponse(message="Perfil actualizado correctamente")

    async def update_password(self, veterinarian: Document, payload: PasswordUpdate) -> MessageResponse:
        vet = await self.store.find_by_id(VETERINARIANS, veterinarian["_id"])
        if vet is None:
            raise NotFoundError(resource=RESOURCE, resource_id=str(veterinarian["_id"]))
        if not verify_password(payload.passwordactual, vet.get("password", "")):
            raise NotFoundError(
                resource=RESOURCE,
                message="Lo sentimos, el password actual no es el correcto",
            )

        await self.store.update_by_id(
            VETERINARIANS,
            vet["_id"],
            {"password": hash_password(payload.passwordnuevo), "updatedAt": datetime.now(timezone.utc)},
        )
        logger.info("Veterinarian %s changed password", vet["_id"])
        return MessageResponse(message="Password actualizado correctamente")
