"""
VetClinic Backend — Patient Service (Business Logic)
======================================================

What:  List / detail / create / update / delete for patient records.
Why:   Keeps ownership scoping, identifier validation and field whitelisting
       out of the route handlers, and testable against MemoryStore.
How:   Receives a DocumentStore in its constructor; never imports a client.
Who:   Constructed per request by `dependencies.get_patient_service`.

Rules enforced here:
    - List only returns active patients (`estado = true`) owned by the caller.
    - Malformed identifiers raise NotFoundError before any store call.
    - A well-formed identifier that matches nothing raises NotFoundError
      for detail, update and delete alike.
    - The owner of a new patient must exist when it is registered.
    - Timestamps (`createdAt`, `updatedAt`) are always server-set.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from bson import ObjectId

from vetclinic.config import settings
from vetclinic.exceptions import NotFoundError, ValidationError
from vetclinic.schemas.common import MessageResponse
from vetclinic.schemas.patient import (
    PatientCreate,
    PatientCreated,
    PatientDetail,
    PatientSummary,
    PatientUpdate,
)
from vetclinic.store.base import (
    PATIENTS,
    VETERINARIANS,
    Document,
    DocumentStore,
    is_valid_object_id,
)

logger = logging.getLogger(__name__)

RESOURCE = "paciente"

# Fields dropped from list items and from the detail view respectively
LIST_EXCLUDED_FIELDS = ("salida", "createdAt", "updatedAt", "__v")
DETAIL_EXCLUDED_FIELDS = ("createdAt", "updatedAt", "__v")

OWNER_MISSING_MESSAGE = "El veterinario no existe"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def parse_object_id(value: str, resource: str = RESOURCE) -> ObjectId:
    """Convert a path identifier, or raise NotFoundError naming it."""
    if not is_valid_object_id(value):
        raise NotFoundError(resource=resource, resource_id=value)
    return ObjectId(value)


class PatientService:
    """
    Patient operations scoped to an authenticated veterinarian.

    Args:
        store: Document store holding the `pacientes` and `veterinarios` collections.
        legacy_owner_from_body: Take the new patient's owner from the body's
            `id` field instead of the caller. Defaults to LEGACY_OWNER_FROM_BODY.
    """

    def __init__(
        self,
        store: DocumentStore,
        legacy_owner_from_body: Optional[bool] = None,
    ) -> None:
        self.store = store
        if legacy_owner_from_body is None:
            legacy_owner_from_body = settings.legacy_owner_from_body
        self.legacy_owner_from_body = legacy_owner_from_body

    async def _owner_summaries(self, owner_ids: Iterable[ObjectId]) -> Dict[ObjectId, Document]:
        """Expand owner references to {_id, nombre, apellido}, one lookup per owner."""
        summaries: Dict[ObjectId, Document] = {}
        for owner_id in set(owner_ids):
            if owner_id is None:
                continue
            vet = await self.store.find_by_id(VETERINARIANS, owner_id, exclude=("password",))
            if vet is not None:
                summaries[owner_id] = {
                    "_id": vet["_id"],
                    "nombre": vet.get("nombre", ""),
                    "apellido": vet.get("apellido", ""),
                }
        return summaries

    async def list_patients(self, veterinarian: Document) -> List[PatientSummary]:
        """Active patients of `veterinarian`, in the store's natural order."""
        owner_id = veterinarian["_id"]
        documents = await self.store.find(
            PATIENTS,
            {"estado": True, "veterinario": owner_id},
            exclude=LIST_EXCLUDED_FIELDS,
        )
        owners = await self._owner_summaries([owner_id])
        return [
            PatientSummary.model_validate({**doc, "veterinario": owners.get(doc.get("veterinario"))})
            for doc in documents
        ]

    async def get_patient(self, patient_id: str) -> PatientDetail:
        """
        Fetch one patient regardless of `estado`.

        Raises:
            NotFoundError: Malformed id (no lookup) or no such patient.
        """
        oid = parse_object_id(patient_id)
        doc = await self.store.find_by_id(PATIENTS, oid, exclude=DETAIL_EXCLUDED_FIELDS)
        if doc is None:
            raise NotFoundError(resource=RESOURCE, resource_id=patient_id)

        owners = await self._owner_summaries([doc.get("veterinario")])
        return PatientDetail.model_validate({**doc, "veterinario": owners.get(doc.get("veterinario"))})

    async def _resolve_owner(self, veterinarian: Document, payload: PatientCreate) -> ObjectId:
        caller = await self.store.find_by_id(VETERINARIANS, veterinarian["_id"], exclude=("password",))
        if caller is None:
            logger.warning("Patient registration rejected: veterinarian %s no longer exists", veterinarian["_id"])
            raise ValidationError(message=OWNER_MISSING_MESSAGE, field="veterinario")

        if not self.legacy_owner_from_body or payload.id is None:
            return caller["_id"]

        if not is_valid_object_id(payload.id):
            raise ValidationError(message=OWNER_MISSING_MESSAGE, field="id")
        owner = await self.store.find_by_id(VETERINARIANS, ObjectId(payload.id), exclude=("password",))
        if owner is None:
            raise ValidationError(message=OWNER_MISSING_MESSAGE, field="id")
        return owner["_id"]

    async def create_patient(self, veterinarian: Document, payload: PatientCreate) -> PatientCreated:
        """
        Register a new patient.

        Raises:
            ValidationError: The owning veterinarian does not exist (nothing is written).
        """
        owner_id = await self._resolve_owner(veterinarian, payload)

        now = _now()
        document = payload.model_dump(exclude={"id"})
        document["ingreso"] = document.get("ingreso") or now
        document["salida"] = document.get("salida") or now
        document["veterinario"] = owner_id
        document["createdAt"] = now
        document["updatedAt"] = now

        patient_id = await self.store.insert(PATIENTS, document)
        logger.info("Patient %s registered for veterinarian %s", patient_id, owner_id)
        return PatientCreated(message="Registro exitoso del paciente", id=str(patient_id))

    async def update_patient(self, patient_id: str, payload: PatientUpdate) -> MessageResponse:
        """
        Apply a partial update limited to the whitelisted patient fields.

        Raises:
            NotFoundError: Malformed id or no such patient.
            ValidationError: The body carries no field to update.
        """
        oid = parse_object_id(patient_id)
        changes = payload.changes()
        if not changes:
            raise ValidationError(message="Debes enviar al menos un campo para actualizar")

        changes["updatedAt"] = _now()
        matched = await self.store.update_by_id(PATIENTS, oid, changes)
        if not matched:
            raise NotFoundError(resource=RESOURCE, resource_id=patient_id)

        logger.info("Patient %s updated: %s", patient_id, sorted(k for k in changes if k != "updatedAt"))
        return MessageResponse(message="Actualización exitosa del paciente")

    async def delete_patient(self, patient_id: str) -> None:
        """
        Hard-delete a patient, whatever its `estado`.

        Raises:
            NotFoundError: Malformed id or nothing was deleted.
        """
        oid = parse_object_id(patient_id)
        deleted = await self.store.delete_by_id(PATIENTS, oid)
        if not deleted:
            raise NotFoundError(resource=RESOURCE, resource_id=patient_id)
        logger.info("Patient %s deleted", patient_id)
