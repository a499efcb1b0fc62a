"""
VetClinic Backend — FastAPI Dependencies
==========================================

What:  Store access, per-request service construction and bearer authentication.
Why:   Routes declare what they need (`Depends(...)`); the document store comes
       from `app.state.store`, so tests swap in a MemoryStore through
       `create_app(store=...)` without patching globals.
"""

import logging
from typing import Optional

from bson import ObjectId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from vetclinic.exceptions import AuthenticationError, DatabaseError
from vetclinic.services.patient_service import PatientService
from vetclinic.services.security import decode_access_token
from vetclinic.services.veterinarian_service import PRIVATE_FIELDS, VeterinarianService
from vetclinic.store.base import VETERINARIANS, Document, DocumentStore

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is reported as 401 by us, not by FastAPI
bearer_scheme = HTTPBearer(
    auto_error=False,
    scheme_name="BearerAuth",
    description="Token returned by POST /api/login",
)


def get_store(request: Request) -> DocumentStore:
    store: Optional[DocumentStore] = getattr(request.app.state, "store", None)
    if store is None:
        raise DatabaseError(context={"reason": "document store not initialized"})
    return store


def get_patient_service(store: DocumentStore = Depends(get_store)) -> PatientService:
    return PatientService(store)


def get_veterinarian_service(store: DocumentStore = Depends(get_store)) -> VeterinarianService:
    return VeterinarianService(store)


async def get_current_veterinarian(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: DocumentStore = Depends(get_store),
) -> Document:
    """
    Resolve `Authorization: Bearer <token>` to a veterinarian document.

    Expects:
        Authorization: Bearer <token issued by /api/login>

    Returns:
        The veterinarian document without its password hash.

    Raises:
        AuthenticationError: Missing or invalid token, or the veterinarian
            no longer exists. The route handler is never invoked.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(message="Lo sentimos, debes proporcionar un token")

    vet_id = decode_access_token(credentials.credentials)
    vet = await store.find_by_id(VETERINARIANS, ObjectId(vet_id), exclude=PRIVATE_FIELDS)
    if vet is None:
        logger.warning("Token subject %s does not match any veterinarian", vet_id)
        raise AuthenticationError(context={"reason": "unknown subject"})
    return vet
