"""
VetClinic Backend — Patient Route Handlers
============================================

What:  CRUD endpoints over patient records, all behind bearer authentication.
How:   Each handler resolves the caller and a PatientService via Depends()
       and returns what the service returns. Errors are raised by the
       service and rendered by the global exception handlers.

Route Inventory (prefix /api):
    GET    /pacientes                   list active patients of the caller
    GET    /paciente/{id}               patient detail
    POST   /paciente/registro           register a patient (200, not 201)
    PUT    /paciente/actualizar/{id}    partial update
    DELETE /paciente/eliminar/{id}      hard delete (204)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Response

from vetclinic.dependencies import get_current_veterinarian, get_patient_service
from vetclinic.schemas.common import ErrorResponse, MessageResponse
from vetclinic.schemas.patient import (
    PatientCreate,
    PatientCreated,
    PatientDetail,
    PatientSummary,
    PatientUpdate,
)
from vetclinic.services.patient_service import PatientService
from vetclinic.store.base import Document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Pacientes"])

_ID_DESCRIPTION = "ID del paciente (ObjectId de 24 caracteres hexadecimales)"

_AUTH_ERRORS = {
    401: {"description": "No autorizado, se requiere autenticación.", "model": ErrorResponse},
    500: {"description": "Error interno del servidor.", "model": ErrorResponse},
}


@router.get(
    "/pacientes",
    response_model=List[PatientSummary],
    responses={**_AUTH_ERRORS},
    summary="Obtener lista de pacientes.",
    description="Obtiene los pacientes activos registrados por el veterinario autenticado.",
)
async def list_patients(
    veterinarian: Document = Depends(get_current_veterinarian),
    service: PatientService = Depends(get_patient_service),
) -> List[PatientSummary]:
    return await service.list_patients(veterinarian)


@router.get(
    "/paciente/{patient_id}",
    dependencies=[Depends(get_current_veterinarian)],
    response_model=PatientDetail,
    responses={
        404: {"description": "Paciente no encontrado o ID no válido.", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Obtener detalles de un paciente por ID",
    description="Obtiene los detalles de un paciente según su ID, sin importar su estado.",
)
async def get_patient(
    patient_id: str = Path(description=_ID_DESCRIPTION),
    service: PatientService = Depends(get_patient_service),
) -> PatientDetail:
    return await service.get_patient(patient_id)


@router.post(
    "/paciente/registro",
    response_model=PatientCreated,
    responses={
        400: {"description": "Campos vacíos o veterinario inexistente.", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Registrar un nuevo paciente",
    description="Registra un nuevo paciente a nombre del veterinario autenticado.",
)
async def register_patient(
    payload: PatientCreate,
    veterinarian: Document = Depends(get_current_veterinarian),
    service: PatientService = Depends(get_patient_service),
) -> PatientCreated:
    return await service.create_patient(veterinarian, payload)


@router.put(
    "/paciente/actualizar/{patient_id}",
    dependencies=[Depends(get_current_veterinarian)],
    response_model=MessageResponse,
    responses={
        400: {"description": "Campos vacíos o no permitidos.", "model": ErrorResponse},
        404: {"description": "Paciente no encontrado o ID no válido.", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Actualizar paciente por ID",
    description="Actualiza parcialmente los datos de un paciente existente.",
)
async def update_patient(
    payload: PatientUpdate,
    patient_id: str = Path(description=_ID_DESCRIPTION),
    service: PatientService = Depends(get_patient_service),
) -> MessageResponse:
    return await service.update_patient(patient_id, payload)


@router.delete(
    "/paciente/eliminar/{patient_id}",
    dependencies=[Depends(get_current_veterinarian)],
    status_code=204,
    response_class=Response,
    responses={
        204: {"description": "Paciente eliminado con éxito."},
        404: {"description": "Paciente no encontrado o ID no válido.", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Eliminar paciente por ID",
    description="Elimina definitivamente un paciente, sin importar su estado.",
)
async def delete_patient(
    patient_id: str = Path(description=_ID_DESCRIPTION),
    service: PatientService = Depends(get_patient_service),
) -> Response:
    await service.delete_patient(patient_id)
    return Response(status_code=204)
