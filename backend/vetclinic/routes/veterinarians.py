"""
VetClinic Backend — Veterinarian Route Handlers
=================================================

What:  Account endpoints: registration and login (public), profile reads and
       updates, password change (authenticated).

Route Inventory (prefix /api):
    POST /registro                          register a veterinarian
    POST /login                             issue a bearer token
    GET  /perfil                            profile of the caller
    GET  /veterinario/{id}                  profile by id
    PUT  /veterinario/actualizarpassword    change the caller's password
    PUT  /veterinario/{id}                  update the caller's profile

`/veterinario/actualizarpassword` is declared before `/veterinario/{id}`;
both are PUT and the literal path must win.
"""

from fastapi import APIRouter, Depends, Path

from vetclinic.dependencies import get_current_veterinarian, get_veterinarian_service
from vetclinic.schemas.common import ErrorResponse, MessageResponse
from vetclinic.schemas.veterinarian import (
    LoginRequest,
    LoginResponse,
    PasswordUpdate,
    VeterinarianProfile,
    VeterinarianRegister,
    VeterinarianUpdate,
)
from vetclinic.services.veterinarian_service import VeterinarianService
from vetclinic.store.base import Document

router = APIRouter(prefix="/api", tags=["Veterinarios"])

_ID_DESCRIPTION = "ID del veterinario (ObjectId de 24 caracteres hexadecimales)"


@router.post(
    "/registro",
    response_model=MessageResponse,
    responses={400: {"description": "Campos vacíos o email ya registrado.", "model": ErrorResponse}},
    summary="Registrar un veterinario",
)
async def register(
    payload: VeterinarianRegister,
    service: VeterinarianService = Depends(get_veterinarian_service),
) -> MessageResponse:
    return await service.register(payload)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Campos vacíos.", "model": ErrorResponse},
        401: {"description": "Password incorrecto.", "model": ErrorResponse},
        403: {"description": "Cuenta desactivada.", "model": ErrorResponse},
        404: {"description": "Usuario no registrado.", "model": ErrorResponse},
    },
    summary="Iniciar sesión",
    description="Devuelve el perfil del veterinario y un token Bearer.",
)
async def login(
    payload: LoginRequest,
    service: VeterinarianService = Depends(get_veterinarian_service),
) -> LoginResponse:
    return await service.login(payload)


@router.get(
    "/perfil",
    response_model=VeterinarianProfile,
    responses={401: {"description": "No autorizado.", "model": ErrorResponse}},
    summary="Perfil del veterinario autenticado",
)
async def profile(
    veterinarian: Document = Depends(get_current_veterinarian),
    service: VeterinarianService = Depends(get_veterinarian_service),
) -> VeterinarianProfile:
    return service.profile(veterinarian)


@router.get(
    "/veterinario/{vet_id}",
    dependencies=[Depends(get_current_veterinarian)],
    response_model=VeterinarianProfile,
    responses={
        401: {"description": "No autorizado.", "model": ErrorResponse},
        404: {"description": "Veterinario no encontrado o ID no válido.", "model": ErrorResponse},
    },
    summary="Obtener un veterinario por ID",
)
async def get_veterinarian(
    vet_id: str = Path(description=_ID_DESCRIPTION),
    service: VeterinarianService = Depends(get_veterinarian_service),
) -> VeterinarianProfile:
    return await service.get_veterinarian(vet_id)


@router.put(
    "/veterinario/actualizarpassword",
    response_model=MessageResponse,
    responses={
        400: {"description": "Campos vacíos.", "model": ErrorResponse},
        401: {"description": "No autorizado.", "model": ErrorResponse},
        404: {"description": "Password actual incorrecto.", "model": ErrorResponse},
    },
    summary="Actualizar el password del veterinario autenticado",
)
async def update_password(
    payload: PasswordUpdate,
    veterinarian: Document = Depends(get_current_veterinarian),
    service: VeterinarianService = Depends(get_veterinarian_service),
) -> MessageResponse:
    return await service.update_password(veterinarian, payload)


@router.put(
    "/veterinario/{vet_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Campos vacíos, no permitidos o email ya registrado.", "model": ErrorResponse},
        401: {"description": "No autorizado.", "model": ErrorResponse},
        403: {"description": "Solo se puede actualizar el propio perfil.", "model": ErrorResponse},
        404: {"description": "Veterinario no encontrado o ID no válido.", "model": ErrorResponse},
    },
    summary="Actualizar el perfil del veterinario autenticado",
)
async def update_profile(
    payload: VeterinarianUpdate,
    vet_id: str = Path(description=_ID_DESCRIPTION),
    veterinarian: Document = Depends(get_current_veterinarian),
    service: VeterinarianService = Depends(get_veterinarian_service),
) -> MessageResponse:
    return await service.update_profile(veterinarian, vet_id, payload)
