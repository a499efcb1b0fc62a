"""
VetClinic Backend — OpenAPI Document Builder
==============================================

What:  Builds the OpenAPI 3.1 description served at /api/docs.json and
       rendered by Swagger UI at /api/docs.
How:   fastapi.openapi.utils.get_openapi introspects the mounted routes and
       the pydantic schemas they reference; the result is cached on the app.
When:  Forced once during startup (see main.lifespan) so a broken schema
       stops the server instead of failing on the first docs request.
"""

from typing import Any, Dict

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from vetclinic import __version__
from vetclinic.config import settings

TITLE = "Swagger Veterinary"

TAGS = [
    {"name": "Veterinarios", "description": "Registro, inicio de sesión y perfil de veterinarios."},
    {"name": "Pacientes", "description": "Gestión de pacientes del veterinario autenticado."},
    {"name": "Health", "description": "Estado del servicio."},
]


def build_openapi(app: FastAPI) -> Dict[str, Any]:
    """Return the cached OpenAPI document, generating it on first use."""
    if app.openapi_schema:
        return app.openapi_schema

    servers = [{"url": settings.public_url}] if settings.public_url else None
    schema = get_openapi(
        title=TITLE,
        version=__version__,
        description=app.description,
        routes=app.routes,
        tags=TAGS,
        servers=servers,
    )
    app.openapi_schema = schema
    return schema


def install_docs(app: FastAPI) -> None:
    """Replace FastAPI's default generator with build_openapi."""
    def openapi() -> Dict[str, Any]:
        return build_openapi(app)

    app.openapi = openapi
