"""
VetClinic Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test runs against a fresh MemoryStore; no MongoDB needed.

Fixture Hierarchy (all function-scoped):
    ├── memory_store: empty in-memory document store
    ├── vet_one / vet_two: veterinarians seeded into memory_store
    ├── patient_body: fully populated registration body
    └── test_client: HTTPX AsyncClient bound to an app using memory_store
"""

import os

# Settings are read at import time; configure them before any vetclinic import
os.environ["DATABASE_BACKEND"] = "memory"
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LEGACY_OWNER_FROM_BODY"] = "false"

from datetime import datetime, timezone
from typing import Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from vetclinic.services.security import create_access_token, hash_password
from vetclinic.store import VETERINARIANS, MemoryStore

VET_PASSWORD = "clave-segura"


async def _seed_vet(store: MemoryStore, nombre: str, apellido: str, email: str, status: bool = True) -> Dict:
    now = datetime.now(timezone.utc)
    doc = {
        "nombre": nombre,
        "apellido": apellido,
        "direccion": "Av. Siempre Viva 742",
        "telefono": "0999999999",
        "email": email,
        "password": hash_password(VET_PASSWORD),
        "status": status,
        "createdAt": now,
        "updatedAt": now,
    }
    doc["_id"] = await store.insert(VETERINARIANS, doc)
    return {k: v for k, v in doc.items() if k != "password"}


def auth_headers(vet: Dict) -> Dict[str, str]:
    """Authorization header carrying a valid token for `vet`."""
    return {"Authorization": f"Bearer {create_access_token(str(vet['_id']))}"}


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest_asyncio.fixture
async def vet_one(memory_store):
    return await _seed_vet(memory_store, "Ana", "Pérez", "ana@clinica.com")


@pytest_asyncio.fixture
async def vet_two(memory_store):
    return await _seed_vet(memory_store, "Luis", "Mora", "luis@clinica.com")


@pytest_asyncio.fixture
async def inactive_vet(memory_store):
    return await _seed_vet(memory_store, "Eva", "Ruiz", "eva@clinica.com", status=False)


@pytest.fixture
def patient_body():
    """A fully populated patient registration body."""
    return {
        "nombre": "Max",
        "propietario": "Juan Torres",
        "email": "juan@correo.com",
        "celular": "0987654321",
        "convencional": "022312456",
        "sintomas": "vómito y fiebre",
    }


@pytest_asyncio.fixture
async def test_client(memory_store):
    """
    HTTPX AsyncClient routed straight into a fresh app.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    from vetclinic.main import create_app

    app = create_app(store=memory_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
