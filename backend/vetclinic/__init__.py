"""
VetClinic Backend — Application Package Initializer
=====================================================

What: Marks the `vetclinic` directory as a Python package.
Why:  Enables module imports like `from vetclinic.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership scoping, validation
    ├─────────────────────────────────────┤
    │             Schemas (Data)          │  ← Pydantic API contracts
    ├─────────────────────────────────────┤
    │        Document Store (Persistence) │  ← MongoDB or in-memory
    └─────────────────────────────────────┘

    Routes never touch the store directly; services receive the store as a
    constructor argument, so every layer below HTTP runs without MongoDB.
"""

__version__ = "1.0.0"
