"""
VetClinic Backend — Shared Pydantic Schemas
=============================================

What:  Building blocks reused by the patient and veterinarian schemas, plus the
       response envelopes shared by every endpoint.
Why:   One place for the "no empty fields" rule and the error format, so every
       route validates and fails the same way.
"""

from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, Field, model_validator
from pydantic_core import PydanticCustomError

EMPTY_FIELDS_MESSAGE = "Lo sentimos, debes llenar todos los campos"


def _object_id_to_str(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


# Serializes bson.ObjectId values coming out of the store as 24-char hex strings
ObjectIdStr = Annotated[str, BeforeValidator(_object_id_to_str)]


def _number_to_str(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# Phone numbers arrive as JSON numbers from some clients; stored as text
PhoneStr = Annotated[str, BeforeValidator(_number_to_str)]


class RequestModel(BaseModel):
    """
    Base class for request bodies.

    Rejects any submitted string field that is empty (or whitespace only)
    before field validation runs, including fields the model does not declare.
    The error type `empty_field` is rendered as a 400 by the global handler.
    """

    model_config = {"str_strip_whitespace": True}

    @model_validator(mode="before")
    @classmethod
    def reject_empty_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for key, value in data.items():
                if isinstance(value, str) and not value.strip():
                    raise PydanticCustomError(
                        "empty_field",
                        EMPTY_FIELDS_MESSAGE,
                        {"field": key},
                    )
        return data


class MessageResponse(BaseModel):
    """Success envelope for mutations that return no resource."""
    message: str = Field(description="Human-readable result message")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Lo sentimos, no existe el paciente con ID not-an-id",
            "details": {"resource": "paciente", "resource_id": "not-an-id"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and document store status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Document store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
