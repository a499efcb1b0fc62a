"""
VetClinic Backend — Credential Helpers
========================================

What:  Password hashing (bcrypt) and bearer token issuance/verification (PyJWT).
Who:   VeterinarianService (register, login, password change) and the
       authentication dependency.

Token format:
    HS256 JWT with payload {"id": "<veterinarian ObjectId>", "iat", "exp"}.
    Expiry defaults to 24 hours (JWT_EXPIRE_HOURS).
"""

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from vetclinic.config import settings
from vetclinic.exceptions import AuthenticationError
from vetclinic.store.base import is_valid_object_id

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Formato del token no válido"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash has an invalid format")
        return False


def create_access_token(vet_id: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": str(vet_id),
        "iat": now,
        "exp": now + timedelta(hours=settings.jwt_expire_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """
    Verify a bearer token and return the veterinarian id it was issued for.

    Raises:
        AuthenticationError: Expired, tampered, malformed, or without a valid `id`.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError(
            message="El token ha expirado",
            context={"reason": "expired"},
        ) from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(
            message=INVALID_TOKEN_MESSAGE,
            context={"reason": type(e).__name__},
        ) from e

    vet_id = payload.get("id")
    if not is_valid_object_id(vet_id):
        raise AuthenticationError(
            message=INVALID_TOKEN_MESSAGE,
            context={"reason": "invalid subject"},
        )
    return vet_id
