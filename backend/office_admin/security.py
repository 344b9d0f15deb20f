"""Password hashing and access-token helpers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from .config import Settings
from .models import Admin
from .schemas import Token, TokenData, compute_expiry

ALGORITHM = "HS256"

# admin passwords are stored as pbkdf2_sha256 hashes; no native backend needed
password_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    """Hash a password for storage."""
    return password_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against the stored hash."""
    return password_context.verify(password, password_hash)


def token_payload(admin: Admin) -> dict[str, Any]:
    """
    Generate the JWT payload for a given admin.

    create_access_token() will add "exp" on top of this.
    """
    return {
        "id": admin.id,
        "iat": int(datetime.now(timezone.utc).timestamp()),
    }


def create_access_token(admin: Admin, settings: Settings) -> Token:
    """Sign a token for `admin` that expires after the configured lifetime."""

    expires_at = compute_expiry(settings.access_token_expires_minutes)
    encoded = jwt.encode(
        {**token_payload(admin), "exp": int(expires_at.timestamp())},
        settings.jwt_secret,
        algorithm=ALGORITHM,
    )
    return Token(token=encoded, expires_at=expires_at)


def decode_access_token(token: str, settings: Settings) -> TokenData:
    """Decode a JWT access token and return its payload.

    Raises ``jwt.PyJWTError`` when the signature is wrong or the token expired.
    """

    payload: Dict[str, Any] = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[ALGORITHM],
    )
    try:
        return TokenData.model_validate(payload)
    except PydanticValidationError as exc:
        raise jwt.InvalidTokenError("Token payload carries no admin id") from exc
