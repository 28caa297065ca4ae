"""
Password hashing and access token signing utilities.

Responsibilities:
- Hash passwords with Argon2id and verify them in constant time
- Sign access tokens (JWT) carrying ``userId`` and ``email``
- Verify and decode tokens issued by this service
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from argon2.low_level import Type

from storefront.utils.settings import get_settings

_argon2 = PasswordHasher(time_cost=2, memory_cost=102400, parallelism=8, hash_len=32, type=Type.ID)


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return _argon2.hash(password)


def verify_password(password: str, encoded_hash: str) -> bool:
    if not password or not encoded_hash:
        return False
    try:
        return _argon2.verify(encoded_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def password_needs_rehash(encoded_hash: str) -> bool:
    return _argon2.check_needs_rehash(encoded_hash)


def generate_token(user) -> str:
    """Return a signed access token for ``user`` (anything with ``id`` and ``email``)."""
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    payload = {
        "userId": str(user.id),
        "email": user.email,
        "iat": issued_at,
        "exp": issued_at + settings.jwt_expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry and return the payload.

    Raises ``jwt.PyJWTError`` on any failure, including a payload without
    ``userId``.
    """
    settings = get_settings()
    payload = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["exp", "userId"]},
    )
    return payload


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode a token without verifying it; returns None when malformed."""
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[7:].strip()
    return token or None
