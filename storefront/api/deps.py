"""
API dependency helpers.

Bearer-token authentication chain for routes:
- ``get_current_user``: token required, 401 otherwise
- ``get_optional_user``: token optional, failures fall back to anonymous
- ``require_admin``: authenticated and ``is_admin``, 403 otherwise
"""
import logging
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from storefront.db import models
from storefront.db.database import get_db
from storefront.db.repositories import users as user_repo
from storefront.utils.ids import coerce_uuid
from storefront.utils.token_crypto import parse_bearer, verify_token

logger = logging.getLogger("storefront.auth")


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_user_from_token(db: Session, token: str) -> models.User:
    """Verify ``token`` and load its user, raising 401 on any failure."""
    try:
        payload = verify_token(token)
    except jwt.PyJWTError as e:
        logger.info("token_rejected reason=%s", type(e).__name__)
        raise _unauthorized("Invalid or expired token")

    user_id = coerce_uuid(payload.get("userId"))
    if user_id is None:
        raise _unauthorized("Invalid or expired token")
    user = user_repo.get_user(db, user_id)
    if not user:
        raise _unauthorized("User not found")
    return user


def get_current_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
) -> models.User:
    token = parse_bearer(authorization)
    if not token:
        raise _unauthorized("Access token required")
    return resolve_user_from_token(db, token)


def get_optional_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
) -> Optional[models.User]:
    token = parse_bearer(authorization)
    if not token:
        return None
    try:
        return resolve_user_from_token(db, token)
    except HTTPException:
        return None


def require_admin(user: models.User = Depends(get_current_user)) -> models.User:
    if not user.is_admin:
        logger.warning("admin_required_denied user=%s", user.email)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
