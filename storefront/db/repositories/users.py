"""
User repository functions.

Account creation, credential lookups, profile updates and the admin user
listing.
"""
from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from storefront.db import models, schemas
from storefront.db.like import LIKE_ESCAPE, contains_pattern
from storefront.utils.token_crypto import hash_password


def normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.strip().lower()


def get_user(db: Session, user_id: uuid.UUID) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == normalize_email(email)).first()


def create_user(db: Session, payload: schemas.RegisterRequest, *, is_admin: bool = False) -> models.User:
    user = models.User(
        email=normalize_email(payload.email),
        password_hash=hash_password(payload.password),
        name=payload.name,
        phone=payload.phone or None,
        is_admin=is_admin,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_profile(db: Session, user: models.User, payload: schemas.ProfileUpdate) -> models.User:
    for key, value in payload.model_dump(exclude_unset=True).items():
        if key == "name" and value is None:
            continue
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def set_password_hash(db: Session, user: models.User, password_hash: str) -> None:
    user.password_hash = password_hash
    db.commit()


def promote_if_listed(db: Session, user: models.User, admin_emails: Iterable[str]) -> models.User:
    """Grant admin to users whose email appears in ``admin_emails``."""
    if user.email in set(admin_emails) and not user.is_admin:
        user.is_admin = True
        db.commit()
        db.refresh(user)
    return user


def set_admin(db: Session, user: models.User, is_admin: bool) -> models.User:
    user.is_admin = bool(is_admin)
    db.commit()
    db.refresh(user)
    return user


def list_users(
    db: Session,
    *,
    offset: int = 0,
    limit: int = 20,
    search: Optional[str] = None,
) -> Tuple[List[models.User], int]:
    q = db.query(models.User)
    if search:
        pattern = contains_pattern(search)
        q = q.filter(
            or_(
                models.User.email.ilike(pattern, escape=LIKE_ESCAPE),
                models.User.name.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
    total = q.order_by(None).count()
    users = q.order_by(models.User.created_at.desc()).offset(offset).limit(limit).all()
    return users, total


def count_users(db: Session) -> int:
    return db.query(func.count(models.User.id)).scalar() or 0
