"""
Authentication API endpoints.

Registration, login, profile and logout. Access tokens are stateless JWTs;
logout only acknowledges so the client can discard its token.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.db import models, schemas
from storefront.db.database import get_db
from storefront.db.repositories import users as user_repo
from storefront.utils.settings import get_settings
from storefront.utils.token_crypto import (
    generate_token,
    hash_password,
    password_needs_rehash,
    verify_password,
)

logger = logging.getLogger("storefront.auth")

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_payload(user: models.User) -> schemas.AuthPayload:
    return schemas.AuthPayload(
        token=generate_token(user),
        user=schemas.UserPublic.model_validate(user),
    )


@router.post(
    "/register",
    response_model=schemas.ApiResponse[schemas.AuthPayload],
    status_code=status.HTTP_201_CREATED,
)
def register(payload: schemas.RegisterRequest, db: Session = Depends(get_db)):
    if user_repo.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    is_admin = payload.email in get_settings().admin_emails
    user = user_repo.create_user(db, payload, is_admin=is_admin)
    logger.info("user_registered id=%s admin=%s", user.id, is_admin)
    return schemas.ApiResponse(data=_auth_payload(user), message="User registered successfully")


@router.post("/login", response_model=schemas.ApiResponse[schemas.AuthPayload])
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    user = user_repo.get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("login_failed email=%s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    if password_needs_rehash(user.password_hash):
        user_repo.set_password_hash(db, user, hash_password(payload.password))
    user_repo.promote_if_listed(db, user, get_settings().admin_emails)
    return schemas.ApiResponse(data=_auth_payload(user), message="Login successful")


@router.get("/me", response_model=schemas.ApiResponse[schemas.UserProfile])
def get_me(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    fresh = user_repo.get_user(db, user.id)
    if not fresh:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return schemas.ApiResponse(data=schemas.UserProfile.model_validate(fresh))


@router.patch("/me", response_model=schemas.ApiResponse[schemas.UserProfile])
def update_me(
    payload: schemas.ProfileUpdate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    updated = user_repo.update_profile(db, user, payload)
    return schemas.ApiResponse(data=schemas.UserProfile.model_validate(updated), message="Profile updated")


@router.post("/logout", response_model=schemas.ApiResponse[None])
def logout(user: models.User = Depends(get_current_user)):
    return schemas.ApiResponse(message="Logged out successfully")
