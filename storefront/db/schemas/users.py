import re
import uuid
from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from .common import ApiModel

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Column sizes on the users table
EMAIL_MAX_LENGTH = 255
NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 32


def _validate_email(value: str) -> str:
    cleaned = (value or "").strip().lower()
    if len(cleaned) > EMAIL_MAX_LENGTH or not _EMAIL_RE.match(cleaned):
        raise ValueError("Invalid email format")
    return cleaned


class RegisterRequest(ApiModel):
    email: str
    password: str
    name: str
    phone: Optional[str] = Field(default=None, max_length=PHONE_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str):
        return _validate_email(v)

    @field_validator("password")
    @classmethod
    def _check_password(cls, v: str):
        if len(v or "") < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str):
        s = (v or "").strip()
        if not s:
            raise ValueError("Name is required")
        if len(s) > NAME_MAX_LENGTH:
            raise ValueError(f"Name must be at most {NAME_MAX_LENGTH} characters")
        return s


class LoginRequest(ApiModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str):
        return _validate_email(v)

    @field_validator("password")
    @classmethod
    def _check_password(cls, v: str):
        if not v:
            raise ValueError("Password is required")
        return v


class ProfileUpdate(ApiModel):
    name: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=PHONE_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: Optional[str]):
        if v is None:
            return v
        s = v.strip()
        if len(s) == 0 or len(s) > NAME_MAX_LENGTH:
            raise ValueError(f"name must be 1..{NAME_MAX_LENGTH} characters")
        return s


class UserPublic(ApiModel):
    id: uuid.UUID
    email: str
    name: str
    phone: Optional[str] = None


class UserProfile(UserPublic):
    is_admin: bool = False
    created_at: datetime


class AuthPayload(ApiModel):
    token: str
    user: UserPublic


class AdminUserUpdate(ApiModel):
    is_admin: bool
