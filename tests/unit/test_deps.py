import uuid
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from storefront.api import deps
from storefront.utils.token_crypto import generate_token


def _bearer(user):
    return f"Bearer {generate_token(user)}"


def test_get_current_user_resolves_token(db_session, user):
    resolved = deps.get_current_user(db=db_session, authorization=_bearer(user))
    assert resolved.id == user.id


@pytest.mark.parametrize(
    "authorization,message",
    [
        (None, "Access token required"),
        ("Basic abc", "Access token required"),
        ("Bearer nope", "Invalid or expired token"),
    ],
)
def test_get_current_user_errors(db_session, authorization, message):
    with pytest.raises(HTTPException) as exc:
        deps.get_current_user(db=db_session, authorization=authorization)
    assert exc.value.status_code == 401
    assert exc.value.detail == message
    assert exc.value.headers == {"WWW-Authenticate": "Bearer"}


def test_get_current_user_unknown_user(db_session):
    ghost = SimpleNamespace(id=uuid.uuid4(), email="ghost@example.com")
    with pytest.raises(HTTPException) as exc:
        deps.get_current_user(db=db_session, authorization=_bearer(ghost))
    assert exc.value.detail == "User not found"


def test_get_optional_user_never_raises(db_session, user):
    assert deps.get_optional_user(db=db_session, authorization=None) is None
    assert deps.get_optional_user(db=db_session, authorization="Bearer junk") is None
    ghost = SimpleNamespace(id=uuid.uuid4(), email="ghost@example.com")
    assert deps.get_optional_user(db=db_session, authorization=_bearer(ghost)) is None
    assert deps.get_optional_user(db=db_session, authorization=_bearer(user)).id == user.id


def test_require_admin(user, admin):
    assert deps.require_admin(admin) is admin
    with pytest.raises(HTTPException) as exc:
        deps.require_admin(user)
    assert exc.value.status_code == 403
    assert exc.value.detail == "Admin access required"
