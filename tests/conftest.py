import os

# Settings are read at import time by the app module; pin them first.
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("RATE_LIMIT_MAX", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from storefront.api.main import app
from storefront.api.rate_limit import RateLimiter
from storefront.db import database, models
from storefront.utils.settings import refresh_settings_cache
from storefront.utils.token_crypto import generate_token, hash_password

TEST_PASSWORD = "password123"
_password_hash_cache = {}


def _password_hash(password: str) -> str:
    # Argon2 is slow; hash each distinct password once per run
    if password not in _password_hash_cache:
        _password_hash_cache[password] = hash_password(password)
    return _password_hash_cache[password]


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
    monkeypatch.setenv("JWT_EXPIRES_IN", "7d")
    monkeypatch.delenv("ADMIN_EMAILS", raising=False)
    refresh_settings_cache()
    app.state.rate_limiter = RateLimiter(0, 60)
    yield
    refresh_settings_cache()


@pytest.fixture(autouse=True)
def _database():
    """Fresh schema per test on the in-memory SQLite engine."""
    models.Base.metadata.create_all(bind=database.engine)
    yield
    models.Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def db_session(_database):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def user_factory(db_session):
    counter = {"n": 0}

    def _create(email=None, *, is_admin=False, name="Test User", password=TEST_PASSWORD, phone=None):
        counter["n"] += 1
        user = models.User(
            email=(email or f"user{counter['n']}@example.com").lower(),
            password_hash=_password_hash(password),
            name=name,
            phone=phone,
            is_admin=is_admin,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {generate_token(user)}"}

    return _headers


@pytest.fixture
def user(user_factory):
    return user_factory("shopper@example.com", name="Shopper")


@pytest.fixture
def admin(user_factory):
    return user_factory("admin@example.com", is_admin=True, name="Admin")


@pytest.fixture
def category_factory(db_session):
    def _create(name="Clothing", slug=None, description=None):
        category = models.Category(name=name, slug=slug or name.lower(), description=description)
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category

    return _create


@pytest.fixture
def product_factory(db_session, category_factory):
    state = {"category": None}

    def _create(name="Denim Jacket", *, price=89000, stock=10, category=None, description=None, image_url=None):
        if category is None:
            if state["category"] is None:
                state["category"] = category_factory("Default", "default")
            category = state["category"]
        product = models.Product(
            name=name,
            description=description or f"{name} description",
            price=price,
            stock=stock,
            image_url=image_url,
            category_id=category.id,
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _create
