import uuid

import pytest
from pydantic import ValidationError

from storefront.db import schemas


def test_pagination_build():
    p = schemas.Pagination.build(page=2, limit=10, total=25)
    assert (p.total_pages, p.has_next_page, p.has_prev_page) == (3, True, True)
    last = schemas.Pagination.build(page=3, limit=10, total=25)
    assert last.has_next_page is False
    empty = schemas.Pagination.build(page=1, limit=20, total=0)
    assert (empty.total_pages, empty.has_next_page, empty.has_prev_page) == (0, False, False)


def test_pagination_serializes_camel_case():
    dumped = schemas.Pagination.build(page=1, limit=20, total=1).model_dump(by_alias=True)
    assert set(dumped) == {"page", "limit", "total", "totalPages", "hasNextPage", "hasPrevPage"}


def test_register_request_normalizes_and_validates():
    req = schemas.RegisterRequest(email=" New@Example.COM ", password="secret1", name=" Ann ")
    assert req.email == "new@example.com"
    assert req.name == "Ann"
    with pytest.raises(ValidationError, match="Invalid email format"):
        schemas.RegisterRequest(email="nope", password="secret1", name="Ann")
    with pytest.raises(ValidationError, match="at least 6 characters"):
        schemas.RegisterRequest(email="a@b.co", password="123", name="Ann")
    with pytest.raises(ValidationError, match="Name is required"):
        schemas.RegisterRequest(email="a@b.co", password="secret1", name="   ")


def test_product_create_accepts_camel_and_snake_case():
    cid = uuid.uuid4()
    camel = schemas.ProductCreate.model_validate(
        {"name": "A", "description": "B", "price": 1, "stock": 0, "categoryId": str(cid), "imageUrl": "https://x.io/a.png"}
    )
    snake = schemas.ProductCreate.model_validate(
        {"name": "A", "description": "B", "price": 1, "stock": 0, "category_id": str(cid)}
    )
    assert camel.category_id == snake.category_id == cid
    with pytest.raises(ValidationError, match="valid URL"):
        schemas.ProductCreate.model_validate(
            {"name": "A", "description": "B", "price": 1, "stock": 0, "categoryId": str(cid), "imageUrl": "ftp:/x"}
        )


def test_category_count_uses_underscore_alias():
    from datetime import datetime, timezone

    cat = schemas.Category(
        id=uuid.uuid4(), name="Bags", slug="bags", created_at=datetime.now(timezone.utc), _count={"products": 4}
    )
    dumped = cat.model_dump(by_alias=True)
    assert dumped["_count"] == {"products": 4}
    assert "createdAt" in dumped


def test_order_create_requires_address_and_known_method():
    ok = schemas.OrderCreate.model_validate({"shippingAddress": " 1 Main St ", "paymentMethod": "card"})
    assert ok.shipping_address == "1 Main St"
    with pytest.raises(ValidationError, match="Shipping address is required"):
        schemas.OrderCreate.model_validate({"shippingAddress": "  ", "paymentMethod": "card"})
    with pytest.raises(ValidationError):
        schemas.OrderCreate.model_validate({"shippingAddress": "x", "paymentMethod": "cash"})
