"""
Product repository functions.

Filtered/paginated listing through the product query builder, featured and
search lookups, and admin CRUD.
"""
from __future__ import annotations

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from storefront.db import models, schemas
from storefront.db.product_query import (
    ProductFilters,
    apply_pagination,
    apply_product_filters,
    apply_product_ordering,
    apply_text_search,
)

FEATURED_LIMIT = 8
SEARCH_LIMIT = 10


def _with_category(q):
    return q.options(joinedload(models.Product.category))


def list_products(db: Session, filters: ProductFilters) -> Tuple[List[models.Product], int]:
    base = apply_product_filters(db.query(models.Product), filters)
    total = base.count()
    q = apply_pagination(apply_product_ordering(_with_category(base), filters), filters)
    return q.all(), total


def get_product(db: Session, product_id: uuid.UUID) -> Optional[models.Product]:
    return _with_category(db.query(models.Product)).filter(models.Product.id == product_id).first()


def featured_products(db: Session, limit: int = FEATURED_LIMIT) -> List[models.Product]:
    return (
        _with_category(db.query(models.Product))
        .order_by(models.Product.created_at.desc(), models.Product.id.asc())
        .limit(limit)
        .all()
    )


def search_products(db: Session, text: str, limit: int = SEARCH_LIMIT) -> List[models.Product]:
    q = apply_text_search(_with_category(db.query(models.Product)), text)
    return q.order_by(models.Product.name.asc()).limit(limit).all()


def create_product(db: Session, payload: schemas.ProductCreate) -> models.Product:
    product = models.Product(**payload.model_dump())
    db.add(product)
    db.commit()
    return get_product(db, product.id)


def update_product(db: Session, product: models.Product, payload: schemas.ProductUpdate) -> models.Product:
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key != "image_url":
            continue
        setattr(product, key, value)
    db.commit()
    db.expire(product)
    return get_product(db, product.id)


def has_order_items(db: Session, product_id: uuid.UUID) -> bool:
    return (
        db.query(models.OrderItem.id).filter(models.OrderItem.product_id == product_id).first()
        is not None
    )


def delete_product(db: Session, product: models.Product) -> None:
    # Cart lines go with the product; order history blocks deletion upstream
    db.query(models.CartItem).filter(models.CartItem.product_id == product.id).delete(synchronize_session=False)
    db.delete(product)
    db.commit()


def count_products(db: Session) -> int:
    return db.query(func.count(models.Product.id)).scalar() or 0


def count_low_stock(db: Session, threshold: int) -> int:
    return db.query(func.count(models.Product.id)).filter(models.Product.stock <= threshold).scalar() or 0
