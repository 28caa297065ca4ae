"""
Category repository functions.

Category listing with product counts, lookups by id or slug with the newest
products attached, and admin CRUD.
"""
from __future__ import annotations

import uuid
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.db import models

RECENT_PRODUCTS_LIMIT = 10


def product_counts(db: Session, category_ids: Optional[List[uuid.UUID]] = None) -> Dict[uuid.UUID, int]:
    q = db.query(models.Product.category_id, func.count(models.Product.id))
    if category_ids is not None:
        if not category_ids:
            return {}
        q = q.filter(models.Product.category_id.in_(category_ids))
    rows = q.group_by(models.Product.category_id).all()
    return {row[0]: int(row[1]) for row in rows}


def list_categories(db: Session) -> List[Tuple[models.Category, int]]:
    categories = db.query(models.Category).order_by(models.Category.name.asc()).all()
    counts = product_counts(db, [c.id for c in categories])
    return [(c, counts.get(c.id, 0)) for c in categories]


def get_category(db: Session, category_id: uuid.UUID) -> Optional[models.Category]:
    return db.query(models.Category).filter(models.Category.id == category_id).first()


def get_category_by_slug(db: Session, slug: str) -> Optional[models.Category]:
    return db.query(models.Category).filter(models.Category.slug == slug).first()


def recent_products(db: Session, category_id: uuid.UUID, limit: int = RECENT_PRODUCTS_LIMIT) -> List[models.Product]:
    return (
        db.query(models.Product)
        .filter(models.Product.category_id == category_id)
        .order_by(models.Product.created_at.desc(), models.Product.id.asc())
        .limit(limit)
        .all()
    )


def slug_taken(db: Session, slug: str, *, exclude_id: Optional[uuid.UUID] = None) -> bool:
    q = db.query(models.Category.id).filter(models.Category.slug == slug)
    if exclude_id is not None:
        q = q.filter(models.Category.id != exclude_id)
    return q.first() is not None


def create_category(db: Session, *, name: str, slug: str, description: Optional[str] = None) -> models.Category:
    category = models.Category(name=name, slug=slug, description=description)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category: models.Category, changes: dict) -> models.Category:
    for key, value in changes.items():
        setattr(category, key, value)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category: models.Category) -> None:
    db.delete(category)
    db.commit()
