"""
Cart repository functions.

Per-user cart lines with their products loaded, quantity changes and the
guest-cart merge used after sign-in.
"""
from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from storefront.db import models
from storefront.utils.cart_rules import clamp_quantity


def _with_product(q):
    return q.options(joinedload(models.CartItem.product).joinedload(models.Product.category))


def get_cart_items(db: Session, user_id: uuid.UUID) -> List[models.CartItem]:
    return (
        _with_product(db.query(models.CartItem))
        .filter(models.CartItem.user_id == user_id)
        .order_by(models.CartItem.created_at.desc(), models.CartItem.id.asc())
        .all()
    )


def get_cart_item(db: Session, item_id: uuid.UUID, user_id: uuid.UUID) -> Optional[models.CartItem]:
    """Return the line only when it belongs to ``user_id``."""
    return (
        _with_product(db.query(models.CartItem))
        .filter(models.CartItem.id == item_id, models.CartItem.user_id == user_id)
        .first()
    )


def get_line_for_product(db: Session, user_id: uuid.UUID, product_id: uuid.UUID) -> Optional[models.CartItem]:
    return (
        db.query(models.CartItem)
        .filter(models.CartItem.user_id == user_id, models.CartItem.product_id == product_id)
        .first()
    )


def create_line(db: Session, user_id: uuid.UUID, product_id: uuid.UUID, quantity: int) -> models.CartItem:
    item = models.CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
    db.add(item)
    db.commit()
    return get_cart_item(db, item.id, user_id)


def set_quantity(db: Session, item: models.CartItem, quantity: int) -> models.CartItem:
    item.quantity = quantity
    db.commit()
    return get_cart_item(db, item.id, item.user_id)


def delete_line(db: Session, item: models.CartItem) -> None:
    db.delete(item)
    db.commit()


def clear_cart(db: Session, user_id: uuid.UUID, *, commit: bool = True) -> int:
    removed = (
        db.query(models.CartItem)
        .filter(models.CartItem.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if commit:
        db.commit()
    return removed


def merge_items(db: Session, user_id: uuid.UUID, entries: Iterable[Tuple[uuid.UUID, int]]) -> int:
    """Fold guest cart entries into the user's cart, bounded by stock.

    Unknown products, sold-out products and non-positive quantities are
    skipped. Returns the number of lines touched.
    """
    touched = 0
    for product_id, quantity in entries:
        if quantity < 1:
            continue
        product = db.query(models.Product).filter(models.Product.id == product_id).first()
        if product is None:
            continue
        line = get_line_for_product(db, user_id, product_id)
        current = line.quantity if line else 0
        target = clamp_quantity(current + quantity, product.stock)
        if target < 1:
            continue
        if line is None:
            db.add(models.CartItem(user_id=user_id, product_id=product_id, quantity=target))
        else:
            line.quantity = target
        db.flush()
        touched += 1
    db.commit()
    return touched
