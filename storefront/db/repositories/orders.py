"""
Order repository functions.

Checkout from the cart (stock decrement, price snapshots, cart clearing) in
one transaction, order lookups, status changes and dashboard aggregates.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from storefront.db import models
from storefront.db.repositories import cart as cart_repo
from storefront.utils.order_status import REVENUE_STATUSES, STATUS_CANCELLED, STATUS_PENDING


class CheckoutError(Exception):
    """Raised when a cart cannot be turned into an order."""


class EmptyCartError(CheckoutError):
    pass


class InsufficientStockError(CheckoutError):
    def __init__(self, product_name: str):
        super().__init__(f"Insufficient stock for {product_name}")
        self.product_name = product_name


def _with_items(q):
    return q.options(joinedload(models.Order.order_items).joinedload(models.OrderItem.product))


def create_order_from_cart(
    db: Session,
    *,
    user_id: uuid.UUID,
    shipping_address: str,
    payment_method: str,
) -> models.Order:
    lines = (
        db.query(models.CartItem)
        .filter(models.CartItem.user_id == user_id)
        .order_by(models.CartItem.created_at.asc())
        .all()
    )
    if not lines:
        raise EmptyCartError("Cart is empty")

    try:
        product_ids = [line.product_id for line in lines]
        products = {
            p.id: p
            for p in db.query(models.Product)
            .filter(models.Product.id.in_(product_ids))
            .with_for_update()
            .all()
        }
        order = models.Order(
            user_id=user_id,
            status=STATUS_PENDING,
            shipping_address=shipping_address,
            payment_method=payment_method,
            total_amount=0,
        )
        total = 0
        for line in lines:
            product = products[line.product_id]
            if product.stock < line.quantity:
                raise InsufficientStockError(product.name)
            product.stock -= line.quantity
            total += product.price * line.quantity
            order.order_items.append(
                models.OrderItem(product_id=product.id, quantity=line.quantity, price=product.price)
            )
        order.total_amount = total
        db.add(order)
        cart_repo.clear_cart(db, user_id, commit=False)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return get_order(db, order.id)


def get_order(db: Session, order_id: uuid.UUID) -> Optional[models.Order]:
    return _with_items(db.query(models.Order)).filter(models.Order.id == order_id).first()


def list_user_orders(db: Session, user_id: uuid.UUID) -> List[models.Order]:
    return (
        _with_items(db.query(models.Order))
        .filter(models.Order.user_id == user_id)
        .order_by(models.Order.created_at.desc())
        .all()
    )


def list_orders(
    db: Session,
    *,
    offset: int = 0,
    limit: int = 20,
    status: Optional[str] = None,
) -> Tuple[List[models.Order], int]:
    q = db.query(models.Order)
    if status:
        q = q.filter(models.Order.status == status)
    total = q.count()
    orders = (
        _with_items(q)
        .order_by(models.Order.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return orders, total


def set_status(
    db: Session,
    order: models.Order,
    status: str,
    *,
    payment_id: Optional[str] = None,
) -> models.Order:
    """Persist a status change; cancelling puts the items back in stock."""
    if status == STATUS_CANCELLED and order.status != STATUS_CANCELLED:
        for item in order.order_items:
            product = db.query(models.Product).filter(models.Product.id == item.product_id).first()
            if product is not None:
                product.stock += item.quantity
    order.status = status
    if payment_id:
        order.payment_id = payment_id
    db.commit()
    db.expire(order)
    return get_order(db, order.id)


def count_orders(db: Session, *, since: Optional[datetime] = None) -> int:
    q = db.query(func.count(models.Order.id))
    if since is not None:
        q = q.filter(models.Order.created_at >= since)
    return q.scalar() or 0


def total_revenue(db: Session) -> int:
    value = (
        db.query(func.coalesce(func.sum(models.Order.total_amount), 0))
        .filter(models.Order.status.in_(list(REVENUE_STATUSES)))
        .scalar()
    )
    return int(value or 0)
