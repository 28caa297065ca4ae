"""
Order API endpoints (authenticated).

Checkout turns the caller's cart into a PENDING order; owners can list,
read and cancel their orders. Admins may read any order.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.db import models, schemas
from storefront.db.database import get_db
from storefront.db.repositories import orders as order_repo
from storefront.utils.ids import coerce_uuid
from storefront.utils.order_status import STATUS_CANCELLED, is_cancellable

logger = logging.getLogger("storefront.orders")

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _load_visible_order(db: Session, order_id: str, user: models.User) -> models.Order:
    oid = coerce_uuid(order_id)
    order = order_repo.get_order(db, oid) if oid else None
    if not order or (order.user_id != user.id and not user.is_admin):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.Order],
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: schemas.OrderCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    try:
        order = order_repo.create_order_from_cart(
            db,
            user_id=user.id,
            shipping_address=payload.shipping_address,
            payment_method=payload.payment_method.value,
        )
    except order_repo.CheckoutError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    logger.info("order_created id=%s user=%s total=%s", order.id, user.id, order.total_amount)
    return schemas.ApiResponse(data=schemas.Order.model_validate(order), message="Order created successfully")


@router.get("", response_model=schemas.ApiResponse[List[schemas.Order]])
def list_orders(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    orders = order_repo.list_user_orders(db, user.id)
    return schemas.ApiResponse(data=[schemas.Order.model_validate(o) for o in orders])


@router.get("/{order_id}", response_model=schemas.ApiResponse[schemas.Order])
def get_order(order_id: str, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    order = _load_visible_order(db, order_id, user)
    return schemas.ApiResponse(data=schemas.Order.model_validate(order))


@router.post("/{order_id}/cancel", response_model=schemas.ApiResponse[schemas.Order])
def cancel_order(order_id: str, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    oid = coerce_uuid(order_id)
    order = order_repo.get_order(db, oid) if oid else None
    # Only the owner cancels through this route; admins use the status endpoint
    if not order or order.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    if not is_cancellable(order.status):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Order cannot be cancelled")
    updated = order_repo.set_status(db, order, STATUS_CANCELLED)
    logger.info("order_cancelled id=%s user=%s", updated.id, user.id)
    return schemas.ApiResponse(data=schemas.Order.model_validate(updated), message="Order cancelled")
