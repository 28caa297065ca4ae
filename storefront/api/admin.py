"""
Admin dashboard API endpoints.

Store statistics, order management with status transitions, user role
management and the audit trail. Every route requires an admin.
"""
import logging
import uuid
from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from storefront import audit
from storefront.api.deps import require_admin
from storefront.db import models, schemas
from storefront.db.database import get_db
from storefront.db.models.base import now_utc
from storefront.db.repositories import audits as audit_repo
from storefront.db.repositories import orders as order_repo
from storefront.db.repositories import products as product_repo
from storefront.db.repositories import users as user_repo
from storefront.utils.ids import coerce_uuid
from storefront.utils.order_status import OrderStatusEnum, can_transition
from storefront.utils.settings import get_settings

logger = logging.getLogger("storefront.admin")

router = APIRouter(prefix="/api/admin", tags=["admin"])

NEW_ORDERS_WINDOW = timedelta(days=7)


@router.get("/stats", response_model=schemas.ApiResponse[schemas.AdminStats])
def get_stats(db: Session = Depends(get_db), admin: models.User = Depends(require_admin)):
    stats = schemas.AdminStats(
        total_revenue=order_repo.total_revenue(db),
        total_orders=order_repo.count_orders(db),
        new_orders=order_repo.count_orders(db, since=now_utc() - NEW_ORDERS_WINDOW),
        total_users=user_repo.count_users(db),
        total_products=product_repo.count_products(db),
        low_stock_products=product_repo.count_low_stock(db, get_settings().low_stock_threshold),
    )
    return schemas.ApiResponse(data=stats)


@router.get("/orders", response_model=schemas.ApiResponse[schemas.Paginated[schemas.Order]])
def list_orders(
    page: int = Query(1, ge=1, le=schemas.MAX_DB_INT),
    limit: int = Query(20, ge=1, le=100),
    order_status: Optional[OrderStatusEnum] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    orders, total = order_repo.list_orders(
        db,
        offset=(page - 1) * limit,
        limit=limit,
        status=order_status.value if order_status else None,
    )
    return schemas.ApiResponse(
        data=schemas.Paginated[schemas.Order](
            data=[schemas.Order.model_validate(o) for o in orders],
            pagination=schemas.Pagination.build(page=page, limit=limit, total=total),
        )
    )


@router.patch("/orders/{order_id}/status", response_model=schemas.ApiResponse[schemas.Order])
def update_order_status(
    order_id: str,
    payload: schemas.OrderStatusUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    oid = coerce_uuid(order_id)
    order = order_repo.get_order(db, oid) if oid else None
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    old_status, new_status = order.status, payload.status.value
    if not can_transition(old_status, new_status):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invalid status transition from {old_status} to {new_status}",
        )
    updated = order_repo.set_status(db, order, new_status, payment_id=payload.payment_id)
    logger.info("order_status_changed id=%s %s->%s by=%s", updated.id, old_status, new_status, admin.email)
    audit.log_order_status(
        db,
        actor_user_id=admin.id,
        order_id=updated.id,
        old_status=old_status,
        new_status=new_status,
    )
    return schemas.ApiResponse(data=schemas.Order.model_validate(updated), message="Order status updated")


@router.get("/users", response_model=schemas.ApiResponse[schemas.Paginated[schemas.UserProfile]])
def list_users(
    page: int = Query(1, ge=1, le=schemas.MAX_DB_INT),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    users, total = user_repo.list_users(db, offset=(page - 1) * limit, limit=limit, search=search)
    return schemas.ApiResponse(
        data=schemas.Paginated[schemas.UserProfile](
            data=[schemas.UserProfile.model_validate(u) for u in users],
            pagination=schemas.Pagination.build(page=page, limit=limit, total=total),
        )
    )


@router.patch("/users/{user_id}", response_model=schemas.ApiResponse[schemas.UserProfile])
def update_user(
    user_id: str,
    payload: schemas.AdminUserUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    uid = coerce_uuid(user_id)
    target = user_repo.get_user(db, uid) if uid else None
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if target.id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot change your own admin status")

    updated = user_repo.set_admin(db, target, payload.is_admin)
    audit.log_user_admin_change(db, actor_user_id=admin.id, user_id=updated.id, is_admin=updated.is_admin)
    return schemas.ApiResponse(data=schemas.UserProfile.model_validate(updated), message="User updated")


@router.get("/audit-logs", response_model=schemas.ApiResponse[List[schemas.AuditLog]])
def list_audit_logs(
    skip: int = Query(0, ge=0, le=schemas.MAX_DB_INT),
    limit: int = Query(100, ge=1, le=500),
    action_type: Optional[str] = Query(None, alias="actionType"),
    actor_user_id: Optional[uuid.UUID] = Query(None, alias="actorUserId"),
    log_status: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    logs = audit_repo.get_audit_logs(
        db,
        user_id=actor_user_id,
        action_type=action_type,
        status=log_status,
        skip=skip,
        limit=limit,
    )
    # The ORM column is ``metadata_json``; ``metadata`` is reserved on declarative models
    data = [
        schemas.AuditLog(
            id=log.id,
            actor_user_id=log.actor_user_id,
            action_type=log.action_type,
            status=log.status,
            target_type=log.target_type,
            target_id=log.target_id,
            metadata=log.metadata_json,
            created_at=log.created_at,
        )
        for log in logs
    ]
    return schemas.ApiResponse(data=data)
