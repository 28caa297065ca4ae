"""
Audit logging helpers and enums.

Centralized helpers to persist normalized audit records for admin actions;
includes convenience wrappers per target type.
"""
from __future__ import annotations
import logging
import uuid
from enum import Enum
from typing import Any, Optional, Dict
from sqlalchemy.orm import Session

from storefront.db import schemas
from storefront.db.repositories import audits as audit_repo

logger = logging.getLogger("storefront.audit")


class AuditAction(str, Enum):
    # Catalog
    PRODUCT_CREATE = "product_create"
    PRODUCT_UPDATE = "product_update"
    PRODUCT_DELETE = "product_delete"
    CATEGORY_CREATE = "category_create"
    CATEGORY_UPDATE = "category_update"
    CATEGORY_DELETE = "category_delete"
    # Orders
    ORDER_STATUS_CHANGE = "order_status_change"
    # Users
    USER_ADMIN_CHANGE = "user_admin_change"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def log(
    db: Session,
    *,
    action: AuditAction | str,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    target_type: str,
    target_id: Optional[uuid.UUID] = None,
    actor_user_id: uuid.UUID,
    metadata: Optional[Dict[str, Any]] = None,
):
    """Central audit logging helper.

    Ensures consistent schema and a single place for enrichment.
    """
    # Persist pure string values, not Enum reprs
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    status_value = status.value if isinstance(status, AuditStatus) else str(status)
    audit_log = schemas.AuditLogCreate(
        action_type=action_value,
        status=status_value,
        target_type=target_type,
        target_id=target_id,
        metadata=metadata or {},
    )
    return audit_repo.create_audit_log(db, audit_log=audit_log, actor_user_id=actor_user_id)


def log_safely(db: Session, **kwargs) -> None:
    """Write an audit record without failing the request that triggered it."""
    try:
        log(db, **kwargs)
    except Exception:
        db.rollback()
        logger.warning("audit_write_failed action=%s", kwargs.get("action"), exc_info=True)


def log_product(db: Session, *, actor_user_id: uuid.UUID, product_id: uuid.UUID, action: AuditAction, name: Optional[str] = None):
    log_safely(
        db,
        action=action,
        target_type="product",
        target_id=product_id,
        actor_user_id=actor_user_id,
        metadata={"name": name} if name else None,
    )


def log_category(db: Session, *, actor_user_id: uuid.UUID, category_id: uuid.UUID, action: AuditAction, slug: Optional[str] = None):
    log_safely(
        db,
        action=action,
        target_type="category",
        target_id=category_id,
        actor_user_id=actor_user_id,
        metadata={"slug": slug} if slug else None,
    )


def log_order_status(db: Session, *, actor_user_id: uuid.UUID, order_id: uuid.UUID, old_status: str, new_status: str):
    log_safely(
        db,
        action=AuditAction.ORDER_STATUS_CHANGE,
        target_type="order",
        target_id=order_id,
        actor_user_id=actor_user_id,
        metadata={"from": old_status, "to": new_status},
    )


def log_user_admin_change(db: Session, *, actor_user_id: uuid.UUID, user_id: uuid.UUID, is_admin: bool):
    log_safely(
        db,
        action=AuditAction.USER_ADMIN_CHANGE,
        target_type="user",
        target_id=user_id,
        actor_user_id=actor_user_id,
        metadata={"is_admin": bool(is_admin)},
    )


__all__ = [
    "AuditAction",
    "AuditStatus",
    "log",
    "log_safely",
    "log_product",
    "log_category",
    "log_order_status",
    "log_user_admin_change",
]
