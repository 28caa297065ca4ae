import uuid
from datetime import datetime
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict

from .common import ApiModel


class AuditLogCreate(BaseModel):
    action_type: str
    status: str
    target_type: Optional[str] = None
    target_id: Optional[uuid.UUID] = None
    metadata: Optional[Dict[str, Any]] = None


class AuditLog(ApiModel):
    id: uuid.UUID
    actor_user_id: uuid.UUID
    action_type: str
    status: str
    target_type: Optional[str] = None
    target_id: Optional[uuid.UUID] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime


class AdminStats(ApiModel):
    total_revenue: int
    total_orders: int
    new_orders: int
    total_users: int
    total_products: int
    low_stock_products: int
