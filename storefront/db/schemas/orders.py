import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import field_validator

from storefront.utils.order_status import OrderStatusEnum, PaymentMethodEnum
from .common import ApiModel
from .catalog import ProductSummary


class OrderItem(ApiModel):
    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    price: int
    product: Optional[ProductSummary] = None


class Order(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    total_amount: int
    status: str
    shipping_address: str
    payment_method: str
    payment_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    order_items: List[OrderItem]


class OrderCreate(ApiModel):
    shipping_address: str
    payment_method: PaymentMethodEnum

    @field_validator("shipping_address")
    @classmethod
    def _check_address(cls, v: str):
        s = (v or "").strip()
        if not s:
            raise ValueError("Shipping address is required")
        return s


class OrderStatusUpdate(ApiModel):
    status: OrderStatusEnum
    payment_id: Optional[str] = None
