import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from .common import ApiModel
from .catalog import Product


class CartItem(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    created_at: datetime
    product: Product


class Cart(ApiModel):
    items: List[CartItem]
    total_amount: int
    total_items: int


class CartItemCreate(ApiModel):
    product_id: Optional[str] = None
    quantity: int = 1


class CartItemUpdate(ApiModel):
    quantity: Optional[int] = None


class CartMergeEntry(ApiModel):
    product_id: str
    quantity: int


class CartMergeRequest(ApiModel):
    items: List[CartMergeEntry] = Field(default_factory=list)
