import uuid
from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse
from pydantic import Field, field_validator

from .common import MAX_DB_INT, ApiModel


class CategoryRef(ApiModel):
    id: uuid.UUID
    name: str
    slug: str


class CategoryCount(ApiModel):
    products: int = 0


class ProductSummary(ApiModel):
    id: uuid.UUID
    name: str
    description: str
    price: int
    stock: int
    image_url: Optional[str] = None
    category_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class Product(ProductSummary):
    category: Optional[CategoryRef] = None


def _check_image_url(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Image URL must be a valid URL")
    return v


class ProductCreate(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    price: int = Field(ge=0, le=MAX_DB_INT)
    stock: int = Field(ge=0, le=MAX_DB_INT)
    category_id: uuid.UUID
    image_url: Optional[str] = Field(default=None, max_length=2048)

    check_image_url = field_validator("image_url")(_check_image_url)


class ProductUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    price: Optional[int] = Field(default=None, ge=0, le=MAX_DB_INT)
    stock: Optional[int] = Field(default=None, ge=0, le=MAX_DB_INT)
    category_id: Optional[uuid.UUID] = None
    image_url: Optional[str] = Field(default=None, max_length=2048)

    check_image_url = field_validator("image_url")(_check_image_url)


class Category(ApiModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    created_at: datetime
    counts: CategoryCount = Field(default_factory=CategoryCount, alias="_count")


class CategoryDetail(Category):
    products: List[ProductSummary] = Field(default_factory=list)


class CategoryCreate(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = None


class CategoryUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = None
