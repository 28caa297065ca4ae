"""
Product list query construction.

Turns the product list query string into a validated ``ProductFilters`` and
applies filtering, sorting and pagination to a SQLAlchemy query.
"""
import uuid
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import or_

from . import models
from .like import LIKE_ESCAPE, contains_pattern
from .schemas.common import MAX_DB_INT

MAX_PAGE_SIZE = 100

SORT_COLUMNS = {
    "price": models.Product.price,
    "name": models.Product.name,
    "createdAt": models.Product.created_at,
}


class ProductFilters(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    page: int = Field(default=1, ge=1, le=MAX_DB_INT)
    limit: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)
    category_id: Optional[uuid.UUID] = None
    min_price: Optional[int] = Field(default=None, ge=0, le=MAX_DB_INT)
    max_price: Optional[int] = Field(default=None, ge=0, le=MAX_DB_INT)
    search: Optional[str] = None
    sort_by: Literal["price", "name", "createdAt"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"

    @model_validator(mode="before")
    @classmethod
    def _drop_blank(cls, data):
        # Empty query values mean "not provided"
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v not in (None, "")}
        return data

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def apply_product_filters(query, filters: ProductFilters):
    """Apply category, price range and search filters."""
    if filters.category_id is not None:
        query = query.filter(models.Product.category_id == filters.category_id)
    if filters.min_price is not None:
        query = query.filter(models.Product.price >= filters.min_price)
    if filters.max_price is not None:
        query = query.filter(models.Product.price <= filters.max_price)
    if filters.search:
        query = apply_text_search(query, filters.search)
    return query


def apply_text_search(query, text: str):
    """Case-insensitive substring match on product name or description."""
    pattern = contains_pattern(text)
    return query.filter(
        or_(
            models.Product.name.ilike(pattern, escape=LIKE_ESCAPE),
            models.Product.description.ilike(pattern, escape=LIKE_ESCAPE),
        )
    )


def apply_product_ordering(query, filters: ProductFilters):
    column = SORT_COLUMNS[filters.sort_by]
    ordered = column.asc() if filters.sort_order == "asc" else column.desc()
    # Stable tie-breaker so pages never overlap
    return query.order_by(ordered, models.Product.id.asc())


def apply_pagination(query, filters: ProductFilters):
    return query.offset(filters.offset).limit(filters.limit)
