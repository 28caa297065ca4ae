"""
Product catalog API endpoints.

Public listing (filters, sorting, pagination), featured and search lookups,
product detail, and admin-only create/update/delete.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront import audit
from storefront.api.deps import require_admin
from storefront.api.error_handlers import api_error_from_validation
from storefront.db import models, schemas
from storefront.db.database import get_db
from storefront.db.product_query import ProductFilters
from storefront.db.repositories import categories as category_repo
from storefront.db.repositories import products as product_repo
from storefront.utils.ids import coerce_uuid

logger = logging.getLogger("storefront.products")

router = APIRouter(prefix="/api/products", tags=["products"])


def get_product_filters(request: Request) -> ProductFilters:
    try:
        return ProductFilters.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise api_error_from_validation(e, "Invalid query parameters")


def _load_product(db: Session, product_id: str) -> models.Product:
    pid = coerce_uuid(product_id)
    product = product_repo.get_product(db, pid) if pid else None
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


def _ensure_category(db: Session, category_id) -> None:
    if category_id is not None and not category_repo.get_category(db, category_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category not found")


@router.get("", response_model=schemas.ApiResponse[schemas.Paginated[schemas.Product]])
def list_products(filters: ProductFilters = Depends(get_product_filters), db: Session = Depends(get_db)):
    items, total = product_repo.list_products(db, filters)
    page = schemas.Paginated[schemas.Product](
        data=[schemas.Product.model_validate(p) for p in items],
        pagination=schemas.Pagination.build(page=filters.page, limit=filters.limit, total=total),
    )
    return schemas.ApiResponse(data=page)


@router.get("/featured", response_model=schemas.ApiResponse[List[schemas.Product]])
def featured_products(db: Session = Depends(get_db)):
    items = product_repo.featured_products(db)
    return schemas.ApiResponse(data=[schemas.Product.model_validate(p) for p in items])


@router.get("/search", response_model=schemas.ApiResponse[List[schemas.Product]])
def search_products(q: Optional[str] = None, db: Session = Depends(get_db)):
    if not q or not q.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Search query is required")
    items = product_repo.search_products(db, q)
    return schemas.ApiResponse(data=[schemas.Product.model_validate(p) for p in items])


@router.get("/{product_id}", response_model=schemas.ApiResponse[schemas.Product])
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = _load_product(db, product_id)
    return schemas.ApiResponse(data=schemas.Product.model_validate(product))


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.Product],
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    body: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    try:
        payload = schemas.ProductCreate.model_validate(body)
    except ValidationError as e:
        raise api_error_from_validation(e, "Invalid product data")
    _ensure_category(db, payload.category_id)

    product = product_repo.create_product(db, payload)
    logger.info("product_created id=%s by=%s", product.id, admin.email)
    audit.log_product(
        db,
        actor_user_id=admin.id,
        product_id=product.id,
        action=audit.AuditAction.PRODUCT_CREATE,
        name=product.name,
    )
    return schemas.ApiResponse(
        data=schemas.Product.model_validate(product),
        message="Product created successfully",
    )


@router.put("/{product_id}", response_model=schemas.ApiResponse[schemas.Product])
def update_product(
    product_id: str,
    body: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    product = _load_product(db, product_id)
    try:
        payload = schemas.ProductUpdate.model_validate(body)
    except ValidationError as e:
        raise api_error_from_validation(e, "Invalid product data")
    _ensure_category(db, payload.category_id)

    updated = product_repo.update_product(db, product, payload)
    audit.log_product(
        db,
        actor_user_id=admin.id,
        product_id=updated.id,
        action=audit.AuditAction.PRODUCT_UPDATE,
        name=updated.name,
    )
    return schemas.ApiResponse(
        data=schemas.Product.model_validate(updated),
        message="Product updated successfully",
    )


@router.delete("/{product_id}", response_model=schemas.ApiResponse[None])
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    product = _load_product(db, product_id)
    if product_repo.has_order_items(db, product.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Product has orders and cannot be deleted",
        )
    deleted_id, name = product.id, product.name
    product_repo.delete_product(db, product)
    logger.info("product_deleted id=%s by=%s", deleted_id, admin.email)
    audit.log_product(
        db,
        actor_user_id=admin.id,
        product_id=deleted_id,
        action=audit.AuditAction.PRODUCT_DELETE,
        name=name,
    )
    return schemas.ApiResponse(message="Product deleted successfully")
