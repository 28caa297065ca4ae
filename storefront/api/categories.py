"""
Category API endpoints.

Public browsing with product counts, detail by id or slug (newest products
attached), and admin-only create/update/delete.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront import audit
from storefront.api.deps import require_admin
from storefront.db import models, schemas
from storefront.db.database import get_db
from storefront.db.repositories import categories as category_repo
from storefront.utils.ids import coerce_uuid
from storefront.utils.slugs import slugify

logger = logging.getLogger("storefront.categories")

router = APIRouter(prefix="/api/categories", tags=["categories"])


def _category_out(category: models.Category, count: int) -> schemas.Category:
    out = schemas.Category.model_validate(category)
    out.counts = schemas.CategoryCount(products=count)
    return out


def _detail_out(db: Session, category: models.Category) -> schemas.CategoryDetail:
    out = schemas.CategoryDetail.model_validate(category)
    out.counts = schemas.CategoryCount(products=category_repo.product_counts(db, [category.id]).get(category.id, 0))
    out.products = [schemas.ProductSummary.model_validate(p) for p in category_repo.recent_products(db, category.id)]
    return out


def _load_category(db: Session, category_id: str) -> models.Category:
    cid = coerce_uuid(category_id)
    category = category_repo.get_category(db, cid) if cid else None
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


def _resolve_slug(raw: str) -> str:
    slug = slugify(raw)
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category slug is required")
    return slug


@router.get("", response_model=schemas.ApiResponse[List[schemas.Category]])
def list_categories(db: Session = Depends(get_db)):
    rows = category_repo.list_categories(db)
    return schemas.ApiResponse(data=[_category_out(c, n) for c, n in rows])


@router.get("/slug/{slug}", response_model=schemas.ApiResponse[schemas.CategoryDetail])
def get_category_by_slug(slug: str, db: Session = Depends(get_db)):
    category = category_repo.get_category_by_slug(db, slug)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return schemas.ApiResponse(data=_detail_out(db, category))


@router.get("/{category_id}", response_model=schemas.ApiResponse[schemas.CategoryDetail])
def get_category(category_id: str, db: Session = Depends(get_db)):
    category = _load_category(db, category_id)
    return schemas.ApiResponse(data=_detail_out(db, category))


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.Category],
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    payload: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    slug = _resolve_slug(payload.slug or payload.name)
    if category_repo.slug_taken(db, slug):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category slug already exists")

    category = category_repo.create_category(
        db, name=payload.name.strip(), slug=slug, description=payload.description
    )
    logger.info("category_created id=%s slug=%s by=%s", category.id, slug, admin.email)
    audit.log_category(
        db,
        actor_user_id=admin.id,
        category_id=category.id,
        action=audit.AuditAction.CATEGORY_CREATE,
        slug=slug,
    )
    return schemas.ApiResponse(data=_category_out(category, 0), message="Category created successfully")


@router.put("/{category_id}", response_model=schemas.ApiResponse[schemas.Category])
def update_category(
    category_id: str,
    payload: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    category = _load_category(db, category_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    else:
        changes["name"] = changes["name"].strip()

    if changes.get("slug"):
        changes["slug"] = _resolve_slug(changes["slug"])
    elif "name" in changes:
        # Renaming without an explicit slug re-derives it
        changes["slug"] = _resolve_slug(changes["name"])
    else:
        changes.pop("slug", None)

    if "slug" in changes and category_repo.slug_taken(db, changes["slug"], exclude_id=category.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category slug already exists")

    updated = category_repo.update_category(db, category, changes)
    audit.log_category(
        db,
        actor_user_id=admin.id,
        category_id=updated.id,
        action=audit.AuditAction.CATEGORY_UPDATE,
        slug=updated.slug,
    )
    count = category_repo.product_counts(db, [updated.id]).get(updated.id, 0)
    return schemas.ApiResponse(data=_category_out(updated, count), message="Category updated successfully")


@router.delete("/{category_id}", response_model=schemas.ApiResponse[None])
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    category = _load_category(db, category_id)
    if category_repo.product_counts(db, [category.id]).get(category.id, 0) > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Category has products and cannot be deleted",
        )
    deleted_id, slug = category.id, category.slug
    category_repo.delete_category(db, category)
    audit.log_category(
        db,
        actor_user_id=admin.id,
        category_id=deleted_id,
        action=audit.AuditAction.CATEGORY_DELETE,
        slug=slug,
    )
    return schemas.ApiResponse(message="Category deleted successfully")
