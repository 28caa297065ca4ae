"""
Shopping cart API endpoints (authenticated).

Lines are stock-checked on every write; ``/merge`` folds a guest cart into
the signed-in user's cart, clamped to available stock.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.db import models, schemas
from storefront.db.database import get_db
from storefront.db.repositories import cart as cart_repo
from storefront.db.repositories import products as product_repo
from storefront.utils.cart_rules import cart_totals
from storefront.utils.ids import coerce_uuid

logger = logging.getLogger("storefront.cart")

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _cart_out(db: Session, user_id) -> schemas.Cart:
    items = cart_repo.get_cart_items(db, user_id)
    total_amount, total_items = cart_totals(items)
    return schemas.Cart(
        items=[schemas.CartItem.model_validate(i) for i in items],
        total_amount=total_amount,
        total_items=total_items,
    )


def _load_line(db: Session, item_id: str, user: models.User) -> models.CartItem:
    iid = coerce_uuid(item_id)
    item = cart_repo.get_cart_item(db, iid, user.id) if iid else None
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cart item not found")
    return item


def _increase_line(db: Session, line: models.CartItem, product: models.Product, quantity: int) -> models.CartItem:
    new_quantity = line.quantity + quantity
    if product.stock < new_quantity:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Insufficient stock for requested quantity",
        )
    return cart_repo.set_quantity(db, line, new_quantity)


@router.get("", response_model=schemas.ApiResponse[schemas.Cart])
def get_cart(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    return schemas.ApiResponse(data=_cart_out(db, user.id))


@router.post("", response_model=schemas.ApiResponse[schemas.CartItem])
def add_to_cart(
    payload: schemas.CartItemCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    if not payload.product_id or payload.quantity < 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid product or quantity")

    pid = coerce_uuid(payload.product_id)
    product = product_repo.get_product(db, pid) if pid else None
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    if product.stock < payload.quantity:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Insufficient stock")

    line = cart_repo.get_line_for_product(db, user.id, product.id)
    if line is None:
        try:
            item = cart_repo.create_line(db, user.id, product.id, payload.quantity)
        except IntegrityError:
            # Another request created the line first; add to it instead
            db.rollback()
            line = cart_repo.get_line_for_product(db, user.id, product.id)
            if line is None:
                raise
            logger.info("cart_line_race user=%s product=%s", user.id, product.id)
            item = _increase_line(db, line, product, payload.quantity)
    else:
        item = _increase_line(db, line, product, payload.quantity)
    return schemas.ApiResponse(data=schemas.CartItem.model_validate(item), message="Added to cart")


@router.put("/{item_id}", response_model=schemas.ApiResponse[schemas.CartItem])
def update_cart_item(
    item_id: str,
    payload: schemas.CartItemUpdate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    if payload.quantity is None or payload.quantity < 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid quantity")
    item = _load_line(db, item_id, user)
    if item.product.stock < payload.quantity:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Insufficient stock")
    updated = cart_repo.set_quantity(db, item, payload.quantity)
    return schemas.ApiResponse(data=schemas.CartItem.model_validate(updated), message="Quantity updated")


@router.delete("/{item_id}", response_model=schemas.ApiResponse[None])
def remove_cart_item(
    item_id: str,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    item = _load_line(db, item_id, user)
    cart_repo.delete_line(db, item)
    return schemas.ApiResponse(message="Removed from cart")


@router.delete("", response_model=schemas.ApiResponse[None])
def clear_cart(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    removed = cart_repo.clear_cart(db, user.id)
    logger.debug("cart_cleared user=%s lines=%d", user.id, removed)
    return schemas.ApiResponse(message="Cart cleared")


@router.post("/merge", response_model=schemas.ApiResponse[schemas.Cart])
def merge_cart(
    payload: schemas.CartMergeRequest,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    entries = []
    for entry in payload.items:
        pid = coerce_uuid(entry.product_id)
        if pid is not None:
            entries.append((pid, entry.quantity))
    touched = cart_repo.merge_items(db, user.id, entries)
    logger.info("cart_merged user=%s lines=%d", user.id, touched)
    return schemas.ApiResponse(data=_cart_out(db, user.id), message="Cart merged")
