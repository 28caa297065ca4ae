"""Stock-bounded cart arithmetic shared by the cart and checkout paths."""

from typing import Iterable, Tuple


def clamp_quantity(requested: int, stock: int) -> int:
    """Return ``requested`` bounded by available ``stock`` (never negative)."""
    return max(0, min(int(requested), int(stock)))


def cart_totals(items: Iterable) -> Tuple[int, int]:
    """Return ``(total_amount, total_items)`` for cart lines with a loaded product."""
    total_amount = 0
    total_items = 0
    for item in items:
        total_amount += item.product.price * item.quantity
        total_items += item.quantity
    return total_amount, total_items
