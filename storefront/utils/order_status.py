"""
Order lifecycle states and allowed transitions.

Checkout creates orders in PENDING; payment, fulfilment and cancellation move
them forward. DELIVERED and CANCELLED are terminal.
"""

from enum import Enum
from typing import Dict, FrozenSet

STATUS_PENDING = "PENDING"
STATUS_PAID = "PAID"
STATUS_SHIPPED = "SHIPPED"
STATUS_DELIVERED = "DELIVERED"
STATUS_CANCELLED = "CANCELLED"

ORDER_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    STATUS_PENDING: frozenset({STATUS_PAID, STATUS_CANCELLED}),
    STATUS_PAID: frozenset({STATUS_SHIPPED, STATUS_CANCELLED}),
    STATUS_SHIPPED: frozenset({STATUS_DELIVERED}),
    STATUS_DELIVERED: frozenset(),
    STATUS_CANCELLED: frozenset(),
}

ALL_STATUSES = frozenset(ORDER_TRANSITIONS.keys())

# Orders in these states count towards revenue
REVENUE_STATUSES: FrozenSet[str] = ALL_STATUSES - {STATUS_CANCELLED}


class OrderStatusEnum(str, Enum):
    PENDING = STATUS_PENDING
    PAID = STATUS_PAID
    SHIPPED = STATUS_SHIPPED
    DELIVERED = STATUS_DELIVERED
    CANCELLED = STATUS_CANCELLED


class PaymentMethodEnum(str, Enum):
    card = "card"
    transfer = "transfer"


def can_transition(current: str, target: str) -> bool:
    """Return True when an order in ``current`` may move to ``target``."""
    return target in ORDER_TRANSITIONS.get(current, frozenset())


def is_cancellable(current: str) -> bool:
    return can_transition(current, STATUS_CANCELLED)
