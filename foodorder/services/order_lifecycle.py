"""
Order status state machine

    placed -> preparing -> on_the_way -> delivered | completed
    placed | preparing | on_the_way -> cancelled

delivered, completed and cancelled are terminal. The machine only checks and
applies transitions; callers decide who may request them.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from foodorder.models.order import utcnow
from foodorder.utils.error_handler import AlreadyCancelled, InvalidTransition, OrderFinalized

class OrderStatus(str, Enum):
    PLACED = "placed"
    PREPARING = "preparing"
    ON_THE_WAY = "on_the_way"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

TERMINAL_STATES = frozenset({OrderStatus.DELIVERED, OrderStatus.COMPLETED, OrderStatus.CANCELLED})
CANCELLABLE_STATES = frozenset({OrderStatus.PLACED, OrderStatus.PREPARING, OrderStatus.ON_THE_WAY})

ADVANCES = {
    OrderStatus.PLACED: frozenset({OrderStatus.PREPARING}),
    OrderStatus.PREPARING: frozenset({OrderStatus.ON_THE_WAY}),
    OrderStatus.ON_THE_WAY: frozenset({OrderStatus.DELIVERED, OrderStatus.COMPLETED}),
}

def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise InvalidTransition(f"Unknown order status '{value}'. Must be one of: {allowed}", status=value)

class OrderLifecycle:
    """Validates and applies status changes to an order-like object.

    The object needs ``status``, ``updated_at``, ``cancelled_at`` and
    ``actual_delivery_time`` attributes.
    """

    initial_status = OrderStatus.PLACED

    def ensure_cancellable(self, status: str) -> None:
        current = parse_status(status)
        if current == OrderStatus.CANCELLED:
            raise AlreadyCancelled("Order is already cancelled", status=current.value)
        if current not in CANCELLABLE_STATES:
            raise OrderFinalized(
                f"Cannot cancel an order that is already {current.value}",
                status=current.value
            )

    def ensure_can_advance(self, status: str, target: str) -> OrderStatus:
        current = parse_status(status)
        wanted = parse_status(target)
        if current in TERMINAL_STATES:
            raise OrderFinalized(
                f"Order is {current.value} and can no longer change status",
                status=current.value
            )
        if wanted not in ADVANCES[current]:
            raise InvalidTransition(
                f"Invalid status transition from {current.value} to {wanted.value}",
                status=current.value
            )
        return wanted

    def cancel(self, order, at: Optional[datetime] = None) -> str:
        """Move ``order`` to cancelled and return the status it left"""
        self.ensure_cancellable(order.status)
        at = at or utcnow()
        previous = order.status
        order.status = OrderStatus.CANCELLED.value
        order.cancelled_at = at
        order.updated_at = at
        return previous

    def advance(self, order, target: str, at: Optional[datetime] = None) -> str:
        """Move ``order`` one step forward and return the status it left"""
        wanted = self.ensure_can_advance(order.status, target)
        at = at or utcnow()
        previous = order.status
        order.status = wanted.value
        order.updated_at = at
        if wanted in (OrderStatus.DELIVERED, OrderStatus.COMPLETED):
            order.actual_delivery_time = at
        return previous

    def transition(self, order, target: str, at: Optional[datetime] = None) -> str:
        """Apply ``target`` through the cancel or the advance guard"""
        if parse_status(target) == OrderStatus.CANCELLED:
            return self.cancel(order, at)
        return self.advance(order, target, at)
