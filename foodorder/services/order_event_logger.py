"""
Tracking history for order status changes
"""

from datetime import datetime
from typing import Optional
import logging

from sqlalchemy.orm import Session

from foodorder.models.order import Order, OrderStatusEvent, utcnow

logger = logging.getLogger(__name__)

class OrderEventLogger:
    """Appends tracking entries to an order.

    Entries are added to the caller's session and committed together with the
    status change they describe.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        order: Order,
        status: str,
        actor: str,
        message: Optional[str] = None,
        at: Optional[datetime] = None
    ) -> OrderStatusEvent:
        event = OrderStatusEvent(
            status=status,
            actor=actor,
            message=message or f"Order status changed to {status}",
            created_at=at or utcnow()
        )
        order.tracking_updates.append(event)
        logger.debug(f"Tracking update for {order.order_number}: {status} by {actor}")
        return event

