"""
Status changes requested by restaurant staff and admins
"""

from datetime import datetime
from typing import Callable, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from foodorder.models.order import Order, utcnow
from foodorder.services.order_event_logger import OrderEventLogger
from foodorder.services.order_lifecycle import OrderLifecycle
from foodorder.utils.error_handler import DatabaseError, OrderNotFound

logger = logging.getLogger(__name__)

class OrderStatusService:
    def __init__(
        self,
        db: Session,
        lifecycle: Optional[OrderLifecycle] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.db = db
        self.lifecycle = lifecycle or OrderLifecycle()
        self.events = OrderEventLogger(db)
        self.clock = clock

    async def update_status(
        self,
        order_id: str,
        target: str,
        actor: str,
        restaurant_id: Optional[str] = None
    ) -> Order:
        """Move an order to ``target``.

        With ``restaurant_id`` set, only that restaurant's orders are visible.
        """
        query = self.db.query(Order).filter(Order.id == order_id)
        if restaurant_id is not None:
            query = query.filter(Order.restaurant_id == restaurant_id)
        order = query.first()
        if not order:
            raise OrderNotFound("Order not found", order_id=order_id)

        now = self.clock()
        previous = self.lifecycle.transition(order, target, at=now)
        self.events.record(order, order.status, actor=actor, at=now)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update status of order {order_id}: {e}")
            raise DatabaseError("Failed to update order status", e)

        self.db.refresh(order)
        logger.info(f"Order {order.order_number} moved from {previous} to {order.status} by {actor}")
        return order
