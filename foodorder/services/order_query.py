"""
Owner-scoped order reads, cancellation and the client-facing projection
"""

from datetime import datetime
from typing import Callable, Optional
import logging
import math

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from foodorder.models.order import Order, utcnow
from foodorder.services.order_event_logger import OrderEventLogger
from foodorder.services.order_lifecycle import OrderLifecycle, OrderStatus
from foodorder.utils.error_handler import BadRequest, DatabaseError, OrderNotFound

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "createdAt": Order.created_at,
    "updatedAt": Order.updated_at,
    "orderNumber": Order.order_number,
    "status": Order.status,
    "estimatedDeliveryTime": Order.estimated_delivery_time,
    "total": Order.total_amount,
}

def _customer_view(customer) -> Optional[dict]:
    if customer is None:
        return None
    return {
        "id": customer.id,
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone,
    }

def _restaurant_view(restaurant) -> Optional[dict]:
    if restaurant is None:
        return None
    return {
        "id": restaurant.id,
        "name": restaurant.name,
        "email": restaurant.email,
        "phone": restaurant.phone,
        "address": restaurant.address,
        "rating": restaurant.rating,
        "delivery_time": {
            "min": restaurant.delivery_time_min,
            "max": restaurant.delivery_time_max,
        },
        "delivery_fee": restaurant.delivery_fee,
    }

def project_order(order: Order) -> dict:
    """Reshape a stored order for its owner.

    Customer and restaurant are flattened to a fixed set of fields and come
    out as None when the reference is missing, never omitted.
    """
    return {
        "id": order.id,
        "order_number": order.order_number,
        "status": order.status,
        "pricing": dict(order.pricing),
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "delivery_address": order.delivery_address,
        "special_instructions": order.special_instructions,
        "estimated_delivery_time": order.estimated_delivery_time,
        "actual_delivery_time": order.actual_delivery_time,
        "cancelled_at": order.cancelled_at,
        "customer": _customer_view(order.customer),
        "restaurant": _restaurant_view(order.restaurant),
        "items": [
            {
                "menu_item_id": item.get("menu_item_id"),
                "name": item["name"],
                "price": item["price"],
                "images": item.get("images") or [],
                "description": item.get("description") or "",
                "category": item.get("category") or "Uncategorized",
                "quantity": item["quantity"],
                "customizations": item.get("customizations") or [],
                "subtotal": item["subtotal"],
            }
            for item in order.items
        ],
        "tracking_updates": [
            {
                "status": event.status,
                "message": event.message,
                "actor": event.actor,
                "timestamp": event.created_at,
            }
            for event in order.tracking_updates
        ],
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }

class OrderQueryService:
    """Order reads and cancellation on behalf of the owning customer"""

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

    def _owned_query(self, customer_id: str):
        return (
            self.db.query(Order)
            .options(joinedload(Order.customer), joinedload(Order.restaurant))
            .filter(Order.customer_id == customer_id)
        )

    async def list_orders(
        self,
        customer_id: str,
        status: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 20
    ) -> tuple[list[Order], dict]:
        """Return one page of the customer's orders and its pagination info"""
        if sort_by not in SORTABLE_FIELDS:
            raise BadRequest(
                f"Cannot sort by '{sort_by}'. Must be one of: {', '.join(SORTABLE_FIELDS)}",
                field="sortBy"
            )
        if sort_order not in ("asc", "desc"):
            raise BadRequest("sortOrder must be 'asc' or 'desc'", field="sortOrder")
        if page < 1 or limit < 1:
            raise BadRequest("page and limit must be positive", field="page" if page < 1 else "limit")

        query = self._owned_query(customer_id)
        if status:
            if status not in {s.value for s in OrderStatus}:
                raise BadRequest(f"Unknown order status '{status}'", field="status")
            query = query.filter(Order.status == status)

        # Count before paging
        total = query.count()

        column = SORTABLE_FIELDS[sort_by]
        if sort_order == "desc":
            ordering = (column.desc(), Order.order_number.desc())
        else:
            ordering = (column.asc(), Order.order_number.asc())

        offset = (page - 1) * limit
        orders = query.order_by(*ordering).offset(offset).limit(limit).all()

        pagination = {
            "current": page,
            "pages": math.ceil(total / limit),
            "total": total,
            "limit": limit,
        }
        return orders, pagination

    async def get_order(self, customer_id: str, order_id: str) -> Order:
        """Fetch one order; orders of other customers look like missing ones"""
        order = self._owned_query(customer_id).filter(Order.id == order_id).first()
        if not order:
            raise OrderNotFound("Order not found", order_id=order_id)
        return order

    async def cancel_order(self, customer_id: str, order_id: str) -> Order:
        """Cancel the customer's own order if it is still in progress"""
        order = await self.get_order(customer_id, order_id)

        now = self.clock()
        previous = self.lifecycle.cancel(order, at=now)
        self.events.record(order, order.status, actor="customer", message="Order cancelled by customer", at=now)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to cancel order {order_id}: {e}")
            raise DatabaseError("Failed to cancel order", e)

        self.db.refresh(order)
        logger.info(f"Cancelled order {order.order_number} (was {previous}) for customer {customer_id}")
        return order
