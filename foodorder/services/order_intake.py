"""
Order intake: turns a customer's cart into a persisted order
"""

from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Sequence
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from foodorder import config
from foodorder.models.order import Order, utcnow
from foodorder.models.restaurant import Restaurant
from foodorder.services.address import normalize_address
from foodorder.services.menu_resolver import CartLine, MenuSnapshotResolver
from foodorder.services.order_event_logger import OrderEventLogger
from foodorder.services.order_lifecycle import OrderLifecycle
from foodorder.services.order_number import OrderNumberGenerator
from foodorder.services.pricing import PricingEngine, PricingPolicy, as_number
from foodorder.utils.error_handler import BadRequest, DatabaseError, RestaurantUnavailable

logger = logging.getLogger(__name__)

class OrderIntakeService:
    """Validates a cart against live restaurant and menu state and stores
    the resulting order as a one-off snapshot.

    Every check runs before anything is written, and the order is written in
    a single commit, so a failed intake leaves no trace.
    """

    def __init__(
        self,
        db: Session,
        pricing_engine: Optional[PricingEngine] = None,
        number_generator: Optional[OrderNumberGenerator] = None,
        lifecycle: Optional[OrderLifecycle] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.db = db
        self.resolver = MenuSnapshotResolver(db)
        self.pricing_engine = pricing_engine or PricingEngine(PricingPolicy.from_env())
        self.number_generator = number_generator or OrderNumberGenerator()
        self.lifecycle = lifecycle or OrderLifecycle()
        self.events = OrderEventLogger(db)
        self.clock = clock

    def _check_request(self, restaurant_id, cart_items, delivery_address) -> None:
        if not restaurant_id:
            raise BadRequest("Please provide restaurant ID and order items", field="restaurantId")
        if not cart_items:
            raise BadRequest("Please provide restaurant ID and order items", field="items")
        if delivery_address is None or (isinstance(delivery_address, str) and not delivery_address.strip()):
            raise BadRequest("Delivery address is required", field="deliveryAddress")

    def _get_open_restaurant(self, restaurant_id: str) -> Restaurant:
        restaurant = self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
        if not restaurant or not restaurant.is_active or not restaurant.is_verified:
            raise RestaurantUnavailable(
                "Restaurant not found or not available",
                restaurant_id=restaurant_id
            )
        return restaurant

    async def create_order(
        self,
        customer_id: str,
        restaurant_id: Optional[str],
        cart_items: Sequence[Any],
        delivery_address: Any,
        special_instructions: Optional[str] = None,
        payment_method: Optional[str] = None,
        delivery_fee_override: Optional[float] = None
    ) -> Order:
        """Create an order in ``placed`` state.

        ``cart_items`` holds ``(item_id, quantity)`` pairs or objects with
        ``item_id`` and ``quantity`` attributes.
        """
        self._check_request(restaurant_id, cart_items, delivery_address)

        restaurant = self._get_open_restaurant(restaurant_id)

        requests = [
            CartLine(*entry) if isinstance(entry, tuple) else CartLine(entry.item_id, entry.quantity)
            for entry in cart_items
        ]
        lines = self.resolver.resolve(restaurant.id, requests)

        address = normalize_address(delivery_address)

        delivery_fee = self.pricing_engine.resolve_delivery_fee(
            override=delivery_fee_override,
            restaurant_fee=restaurant.delivery_fee
        )
        breakdown = self.pricing_engine.quote(lines, delivery_fee)

        order_number = self.number_generator.generate()

        now = self.clock()
        delivery_minutes = restaurant.delivery_time_max or config.ORDER_DEFAULT_DELIVERY_MINUTES

        order = Order(
            order_number=order_number,
            customer_id=customer_id,
            restaurant_id=restaurant.id,
            items=[line.to_document() for line in lines],
            pricing=breakdown.to_document(),
            total_amount=as_number(breakdown.total),
            status=self.lifecycle.initial_status.value,
            delivery_address=address.to_document(),
            payment_method=payment_method or config.DEFAULT_PAYMENT_METHOD,
            # No payment is captured here, whatever the method
            payment_status="pending",
            special_instructions=special_instructions or "",
            estimated_delivery_time=now + timedelta(minutes=delivery_minutes),
            created_at=now,
            updated_at=now
        )
        self.events.record(order, order.status, actor="customer", message="Order placed", at=now)

        try:
            self.db.add(order)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to persist order {order_number}: {e}")
            raise DatabaseError("Failed to create order", e)

        self.db.refresh(order)
        logger.info(
            f"Created order {order.order_number} for customer {customer_id} "
            f"at restaurant {restaurant.id} ({len(lines)} items, total {breakdown.total})"
        )
        return order
