"""
Order model for database operations
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Text, Float, Integer, ForeignKey, JSON, inspect
from sqlalchemy.orm import relationship, validates
from foodorder.database import Base
from foodorder.models.customer import Customer
from foodorder.models.restaurant import Restaurant
from foodorder.utils.error_handler import InvariantViolation

# Receipt fields, written once when the order is placed
FROZEN_FIELDS = ("order_number", "customer_id", "restaurant_id", "items", "pricing", "total_amount")

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class OrderStatusEvent(Base):
    """One entry of an order's tracking history"""
    __tablename__ = "order_status_events"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(36), ForeignKey("orders.id"), index=True, nullable=False)
    status = Column(String(30), nullable=False)
    message = Column(String(255), nullable=True)
    actor = Column(String(30), nullable=True)  # customer, restaurant, admin, system
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    order = relationship("Order", back_populates="tracking_updates")

    def __repr__(self):
        return f"<OrderStatusEvent(order_id={self.order_id}, status='{self.status}')>"

class Order(Base):
    """Order entity model"""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_number = Column(String(50), unique=True, index=True, nullable=False)
    customer_id = Column(String(36), ForeignKey("customers.id"), index=True, nullable=False)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), index=True, nullable=False)
    items = Column(JSON, nullable=False)  # list of line item snapshots
    pricing = Column(JSON, nullable=False)  # subtotal/delivery_fee/tax/discount/total
    total_amount = Column(Float, nullable=False)  # copy of pricing["total"] for sorting
    status = Column(String(30), default="placed", index=True, nullable=False)
    delivery_address = Column(JSON, nullable=False)
    payment_method = Column(String(50), nullable=False)
    payment_status = Column(String(30), default="pending", nullable=False)
    special_instructions = Column(Text, nullable=True)
    estimated_delivery_time = Column(DateTime(timezone=True), nullable=True)
    actual_delivery_time = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    customer = relationship(Customer)
    restaurant = relationship(Restaurant)
    tracking_updates = relationship(
        OrderStatusEvent,
        back_populates="order",
        order_by=[OrderStatusEvent.created_at, OrderStatusEvent.id],
        cascade="all, delete-orphan",
    )

    @validates(*FROZEN_FIELDS)
    def _freeze_snapshot(self, key, value):
        state = inspect(self)
        if state.persistent or state.detached:
            raise InvariantViolation(f"Order.{key} cannot change once the order is placed")
        return value

    def __repr__(self):
        return f"<Order(id={self.id}, order_number='{self.order_number}', status='{self.status}')>"
