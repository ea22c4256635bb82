"""
Pydantic schemas for order requests and responses

Wire format is camelCase; snake_case keys are accepted on input too.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Optional, Union
from datetime import datetime

from foodorder.services.order_lifecycle import OrderStatus

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class CoordinatesIn(CamelModel):
    latitude: float = Field(0, ge=-90, le=90)
    longitude: float = Field(0, ge=-180, le=180)

class AddressIn(CamelModel):
    """Structured delivery address"""
    street: str = Field("", max_length=255)
    city: str = Field("", max_length=100)
    state: str = Field("", max_length=100)
    zip_code: str = Field("", max_length=20)
    coordinates: CoordinatesIn = Field(default_factory=CoordinatesIn)

class CartItem(CamelModel):
    item_id: str = Field(..., min_length=1, description="Menu item id")
    # Left untyped so the intake pipeline rejects non-integers with the item id
    quantity: Any = Field(..., description="Number of units")

class OrderCreate(CamelModel):
    """Schema for placing a new order.

    Presence of restaurant, items and address is checked by the intake
    pipeline rather than here, so those failures come back as 400s that name
    the missing field.
    """
    restaurant_id: Optional[str] = Field(None, description="Restaurant serving the order")
    items: list[CartItem] = Field(default_factory=list, description="Cart entries")
    delivery_address: Optional[Union[str, AddressIn]] = Field(None, description="Free text or structured address")
    special_instructions: Optional[str] = Field(None, max_length=500)
    payment_method: Optional[str] = Field(None, max_length=50)
    delivery_fee: Optional[float] = Field(None, ge=0, description="Overrides the restaurant delivery fee")

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v):
        if v is None:
            return v
        v = v.strip()
        return v or None

class OrderStatusUpdate(CamelModel):
    """Schema for restaurant status changes"""
    status: str = Field(..., description="Target order status")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        allowed_statuses = [s.value for s in OrderStatus]
        if v not in allowed_statuses:
            raise ValueError(f'Status must be one of: {", ".join(allowed_statuses)}')
        return v

class PricingOut(CamelModel):
    subtotal: float
    delivery_fee: float
    tax: float
    discount: float
    total: float

class CoordinatesOut(CamelModel):
    latitude: float
    longitude: float

class AddressOut(CamelModel):
    street: str
    city: str
    state: str
    zip_code: str
    coordinates: CoordinatesOut

class LineItemOut(CamelModel):
    menu_item_id: Optional[str]
    name: str
    price: float
    images: list[str]
    description: str
    category: str
    quantity: int
    customizations: list[Any]
    subtotal: float

class CustomerSummary(CamelModel):
    id: str
    name: Optional[str]
    email: Optional[str]
    phone: Optional[str]

class DeliveryWindow(CamelModel):
    min: Optional[int]
    max: Optional[int]

class RestaurantSummary(CamelModel):
    id: str
    name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    address: Optional[Any]
    rating: Optional[float]
    delivery_time: DeliveryWindow
    delivery_fee: Optional[float]

class TrackingUpdateOut(CamelModel):
    status: str
    message: Optional[str]
    actor: Optional[str]
    timestamp: datetime

class OrderResponse(CamelModel):
    """Owner-facing view of an order"""
    id: str
    order_number: str
    status: str
    pricing: PricingOut
    payment_method: str
    payment_status: str
    delivery_address: AddressOut
    special_instructions: Optional[str]
    estimated_delivery_time: Optional[datetime]
    actual_delivery_time: Optional[datetime]
    cancelled_at: Optional[datetime]
    customer: Optional[CustomerSummary]
    restaurant: Optional[RestaurantSummary]
    items: list[LineItemOut]
    tracking_updates: list[TrackingUpdateOut]
    created_at: datetime
    updated_at: datetime

class OrderEnvelope(CamelModel):
    data: OrderResponse
    message: Optional[str] = None

class Pagination(CamelModel):
    current: int
    pages: int
    total: int
    limit: int

class OrderListResponse(CamelModel):
    """Schema for paginated order list responses"""
    data: list[OrderResponse]
    pagination: Pagination
