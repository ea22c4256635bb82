"""
Resolves cart entries against a restaurant's live menu into order line items
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, NamedTuple, Tuple
import logging

from sqlalchemy.orm import Session, joinedload

from foodorder.models.restaurant import MenuItem
from foodorder.services.pricing import as_number
from foodorder.utils.error_handler import ItemUnavailable, InvalidQuantity

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

class CartLine(NamedTuple):
    item_id: str
    quantity: int

@dataclass(frozen=True)
class OrderLineItem:
    """A menu item copied by value at order time"""
    menu_item_id: str
    name: str
    price: Decimal
    quantity: int
    description: str = ""
    category: str = UNCATEGORIZED
    images: Tuple[str, ...] = ()
    customizations: Tuple[dict, ...] = field(default=())

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_document(self) -> dict:
        return {
            "menu_item_id": self.menu_item_id,
            "name": self.name,
            "price": as_number(self.price),
            "images": list(self.images),
            "description": self.description,
            "category": self.category,
            "quantity": self.quantity,
            "customizations": list(self.customizations),
            "subtotal": as_number(self.subtotal),
        }

def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0

class MenuSnapshotResolver:
    """Looks up each requested item on one restaurant's menu"""

    def __init__(self, db: Session):
        self.db = db

    def _find_item(self, restaurant_id: str, item_id: str):
        return (
            self.db.query(MenuItem)
            .options(joinedload(MenuItem.category))
            .filter(MenuItem.id == item_id, MenuItem.restaurant_id == restaurant_id)
            .first()
        )

    def resolve(self, restaurant_id: str, requests: Iterable[CartLine]) -> List[OrderLineItem]:
        """Return one line item per request, in request order.

        The first unusable request aborts resolution; no partial list is ever
        returned.
        """
        lines = []
        for item_id, quantity in requests:
            menu_item = self._find_item(restaurant_id, item_id)
            if not menu_item or not menu_item.is_active or not menu_item.is_available:
                logger.info(f"Menu item {item_id} unavailable for restaurant {restaurant_id}")
                raise ItemUnavailable(
                    f"Menu item {item_id} not found or not available",
                    item_id=item_id
                )

            if not _is_positive_int(quantity):
                raise InvalidQuantity(
                    f"Quantity for menu item {item_id} must be a positive integer",
                    item_id=item_id
                )

            lines.append(OrderLineItem(
                menu_item_id=menu_item.id,
                name=menu_item.name,
                price=Decimal(str(menu_item.price)),
                quantity=quantity,
                description=menu_item.description or "",
                category=menu_item.category.name if menu_item.category else UNCATEGORIZED,
                images=tuple(menu_item.images or ()),
            ))

        return lines
