"""
Order price computation
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence, Union

from foodorder import config
from foodorder.utils.error_handler import InvariantViolation

Amount = Union[Decimal, int, float, str]

ZERO = Decimal("0")
WHOLE_UNIT = Decimal("1")

def to_decimal(value: Amount) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps binary float noise out of the result
    return Decimal(str(value))

def as_number(value: Decimal) -> Union[int, float]:
    """Convert an amount for JSON storage, keeping integral amounts integral"""
    if value == value.to_integral_value():
        return int(value)
    return float(value)

@dataclass(frozen=True)
class PricingPolicy:
    """Tax and fee defaults applied to every order"""
    tax_rate: Decimal = Decimal("0.13")
    default_delivery_fee: Decimal = ZERO

    @classmethod
    def from_env(cls) -> "PricingPolicy":
        return cls(
            tax_rate=to_decimal(config.ORDER_TAX_RATE),
            default_delivery_fee=to_decimal(config.ORDER_DEFAULT_DELIVERY_FEE),
        )

@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal

    def to_document(self) -> dict:
        return {
            "subtotal": as_number(self.subtotal),
            "delivery_fee": as_number(self.delivery_fee),
            "tax": as_number(self.tax),
            "discount": as_number(self.discount),
            "total": as_number(self.total),
        }

class PricingEngine:
    """Computes the price breakdown persisted with an order.

    The result depends only on the lines, the delivery fee and the policy, so
    the same inputs always give the same breakdown.
    """

    def __init__(self, policy: Optional[PricingPolicy] = None):
        self.policy = policy or PricingPolicy()

    def resolve_delivery_fee(
        self,
        override: Optional[Amount] = None,
        restaurant_fee: Optional[Amount] = None
    ) -> Decimal:
        """Pick the caller's fee, then the restaurant's, then the policy default"""
        if override is not None:
            return to_decimal(override)
        if restaurant_fee is not None:
            return to_decimal(restaurant_fee)
        return self.policy.default_delivery_fee

    def quote(self, lines: Sequence, delivery_fee: Amount = ZERO) -> PriceBreakdown:
        """Price resolved line items (anything with ``price`` and ``quantity``)"""
        fee = to_decimal(delivery_fee)
        if fee < ZERO:
            raise InvariantViolation(f"Delivery fee must not be negative (got {fee})")

        subtotal = ZERO
        for line in lines:
            price = to_decimal(line.price)
            if price < ZERO or line.quantity <= 0:
                raise InvariantViolation(
                    f"Line item priced {price} x {line.quantity} cannot be billed"
                )
            subtotal += price * line.quantity

        tax = ((subtotal + fee) * self.policy.tax_rate).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
        discount = ZERO
        total = subtotal + fee + tax - discount

        if total < ZERO:
            raise InvariantViolation(f"Order total must not be negative (got {total})")

        return PriceBreakdown(
            subtotal=subtotal,
            delivery_fee=fee,
            tax=tax,
            discount=discount,
            total=total,
        )
