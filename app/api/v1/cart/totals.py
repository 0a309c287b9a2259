"""
Cart total calculation

Pure functions over the current item set; the service persists the result
in the same transaction as the item mutation that triggered it.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from app.core.config import settings
from app.models import DiscountType
from app.models.base import to_money

ZERO = Decimal("0.00")

class PricedLine(Protocol):
    total_price: Decimal
    quantity: int

@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    total: Decimal
    total_items: int

    @classmethod
    def empty(cls) -> "CartTotals":
        """All amounts zero, stored when a cart is cleared or checked out"""
        return cls(ZERO, ZERO, ZERO, ZERO, 0)

def calculate_totals(
    items: Iterable[PricedLine],
    tax_rate: Optional[Decimal] = None,
    free_shipping_threshold: Optional[Decimal] = None,
    flat_shipping_fee: Optional[Decimal] = None,
) -> CartTotals:
    """
    Recompute subtotal, tax, shipping and total for a set of items

    Shipping is free strictly above the threshold, so an empty item set
    still pays the flat fee. The total does not include any coupon discount.
    """
    items = list(items)

    tax_rate = settings.TAX_RATE if tax_rate is None else tax_rate
    threshold = settings.FREE_SHIPPING_THRESHOLD if free_shipping_threshold is None else free_shipping_threshold
    fee = settings.FLAT_SHIPPING_FEE if flat_shipping_fee is None else flat_shipping_fee

    subtotal = to_money(sum((Decimal(item.total_price) for item in items), ZERO))
    tax_amount = to_money(subtotal * Decimal(tax_rate))
    shipping_amount = ZERO if subtotal > threshold else to_money(fee)

    return CartTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        shipping_amount=shipping_amount,
        total=to_money(subtotal + tax_amount + shipping_amount),
        total_items=sum(item.quantity for item in items),
    )

def calculate_discount(
    discount_type: DiscountType,
    discount_value: Decimal,
    subtotal: Decimal,
    max_discount: Optional[Decimal] = None,
) -> Decimal:
    """
    Discount granted by a coupon on ``subtotal``

    PERCENTAGE takes value% of the subtotal, capped at ``max_discount``
    when one is set. FIXED is the flat value.
    """
    if discount_type == DiscountType.PERCENTAGE:
        discount = Decimal(subtotal) * Decimal(discount_value) / Decimal(100)
        if max_discount is not None:
            discount = min(discount, Decimal(max_discount))
    else:
        discount = Decimal(discount_value)

    return to_money(discount)

def discounted_total(totals: CartTotals, discount: Decimal) -> Decimal:
    """Total after discount, never below zero"""
    return max(ZERO, to_money(totals.total - discount))
