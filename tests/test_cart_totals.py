from dataclasses import dataclass
from decimal import Decimal

from app.api.v1.cart.totals import (
    ZERO,
    CartTotals,
    calculate_totals,
    calculate_discount,
    discounted_total,
)
from app.models import DiscountType

@dataclass
class Line:
    total_price: Decimal
    quantity: int

def test_no_items_still_pays_flat_shipping():
    totals = calculate_totals([])

    assert totals.subtotal == ZERO
    assert totals.tax_amount == ZERO
    assert totals.shipping_amount == Decimal("10.00")
    assert totals.total == Decimal("10.00")
    assert totals.total_items == 0

def test_empty_totals_are_all_zero():
    totals = CartTotals.empty()
    assert (totals.subtotal, totals.shipping_amount, totals.total) == (ZERO, ZERO, ZERO)

def test_small_order_pays_flat_shipping():
    totals = calculate_totals([Line(Decimal("40.00"), 1)])

    assert totals.subtotal == Decimal("40.00")
    assert totals.tax_amount == Decimal("4.00")
    assert totals.shipping_amount == Decimal("10.00")
    assert totals.total == Decimal("54.00")
    assert totals.total_items == 1

def test_shipping_is_free_above_threshold():
    totals = calculate_totals([Line(Decimal("80.00"), 2), Line(Decimal("40.00"), 1)])

    assert totals.subtotal == Decimal("120.00")
    assert totals.tax_amount == Decimal("12.00")
    assert totals.shipping_amount == ZERO
    assert totals.total == Decimal("132.00")
    assert totals.total_items == 3

def test_subtotal_exactly_at_threshold_still_pays_shipping():
    totals = calculate_totals([Line(Decimal("100.00"), 1)])
    assert totals.shipping_amount == Decimal("10.00")

def test_tax_is_rounded_half_up_to_cents():
    totals = calculate_totals([Line(Decimal("0.05"), 1)], tax_rate=Decimal("0.10"))
    assert totals.tax_amount == Decimal("0.01")

def test_rates_can_be_overridden():
    totals = calculate_totals(
        [Line(Decimal("50.00"), 1)],
        tax_rate=Decimal("0.20"),
        free_shipping_threshold=Decimal("40"),
        flat_shipping_fee=Decimal("5"),
    )
    assert totals.tax_amount == Decimal("10.00")
    assert totals.shipping_amount == ZERO
    assert totals.total == Decimal("60.00")

def test_percentage_discount():
    assert calculate_discount(DiscountType.PERCENTAGE, Decimal("15"), Decimal("80.00")) == Decimal("12.00")

def test_percentage_discount_is_capped():
    discount = calculate_discount(DiscountType.PERCENTAGE, Decimal("50"), Decimal("80.00"), Decimal("25"))
    assert discount == Decimal("25.00")

def test_fixed_discount_ignores_cap():
    discount = calculate_discount(DiscountType.FIXED, Decimal("30"), Decimal("80.00"), Decimal("5"))
    assert discount == Decimal("30.00")

def test_discounted_total_never_negative():
    totals = calculate_totals([Line(Decimal("10.00"), 1)])
    assert discounted_total(totals, Decimal("500")) == ZERO
    assert discounted_total(totals, Decimal("1.00")) == Decimal("20.00")
