# vegist/services/pricing.py
"""
Price and discount arithmetic shared by the cart, checkout and product views.

All functions are pure. Amounts are plain floats; rounding happens only when
formatting for display.
"""
from typing import Iterable, Protocol

FREE_SHIPPING_THRESHOLD = 50.0
SHIPPING_FEE = 10.0


class Priced(Protocol):
    price: float
    quantity: int
    discount_percentage: float | None


def clamp_quantity(quantity: int) -> int:
    """Quantities never go below 1."""
    return max(1, int(quantity))


def effective_price(price: float, discount_percentage: float | None = 0) -> float:
    """
    Unit price after the discount percentage is applied.

    A missing or non-positive discount leaves the price untouched.
    """
    if discount_percentage and discount_percentage > 0:
        return price * (1 - discount_percentage / 100)
    return price


def line_total(item: Priced) -> float:
    return effective_price(item.price, item.discount_percentage) * clamp_quantity(
        item.quantity
    )


def cart_subtotal(items: Iterable[Priced]) -> float:
    return sum((line_total(it) for it in items), 0.0)


def shipping_fee(
    subtotal: float,
    threshold: float = FREE_SHIPPING_THRESHOLD,
    fee: float = SHIPPING_FEE,
) -> float:
    """
    Flat shipping fee, waived once the subtotal reaches the threshold.
    """
    if subtotal >= threshold:
        return 0.0
    return fee


def amount_to_free_shipping(
    subtotal: float,
    threshold: float = FREE_SHIPPING_THRESHOLD,
) -> float:
    return max(0.0, threshold - subtotal)


def free_shipping_progress(
    subtotal: float,
    threshold: float = FREE_SHIPPING_THRESHOLD,
) -> float:
    """Percentage (0-100) of the way to free shipping."""
    if threshold <= 0:
        return 100.0
    return min(subtotal / threshold * 100, 100.0)


def order_total(subtotal: float, shipping: float, discount: float = 0.0) -> float:
    """subtotal + shipping - discount, floored at zero."""
    return max(0.0, subtotal + shipping - discount)


def format_price(value: float) -> str:
    """2-decimal display string, e.g. 160 -> '160.00'."""
    return f"{value:.2f}"
