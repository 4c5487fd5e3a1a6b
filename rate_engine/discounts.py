"""
Customer Discounts

Loyalty, volume and promo-code discounts. All three are percentages of the
base service cost and combine additively into a CustomerDiscount, which the
engine reports as discount_amount / net_cost on each quote.
"""

from dataclasses import dataclass
from datetime import date

from .data.reference.discounts import LOYALTY_TIERS, VOLUME_TIERS, PROMO_CODES
from .errors import InvalidInputError
from .models import CustomerDiscount


@dataclass(frozen=True)
class PromoCode:
    code: str
    id: str
    type: str
    title: str
    discount_percent: float
    valid_until: date | None
    min_spend: float

    def is_valid(self, today: date, order_total: float | None = None) -> bool:
        if self.valid_until is not None and today > self.valid_until:
            return False
        if order_total is not None and order_total < self.min_spend:
            return False
        return True


def loyalty_tier(total_spend: float) -> str:
    """Loyalty tier name for a customer's lifetime spend."""
    _check_non_negative("total_spend", total_spend)
    for threshold, name, _ in LOYALTY_TIERS:
        if total_spend >= threshold:
            return name
    return LOYALTY_TIERS[-1][1]


def loyalty_discount_percent(total_spend: float) -> float:
    _check_non_negative("total_spend", total_spend)
    for threshold, _, percent in LOYALTY_TIERS:
        if total_spend >= threshold:
            return percent
    return 0.0


def volume_discount_percent(monthly_shipments: int) -> float:
    """Discount for shipments created this month."""
    _check_non_negative("monthly_shipments", monthly_shipments)
    for threshold, percent in VOLUME_TIERS:
        if monthly_shipments >= threshold:
            return percent
    return 0.0


def lookup_promo_code(
    code: str,
    today: date | None = None,
    order_total: float | None = None,
) -> PromoCode | None:
    """
    Find a promo code (case-insensitive).

    Returns None for unknown or expired codes, and for orders below the
    code's minimum spend when order_total is given.
    """
    key = code.strip().upper()
    if key not in PROMO_CODES:
        return None

    promo = PromoCode(key, *PROMO_CODES[key])
    if not promo.is_valid(today or date.today(), order_total):
        return None
    return promo


def build_customer_discount(
    total_spend: float = 0.0,
    monthly_shipments: int = 0,
    promo: PromoCode | None = None,
) -> CustomerDiscount:
    """Combine loyalty, volume and promo discounts for one customer."""
    return CustomerDiscount(
        loyalty_percent=loyalty_discount_percent(total_spend),
        volume_percent=volume_discount_percent(monthly_shipments),
        promo_percent=promo.discount_percent if promo is not None else 0.0,
    )


def _check_non_negative(name: str, value) -> None:
    if value < 0:
        raise InvalidInputError(f"{name} must be non-negative, got {value}")


__all__ = [
    "PromoCode",
    "loyalty_tier",
    "loyalty_discount_percent",
    "volume_discount_percent",
    "lookup_promo_code",
    "build_customer_discount",
]
