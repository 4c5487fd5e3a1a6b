"""
Delivery Estimates

Transit-day parsing and delivery date estimates. Delivery dates count
calendar days from the ship date; the lower bound of a transit range is the
"by" date shown to the customer.
"""

import polars as pl

from .errors import InvalidInputError
from .models import TransitDays


def parse_transit_days(value) -> TransitDays:
    """
    Parse a catalog transit estimate.

    Accepts an int (3), a range string ("3-5"), a single-day string ("1"),
    a (min, max) tuple, or an existing TransitDays.
    """
    if isinstance(value, TransitDays):
        return value
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid transit days: {value!r}")
    if isinstance(value, int):
        return TransitDays.fixed(value)
    if isinstance(value, tuple) and len(value) == 2:
        return TransitDays(int(value[0]), int(value[1]))
    if isinstance(value, str):
        parts = [p.strip() for p in value.split("-")]
        try:
            bounds = [int(p) for p in parts]
        except ValueError:
            raise InvalidInputError(f"Invalid transit days: {value!r}")
        if len(bounds) == 1:
            return TransitDays.fixed(bounds[0])
        if len(bounds) == 2:
            return TransitDays(bounds[0], bounds[1])
    raise InvalidInputError(f"Invalid transit days: {value!r}")


def estimate_delivery_date(ship_date: pl.Expr, min_days: pl.Expr) -> pl.Expr:
    """
    Ship date plus the lower transit bound, in calendar days.

    Args:
        ship_date: Date expression (e.g. pl.col("ship_date"))
        min_days: Integer expression for the lower transit bound

    Returns:
        Date expression
    """
    return (ship_date + pl.duration(days=min_days)).cast(pl.Date)


def format_transit_time(days: int) -> str:
    """Customer-facing transit label for a number of days."""
    if days <= 1:
        return "Next business day"
    if days <= 2:
        return "1-2 business days"
    if days <= 5:
        return "3-5 business days"
    if days <= 7:
        return "5-7 business days"
    return "7-14 business days"


__all__ = [
    "parse_transit_days",
    "estimate_delivery_date",
    "format_transit_time",
]
