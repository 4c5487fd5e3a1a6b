"""
Special Handling Surcharge (SPECIAL_HANDLING)

Flat fee per special-handling flag selected (fragile, hazardous, ...).
"""

import polars as pl

from .base import Surcharge


class SPECIAL_HANDLING(Surcharge):
    """Special handling - fee per selected flag."""

    name = "SPECIAL_HANDLING"
    list_price = 10.00
    pricing = "PER_UNIT"
    request_field = "special_handling_count"

    @classmethod
    def conditions(cls) -> pl.Expr:
        return pl.col(cls.request_field).fill_null(0) > 0

    @classmethod
    def amount(cls) -> pl.Expr:
        return pl.col(cls.request_field) * cls.list_price
