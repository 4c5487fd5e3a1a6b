"""
Insurance Surcharge (INSURANCE)

1% of the declared value when the customer asks for insurance.
"""

import polars as pl

from .base import Surcharge


class INSURANCE(Surcharge):
    """Insurance - percentage of declared value."""

    name = "INSURANCE"
    list_price = 0.01
    pricing = "PERCENT"
    request_field = "insurance_required"

    @classmethod
    def amount(cls) -> pl.Expr:
        return pl.col("declared_value") * cls.list_price
