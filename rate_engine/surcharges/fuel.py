"""
Fuel Surcharge (FUEL)

Percentage of the base service cost. The rate is taken per shipment from
fuel_surcharge_rate so callers can pass the current published rate; the
reference default is used when the column is absent.
"""

import polars as pl

from .base import Surcharge
from ..data.reference.fuel import RATE


class FUEL(Surcharge):
    """Fuel - percentage of cost_base."""

    # Identity
    name = "FUEL"

    # Pricing
    list_price = RATE
    pricing = "PERCENT"

    # Computed from base cost, so applied after it
    depends_on = "cost_base"

    @classmethod
    def conditions(cls) -> pl.Expr:
        return pl.col("fuel_surcharge_rate") > 0

    @classmethod
    def amount(cls) -> pl.Expr:
        return pl.col(cls.depends_on) * pl.col("fuel_surcharge_rate")
