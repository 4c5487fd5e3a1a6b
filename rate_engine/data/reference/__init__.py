"""
Reference Data

Static configuration for divisors, fuel and discounts, plus the CSV
reference tables (service tiers, zone multipliers).
"""

from .billable_weight import (
    DIM_FACTOR_DOMESTIC,
    DIM_FACTOR_INTERNATIONAL,
    CM3_PER_IN3,
    WEIGHT_UNITS,
    DIMENSION_UNITS,
)
from .fuel import RATE

__all__ = [
    "DIM_FACTOR_DOMESTIC",
    "DIM_FACTOR_INTERNATIONAL",
    "CM3_PER_IN3",
    "WEIGHT_UNITS",
    "DIMENSION_UNITS",
    "RATE",
]
