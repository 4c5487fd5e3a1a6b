"""
Column Schema Definitions

Documents all columns at each pipeline stage.
"""

from datetime import date

import polars as pl

from .data.reference.billable_weight import DIM_FACTOR_DOMESTIC
from .data.reference.fuel import RATE as FUEL_RATE
from .surcharges import ALL as ALL_SURCHARGES


# =============================================================================
# REQUIRED INPUT COLUMNS (must be present in every shipment frame)
# =============================================================================

REQUIRED_INPUT_COLS = [
    "weight",               # Actual weight (weight_unit)
]


# =============================================================================
# OPTIONAL INPUT COLUMNS (filled with defaults when absent or null)
# =============================================================================

DIMENSION_COLS = [
    "length",               # Package length (dimension_unit), null if unknown
    "width",                # Package width (dimension_unit), null if unknown
    "height",               # Package height (dimension_unit), null if unknown
]

OPTIONAL_INPUT_DEFAULTS = {
    # column: (default, dtype)
    "declared_value": (0.0, pl.Float64),             # Currency, for insurance
    "weight_unit": ("lb", pl.Utf8),                  # "lb" or "kg"
    "dimension_unit": ("in", pl.Utf8),               # "in" or "cm"
    "insurance_required": (False, pl.Boolean),
    "signature_required": (False, pl.Boolean),
    "special_handling_count": (0, pl.Int64),
    "residential": (False, pl.Boolean),          # Destination is a residence
    "fuel_surcharge_rate": (FUEL_RATE, pl.Float64),  # Fraction in [0, 1)
    "distance_multiplier": (1.0, pl.Float64),        # Overridden by zone lookup
    "volumetric_divisor": (float(DIM_FACTOR_DOMESTIC), pl.Float64),
    "discount_percent": (0.0, pl.Float64),           # Percent of cost_base
    "is_international": (False, pl.Boolean),
}

# ship_date defaults to today and is filled at call time
SHIP_DATE_COL = "ship_date"

ROUTE_COLS = [
    "origin_zone",          # Zone label for multiplier lookup
    "destination_zone",     # Zone label for multiplier lookup
    "origin_country",       # Used to derive is_international
    "destination_country",  # Used to derive is_international
]


def shipment_schema() -> dict:
    """Full schema of a single-package frame built by the object API."""
    schema = {"weight": pl.Float64}
    schema.update({c: pl.Float64 for c in DIMENSION_COLS})
    schema.update({c: dtype for c, (_, dtype) in OPTIONAL_INPUT_DEFAULTS.items()})
    schema[SHIP_DATE_COL] = pl.Date
    return schema


def default_ship_date() -> date:
    return date.today()


# =============================================================================
# SUPPLEMENT COLUMNS (added by supplement_shipments)
# =============================================================================

SUPPLEMENT_COLS = [
    "cubic_in",             # L x W x H in cubic inches (0 if not computable)
    "dim_weight",           # round(cubic_in / volumetric_divisor, 2), 0 if not computable
    "uses_dim_weight",      # True if dim weight > actual weight
    "billable_weight",      # Max of actual and dim weight
]


# =============================================================================
# TIER COLUMNS (joined from the service catalog)
# =============================================================================

TIER_COLS = [
    "tier_order",           # Position in the catalog (tie-break)
    "service_id",
    "service_name",
    "base_rate",            # Currency per unit of billable weight
    "transit_days_min",
    "transit_days_max",
    "transit_label",
    "international",        # Tier designated for cross-border shipping
    "recommended",
]


# =============================================================================
# SURCHARGE COLUMNS (added by calculate)
# =============================================================================

SURCHARGE_FLAG_COLS = [s.flag_col() for s in ALL_SURCHARGES]
# surcharge_fuel, surcharge_insurance, surcharge_signature, surcharge_special_handling,
# surcharge_residential

SURCHARGE_COST_COLS = [s.cost_col() for s in ALL_SURCHARGES]
# cost_fuel, cost_insurance, cost_signature, cost_special_handling, cost_residential


# =============================================================================
# COST COLUMNS (added by calculate)
# =============================================================================

COST_COLS = [
    "cost_base",            # base_rate * billable_weight * distance_multiplier (unrounded)
    "cost_total",           # round(base + all surcharges, 2)
    "cost_discount",        # discount_percent of cost_base
    "cost_net",             # Total minus discount
]


# =============================================================================
# QUOTE COLUMNS (added by calculate)
# =============================================================================

QUOTE_COLS = [
    "shipment_index",         # Row position of the shipment in the input
    "quote_rank",             # 1 = cheapest quote for the shipment
    "estimated_delivery_date",
    "calculator_version",
]


# =============================================================================
# OUTPUT SET
# =============================================================================

# Columns written by the batch script (input columns are carried as-is)
QUOTE_OUTPUT_COLS = (
    ["shipment_index", "quote_rank", "service_id", "service_name"] +
    ["weight", "dim_weight", "uses_dim_weight", "billable_weight"] +
    ["cost_base"] + SURCHARGE_COST_COLS + COST_COLS[1:] +
    ["estimated_delivery_date", "transit_label", "calculator_version"]
)

# Amounts rounded to cents when written out (components are unrounded in the frame)
MONEY_COLS = ["cost_base"] + SURCHARGE_COST_COLS + COST_COLS[1:]
