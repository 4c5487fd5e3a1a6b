"""
Rate Engine Data

Reference data and loaders for service tiers, zone multipliers, and
configuration.

Structure:
    - reference/: Static reference data (divisors, fuel, discounts, CSV tables)
"""

import polars as pl
from pathlib import Path

from .reference.billable_weight import (
    DIM_FACTOR_DOMESTIC,
    DIM_FACTOR_INTERNATIONAL,
    CM3_PER_IN3,
    WEIGHT_UNITS,
    DIMENSION_UNITS,
)
from .reference.fuel import RATE


REFERENCE_DIR = Path(__file__).parent / "reference"


def load_service_tiers(path: Path | str | None = None) -> pl.DataFrame:
    """
    Load the service tier catalog from CSV.

    Args:
        path: CSV file (defaults to reference/service_tiers.csv)

    Returns:
        DataFrame with columns:
            - id, name, description: Identity and display text
            - base_rate: Currency per unit of billable weight
            - estimated_days: Transit estimate ("3-5" or "1")
            - features: Semicolon-separated feature labels
            - international: True for cross-border tiers
            - recommended: True for the tier highlighted to customers
    """
    if path is None:
        path = REFERENCE_DIR / "service_tiers.csv"

    return pl.read_csv(
        path,
        schema_overrides={
            "id": pl.Utf8,
            "base_rate": pl.Float64,
            "estimated_days": pl.Utf8,  # Keep "1" as text, same as "3-5"
            "features": pl.Utf8,
            "international": pl.Boolean,
            "recommended": pl.Boolean,
        },
    )


def load_zone_multipliers(path: Path | str | None = None) -> pl.DataFrame:
    """
    Load deterministic base-cost multipliers keyed by zone pair.

    Args:
        path: CSV file (defaults to reference/zone_multipliers.csv)

    Returns:
        DataFrame with columns: origin_zone, destination_zone, multiplier
    """
    if path is None:
        path = REFERENCE_DIR / "zone_multipliers.csv"

    return pl.read_csv(
        path,
        schema_overrides={
            "origin_zone": pl.Utf8,       # Zones are labels, not numbers
            "destination_zone": pl.Utf8,
            "multiplier": pl.Float64,
        },
    )


def zone_multiplier(
    zones: pl.DataFrame,
    origin_zone: str | int,
    destination_zone: str | int,
) -> float:
    """
    Look up the multiplier for one zone pair.

    Pairs missing from the table price at 1.0.
    """
    match = zones.filter(
        (pl.col("origin_zone").cast(pl.Utf8) == str(origin_zone)) &
        (pl.col("destination_zone").cast(pl.Utf8) == str(destination_zone))
    )
    if len(match) == 0:
        return 1.0
    return float(match["multiplier"][0])


# Re-export fuel rate for convenience
FUEL_RATE = RATE

__all__ = [
    # Reference data loaders
    "load_service_tiers",
    "load_zone_multipliers",
    "zone_multiplier",
    "REFERENCE_DIR",
    # Billable weight config
    "DIM_FACTOR_DOMESTIC",
    "DIM_FACTOR_INTERNATIONAL",
    "CM3_PER_IN3",
    "WEIGHT_UNITS",
    "DIMENSION_UNITS",
    # Fuel config
    "RATE",
    "FUEL_RATE",
]
