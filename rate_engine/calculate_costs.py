"""
Shipment Quote Calculator

DataFrame in, DataFrame out. The input can come from any source (CSV, an
order form, manual creation) as long as it contains the required columns.
The output has one row per shipment per service tier, with calculation
columns and costs appended, ranked cheapest first within each shipment.

REQUIRED INPUT COLUMNS
----------------------
    weight              - Actual weight (must be > 0)

OPTIONAL INPUT COLUMNS (defaults in columns.OPTIONAL_INPUT_DEFAULTS)
----------------------
    length, width, height       - Dimensions (null/0 = volumetric not computable)
    declared_value              - Currency, used for insurance
    weight_unit, dimension_unit - "lb"/"kg", "in"/"cm"
    insurance_required, signature_required, special_handling_count, residential
    fuel_surcharge_rate         - Fraction of cost_base, default 0.15
    distance_multiplier         - Base cost multiplier, default 1.0
    volumetric_divisor          - Default 166
    discount_percent            - Percent of cost_base, reported separately
    ship_date                   - Default today
    origin_zone, destination_zone          - Zone multiplier lookup
    origin_country, destination_country    - Derive is_international

OUTPUT COLUMNS ADDED
--------------------
    supplement_shipments() adds:
        - cubic_in, dim_weight, uses_dim_weight, billable_weight
        - distance_multiplier (zone lookup), volumetric_divisor, is_international

    calculate() adds:
        - tier columns (tier_order, service_id, service_name, base_rate, ...)
        - surcharge_* flags (fuel, insurance, signature, special_handling,
          residential)
        - cost_* amounts (base, fuel, insurance, signature, special_handling,
          residential, total, discount, net). Components are unrounded;
          cost_total, cost_discount and cost_net are rounded to cents
        - estimated_delivery_date, shipment_index, quote_rank
        - calculator_version

USAGE
-----
    from rate_engine.calculate_costs import calculate_quotes
    quotes = calculate_quotes(df, ServiceCatalog.load_default())
"""

import polars as pl

from .catalog import ServiceCatalog, TIER_FRAME_SCHEMA
from .columns import (
    REQUIRED_INPUT_COLS,
    DIMENSION_COLS,
    OPTIONAL_INPUT_DEFAULTS,
    SHIP_DATE_COL,
    default_ship_date,
)
from .data import (
    CM3_PER_IN3,
    DIM_FACTOR_INTERNATIONAL,
    WEIGHT_UNITS,
    DIMENSION_UNITS,
)
from .delivery import estimate_delivery_date
from .errors import InvalidPackageError, InvalidInputError, EmptyCatalogError
from .surcharges import ALL, BASE, DEPENDENT
from .version import VERSION


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def calculate_quotes(
    df: pl.DataFrame,
    catalog,
    zone_multipliers: pl.DataFrame | None = None,
    use_international_divisor: bool = False,
) -> pl.DataFrame:
    """
    Calculate ranked service quotes for a shipment DataFrame.

    This is the main entry point. Takes raw shipment data and returns one
    row per (shipment, service tier) with all calculation columns and costs.

    Args:
        df: Raw shipment DataFrame with required columns (see module docstring)
        catalog: ServiceCatalog, iterable of ServiceTier, or tier frame
        zone_multipliers: Zone pair multipliers (see data.load_zone_multipliers)
        use_international_divisor: Use the international divisor for
            international shipments that don't set volumetric_divisor

    Returns:
        DataFrame with supplemented data, surcharge flags, costs and ranking

    Raises:
        InvalidPackageError: weight missing, non-positive or not finite
        InvalidInputError: negative/non-finite money, rate, count or unit
        EmptyCatalogError: catalog has no tiers
    """
    df = supplement_shipments(df, zone_multipliers, use_international_divisor)
    df = calculate(df, catalog)
    return df


# =============================================================================
# SUPPLEMENT SHIPMENTS
# =============================================================================

def supplement_shipments(
    df: pl.DataFrame,
    zone_multipliers: pl.DataFrame | None = None,
    use_international_divisor: bool = False,
) -> pl.DataFrame:
    """
    Fill defaults, validate, and add weight and route calculations.

    Args:
        df: Raw shipment DataFrame
        zone_multipliers: Zone pair multipliers (no lookup if not provided)
        use_international_divisor: See calculate_quotes

    Returns:
        DataFrame with added columns:
            - cubic_in, dim_weight, uses_dim_weight, billable_weight
    """
    divisor_given = "volumetric_divisor" in df.columns

    df = _flag_international(df)
    df = fill_defaults(df)
    validate_shipments(df)

    if use_international_divisor and not divisor_given:
        df = _apply_international_divisor(df)

    df = _lookup_zone_multipliers(df, zone_multipliers)
    df = add_volumetric_weight(df)
    df = add_billable_weight(df)
    validate_billable_weights(df)

    return df


def fill_defaults(df: pl.DataFrame) -> pl.DataFrame:
    """Add missing optional columns and replace nulls with defaults."""
    missing = [c for c in REQUIRED_INPUT_COLS if c not in df.columns]
    if missing:
        raise InvalidPackageError(f"Shipment data is missing required column(s): {missing}")
    validate_counts(df)

    exprs = [pl.col("weight").cast(pl.Float64)]

    # Dimensions stay null when unknown
    for col in DIMENSION_COLS:
        if col in df.columns:
            exprs.append(pl.col(col).cast(pl.Float64))
        else:
            exprs.append(pl.lit(None, dtype=pl.Float64).alias(col))

    for col, (default, dtype) in OPTIONAL_INPUT_DEFAULTS.items():
        if col in df.columns:
            exprs.append(pl.col(col).cast(dtype).fill_null(pl.lit(default, dtype=dtype)))
        else:
            exprs.append(pl.lit(default, dtype=dtype).alias(col))

    if SHIP_DATE_COL in df.columns:
        exprs.append(pl.col(SHIP_DATE_COL).cast(pl.Date).fill_null(pl.lit(default_ship_date())))
    else:
        exprs.append(pl.lit(default_ship_date()).alias(SHIP_DATE_COL))

    return df.with_columns(exprs)


def _flag_international(df: pl.DataFrame) -> pl.DataFrame:
    """Derive is_international from origin/destination country when not given."""
    if "is_international" in df.columns:
        return df
    if "origin_country" not in df.columns or "destination_country" not in df.columns:
        return df

    return df.with_columns(
        (
            pl.col("origin_country").str.strip_chars().str.to_uppercase() !=
            pl.col("destination_country").str.strip_chars().str.to_uppercase()
        )
        .fill_null(False)
        .alias("is_international")
    )


# =============================================================================
# VALIDATION
# =============================================================================

def _count(df: pl.DataFrame, condition: pl.Expr) -> int:
    """Number of rows where condition holds (nulls count as True)."""
    return int(df.select(condition.fill_null(True).sum()).item())


def validate_weights(df: pl.DataFrame) -> None:
    """Raise InvalidPackageError if any weight is missing, non-positive or not finite."""
    bad = _count(df, ~pl.col("weight").is_finite() | (pl.col("weight") <= 0))
    if bad:
        raise InvalidPackageError(
            f"{bad} shipment(s) have a missing, non-positive or non-finite weight."
        )


def validate_shipments(df: pl.DataFrame) -> None:
    """
    Validate a defaults-filled shipment frame.

    Weight problems raise InvalidPackageError; everything else raises
    InvalidInputError. Dimensions are never validated: unusable dimensions
    degrade to a volumetric weight of zero.
    """
    validate_weights(df)

    checks = [
        (
            ~pl.col("declared_value").is_finite() | (pl.col("declared_value") < 0),
            "a negative or non-finite declared_value",
        ),
        (
            ~pl.col("fuel_surcharge_rate").is_finite() |
            (pl.col("fuel_surcharge_rate") < 0) |
            (pl.col("fuel_surcharge_rate") >= 1),
            "a fuel_surcharge_rate outside [0, 1)",
        ),
        (
            pl.col("special_handling_count") < 0,
            "a negative special_handling_count",
        ),
        (
            ~pl.col("distance_multiplier").is_finite() | (pl.col("distance_multiplier") < 0),
            "a negative or non-finite distance_multiplier",
        ),
        (
            ~pl.col("volumetric_divisor").is_finite() | (pl.col("volumetric_divisor") <= 0),
            "a non-positive volumetric_divisor",
        ),
        (
            ~pl.col("discount_percent").is_finite() |
            (pl.col("discount_percent") < 0) |
            (pl.col("discount_percent") > 100),
            "a discount_percent outside [0, 100]",
        ),
        (
            ~pl.col("weight_unit").is_in(list(WEIGHT_UNITS)),
            f"a weight_unit not in {WEIGHT_UNITS}",
        ),
        (
            ~pl.col("dimension_unit").is_in(list(DIMENSION_UNITS)),
            f"a dimension_unit not in {DIMENSION_UNITS}",
        ),
    ]

    for condition, description in checks:
        bad = _count(df, condition)
        if bad:
            raise InvalidInputError(f"{bad} shipment(s) have {description}.")


def validate_counts(df: pl.DataFrame) -> None:
    """Raise InvalidInputError if special_handling_count is given as a non-whole number."""
    col = "special_handling_count"
    if col not in df.columns or not df.schema[col].is_float():
        return

    bad = int(df.select(
        (
            pl.col(col).is_not_null() &
            (~pl.col(col).is_finite() | (pl.col(col) != pl.col(col).floor()))
        ).sum()
    ).item())
    if bad:
        raise InvalidInputError(f"{bad} shipment(s) have a non-integer {col}.")


def validate_billable_weights(df: pl.DataFrame) -> None:
    """Raise InvalidInputError if dimensions overflow to a non-finite weight."""
    bad = _count(df, ~pl.col("dim_weight").is_finite() | ~pl.col("billable_weight").is_finite())
    if bad:
        raise InvalidInputError(
            f"{bad} shipment(s) have dimensions too large for a finite billable weight."
        )


def validate_costs(df: pl.DataFrame) -> None:
    """Raise InvalidInputError if any cost overflowed to inf or NaN."""
    cost_cols = ["cost_base"] + [s.cost_col() for s in ALL] + ["cost_total", "cost_discount", "cost_net"]
    bad = _count(df, pl.any_horizontal([~pl.col(c).is_finite() for c in cost_cols]))
    if bad:
        raise InvalidInputError(
            f"{bad} quote(s) have a cost too large to represent."
        )


def _validate_tiers(tiers: pl.DataFrame) -> None:
    """Raise EmptyCatalogError / InvalidInputError for unusable tiers."""
    if len(tiers) == 0:
        raise EmptyCatalogError("No service tiers supplied.")

    bad = _count(tiers, ~pl.col("base_rate").is_finite() | (pl.col("base_rate") < 0))
    if bad:
        raise InvalidInputError(
            f"{bad} service tier(s) have a negative or non-finite base_rate."
        )


# =============================================================================
# WEIGHT AND ROUTE
# =============================================================================

def _apply_international_divisor(df: pl.DataFrame) -> pl.DataFrame:
    """Use the international divisor on international shipments."""
    return df.with_columns(
        pl.when(pl.col("is_international"))
        .then(pl.lit(float(DIM_FACTOR_INTERNATIONAL)))
        .otherwise(pl.col("volumetric_divisor"))
        .alias("volumetric_divisor")
    )


def _lookup_zone_multipliers(
    df: pl.DataFrame,
    zones: pl.DataFrame | None,
) -> pl.DataFrame:
    """
    Replace distance_multiplier with the zone table value for each zone pair.

    FALLBACK
    --------
    1. Exact (origin_zone, destination_zone) match from the zone table
    2. distance_multiplier already on the row (default 1.0)
    """
    if zones is None:
        return df
    if "origin_zone" not in df.columns or "destination_zone" not in df.columns:
        return df

    zones_subset = (
        zones
        .select([
            pl.col("origin_zone").cast(pl.Utf8).alias("_origin_zone"),
            pl.col("destination_zone").cast(pl.Utf8).alias("_destination_zone"),
            pl.col("multiplier").cast(pl.Float64).alias("_zone_multiplier"),
        ])
        .unique(subset=["_origin_zone", "_destination_zone"], keep="first")
    )

    df = df.with_row_index("_row_id")
    df = df.with_columns([
        pl.col("origin_zone").cast(pl.Utf8).alias("_origin_zone"),
        pl.col("destination_zone").cast(pl.Utf8).alias("_destination_zone"),
    ])

    df = df.join(zones_subset, on=["_origin_zone", "_destination_zone"], how="left")

    df = df.with_columns(
        pl.coalesce(["_zone_multiplier", "distance_multiplier"]).alias("distance_multiplier")
    )

    bad = _count(df, ~pl.col("distance_multiplier").is_finite() | (pl.col("distance_multiplier") < 0))
    if bad:
        raise InvalidInputError(f"{bad} shipment(s) have a negative zone multiplier.")

    df = df.sort("_row_id").drop(["_row_id", "_origin_zone", "_destination_zone", "_zone_multiplier"])

    return df


def add_volumetric_weight(df: pl.DataFrame) -> pl.DataFrame:
    """
    Add cubic_in and dim_weight.

    Volume is converted from cm3 to in3 before dividing, whatever unit the
    weight is in. Any missing, non-finite or non-positive dimension (or a
    non-positive divisor) makes both columns 0.0.
    """
    computable = pl.all_horizontal(
        [(pl.col(c).is_finite() & (pl.col(c) > 0)).fill_null(False) for c in DIMENSION_COLS] +
        [(pl.col("volumetric_divisor") > 0).fill_null(False)]
    )
    raw_volume = pl.col("length") * pl.col("width") * pl.col("height")

    df = df.with_columns(
        pl.when(computable & (pl.col("dimension_unit") == "cm"))
        .then(raw_volume / CM3_PER_IN3)
        .when(computable)
        .then(raw_volume)
        .otherwise(pl.lit(0.0))
        .alias("cubic_in")
    )

    return df.with_columns(
        pl.when(computable)
        .then((pl.col("cubic_in") / pl.col("volumetric_divisor")).round(2))
        .otherwise(pl.lit(0.0))
        .alias("dim_weight")
    )


def add_billable_weight(df: pl.DataFrame) -> pl.DataFrame:
    """Billable weight is the greater of actual weight and dimensional weight."""
    return df.with_columns([
        (pl.col("dim_weight") > pl.col("weight")).alias("uses_dim_weight"),
        pl.max_horizontal("weight", "dim_weight").alias("billable_weight"),
    ])


# =============================================================================
# CALCULATE COSTS
# =============================================================================

def calculate(df: pl.DataFrame, catalog) -> pl.DataFrame:
    """
    Price supplemented shipments against every tier in the catalog.

    Args:
        df: Supplemented shipment DataFrame from supplement_shipments
        catalog: ServiceCatalog, iterable of ServiceTier, or tier frame

    Returns:
        DataFrame with one row per (shipment, tier), ranked by cost_total

    Processing order:
        1. Base cost            - rate * billable weight * distance multiplier
        2. BASE surcharges      - driven by request options
        3. DEPENDENT surcharges - computed from cost_base (fuel)
        4. Total, discount, delivery date, ranking
    """
    tiers = _tiers_frame(catalog)
    _validate_tiers(tiers)

    # Phase 1: One row per shipment per tier
    df = _join_tiers(df, tiers)
    df = _apply_base_cost(df)

    # Phase 2: Request-driven surcharges
    df = _apply_surcharges(df, BASE)

    # Phase 3: Surcharges computed from cost columns
    df = _apply_surcharges(df, DEPENDENT)

    # Phase 4: Totals
    df = _calculate_total(df)
    df = _apply_discount(df)
    validate_costs(df)

    # Phase 5: Delivery date and ranking
    df = _estimate_delivery(df)
    df = _rank_quotes(df)

    # Phase 6: Stamp version
    df = _stamp_version(df)

    return df


def _tiers_frame(catalog) -> pl.DataFrame:
    """Tier frame in catalog order (see catalog.TIER_FRAME_SCHEMA)."""
    if isinstance(catalog, pl.DataFrame) and set(TIER_FRAME_SCHEMA).issubset(catalog.columns):
        return catalog.select(list(TIER_FRAME_SCHEMA))
    return ServiceCatalog.of(catalog).to_frame()


def _join_tiers(df: pl.DataFrame, tiers: pl.DataFrame) -> pl.DataFrame:
    """Cross join shipments with tiers, keeping the shipment's input position."""
    if "shipment_index" not in df.columns:
        df = df.with_row_index("shipment_index")
    return df.join(tiers, how="cross")


def _apply_base_cost(df: pl.DataFrame) -> pl.DataFrame:
    """Base cost = base_rate * billable_weight * distance_multiplier."""
    return df.with_columns(
        (pl.col("base_rate") * pl.col("billable_weight") * pl.col("distance_multiplier"))
        .alias("cost_base")
    )


def _apply_surcharges(df: pl.DataFrame, surcharges: list) -> pl.DataFrame:
    """Apply each surcharge: flag column first, then its cost."""
    for s in surcharges:
        df = df.with_columns(s.conditions().fill_null(False).alias(s.flag_col()))
        df = df.with_columns(s.cost().alias(s.cost_col()))
    return df


def _calculate_total(df: pl.DataFrame) -> pl.DataFrame:
    """cost_total = base plus all surcharge costs, rounded once to currency precision."""
    cost_cols = ["cost_base"] + [s.cost_col() for s in ALL]
    return df.with_columns(pl.sum_horizontal(cost_cols).round(2).alias("cost_total"))


def _apply_discount(df: pl.DataFrame) -> pl.DataFrame:
    """Customer discount on cost_base, reported separately from cost_total."""
    df = df.with_columns(
        (pl.col("cost_base") * pl.col("discount_percent") / 100)
        .round(2)
        .alias("cost_discount")
    )
    return df.with_columns(
        (pl.col("cost_total") - pl.col("cost_discount")).round(2).alias("cost_net")
    )


def _estimate_delivery(df: pl.DataFrame) -> pl.DataFrame:
    """Ship date plus the lower transit bound, in calendar days."""
    return df.with_columns(
        estimate_delivery_date(pl.col(SHIP_DATE_COL), pl.col("transit_days_min"))
        .alias("estimated_delivery_date")
    )


def _rank_quotes(df: pl.DataFrame) -> pl.DataFrame:
    """Sort cheapest first per shipment; equal totals keep catalog order."""
    df = df.sort(["shipment_index", "cost_total", "tier_order"], maintain_order=True)
    return df.with_columns(
        (pl.int_range(pl.len()).over("shipment_index") + 1).alias("quote_rank")
    )


def _stamp_version(df: pl.DataFrame) -> pl.DataFrame:
    """Stamp calculator version on output."""
    return df.with_columns(pl.lit(VERSION).alias("calculator_version"))


def cheapest_quotes(quotes: pl.DataFrame) -> pl.DataFrame:
    """Keep only the top-ranked quote for each shipment."""
    return quotes.filter(pl.col("quote_rank") == 1)


__all__ = [
    "calculate_quotes",
    "supplement_shipments",
    "calculate",
    "fill_defaults",
    "validate_weights",
    "validate_shipments",
    "validate_counts",
    "validate_billable_weights",
    "validate_costs",
    "add_volumetric_weight",
    "add_billable_weight",
    "cheapest_quotes",
]
