"""
Rate Engine

Single-package API on top of the DataFrame calculator. Each call builds a
one-row shipment frame, runs it through calculate_costs, and converts the
rows back into QuoteResults, so the object API and batch quoting always
agree.

USAGE
-----
    from rate_engine import PackageSpec, SurchargeRequest, ServiceCatalog, quote

    package = PackageSpec(weight=5.0, length=10, width=10, height=10, declared_value=100)
    quotes = quote(package, SurchargeRequest(insurance_required=True), ServiceCatalog.load_default())
"""

import logging
import math
from datetime import date

import polars as pl

from .calculate_costs import (
    calculate_quotes,
    add_volumetric_weight,
    add_billable_weight,
    validate_weights,
    validate_billable_weights,
)
from .catalog import ServiceCatalog
from .columns import shipment_schema, default_ship_date
from .data import DIM_FACTOR_DOMESTIC, DIM_FACTOR_INTERNATIONAL
from .errors import InvalidInputError
from .models import PackageSpec, SurchargeRequest, CustomerDiscount, QuoteResult


logger = logging.getLogger(__name__)


# =============================================================================
# DIVISOR SELECTION
# =============================================================================

def divisor_for(is_international: bool, use_international_divisor: bool = False) -> int:
    """
    Volumetric divisor for a shipment.

    The domestic divisor is used for every quote unless the caller opts into
    the international divisor for cross-border shipments.
    """
    if is_international and use_international_divisor:
        return DIM_FACTOR_INTERNATIONAL
    return DIM_FACTOR_DOMESTIC


# =============================================================================
# WEIGHTS
# =============================================================================

def compute_volumetric_weight(package: PackageSpec, divisor: float = DIM_FACTOR_DOMESTIC) -> float:
    """
    Volumetric weight in the package's weight unit, rounded to 2 decimals.

    Returns 0.0 when any dimension is missing or non-positive. Never raises.
    """
    frame = _package_frame(package, volumetric_divisor=divisor)
    return float(add_volumetric_weight(frame)["dim_weight"][0])


def compute_billable_weight(package: PackageSpec, divisor: float = DIM_FACTOR_DOMESTIC) -> float:
    """
    Greater of actual weight and volumetric weight.

    Raises:
        InvalidPackageError: weight is non-positive or not finite
        InvalidInputError: dimensions overflow to a non-finite weight
    """
    frame = _package_frame(package, volumetric_divisor=divisor)
    validate_weights(frame)
    frame = add_billable_weight(add_volumetric_weight(frame))
    validate_billable_weights(frame)
    return float(frame["billable_weight"][0])


# =============================================================================
# QUOTE
# =============================================================================

def quote(
    package: PackageSpec,
    surcharges: SurchargeRequest | None,
    tiers,
    is_international: bool = False,
    *,
    distance_multiplier: float = 1.0,
    discount: CustomerDiscount | None = None,
    ship_date: date | None = None,
    volumetric_divisor: float | None = None,
) -> list[QuoteResult]:
    """
    Price a package against every service tier, cheapest first.

    Args:
        package: Package being shipped
        surcharges: Selected add-ons (None = no add-ons, default fuel rate)
        tiers: ServiceCatalog or iterable of ServiceTier
        is_international: Origin country differs from destination country.
            The engine never adds tiers; callers add an international tier
            with ServiceCatalog.with_tier when they need one.
        distance_multiplier: Deterministic base-cost multiplier, e.g. from
            data.zone_multiplier for the route's zone pair
        discount: Customer discount reported as discount_amount / net_cost
        ship_date: Date the delivery estimate counts from (default today)
        volumetric_divisor: Override the divisor (see divisor_for)

    Returns:
        One QuoteResult per tier, ascending by total_cost; equal totals keep
        catalog order.

    Raises:
        InvalidPackageError: weight <= 0
        InvalidInputError: negative or non-finite money, rate, count or multiplier,
            fractional special_handling_count, or costs too large to represent
        EmptyCatalogError: no tiers
    """
    catalog = ServiceCatalog.of(tiers)
    _validate_discount(discount)

    if is_international and not catalog.has_international_tier:
        logger.debug("International shipment quoted against a catalog with no international tier")

    frame = _package_frame(
        package,
        surcharges,
        distance_multiplier=distance_multiplier,
        discount=discount,
        ship_date=ship_date,
        volumetric_divisor=DIM_FACTOR_DOMESTIC if volumetric_divisor is None else volumetric_divisor,
        is_international=is_international,
    )

    quotes = calculate_quotes(frame, catalog)
    results = [_to_quote_result(row, catalog) for row in quotes.iter_rows(named=True)]

    logger.debug(
        "Quoted %d service(s): billable weight %.2f, cheapest %s at %.2f",
        len(results),
        results[0].billable_weight,
        results[0].service_id,
        results[0].total_cost,
    )

    return results


# =============================================================================
# HELPERS
# =============================================================================

def _validate_discount(discount: CustomerDiscount | None) -> None:
    if discount is None:
        return

    parts = {
        "loyalty_percent": discount.loyalty_percent,
        "volume_percent": discount.volume_percent,
        "promo_percent": discount.promo_percent,
    }
    for name, value in parts.items():
        if not math.isfinite(value) or value < 0 or value > 100:
            raise InvalidInputError(f"{name} must be within [0, 100], got {value}")

    if discount.total_percent > 100:
        raise InvalidInputError(
            f"Combined discount cannot exceed 100%, got {discount.total_percent}"
        )


def _package_frame(
    package: PackageSpec,
    surcharges: SurchargeRequest | None = None,
    *,
    distance_multiplier: float = 1.0,
    discount: CustomerDiscount | None = None,
    ship_date: date | None = None,
    volumetric_divisor: float = DIM_FACTOR_DOMESTIC,
    is_international: bool = False,
) -> pl.DataFrame:
    """Single-row shipment frame with every column the calculator reads."""
    if surcharges is None:
        surcharges = SurchargeRequest()

    count = surcharges.special_handling_count
    if isinstance(count, bool) or not float(count).is_integer():
        raise InvalidInputError(f"special_handling_count must be a whole number, got {count}")

    row = {
        "weight": package.weight,
        "length": package.length,
        "width": package.width,
        "height": package.height,
        "declared_value": package.declared_value,
        "weight_unit": package.weight_unit,
        "dimension_unit": package.dimension_unit,
        "insurance_required": surcharges.insurance_required,
        "signature_required": surcharges.signature_required,
        "special_handling_count": int(count),
        "residential": surcharges.residential,
        "fuel_surcharge_rate": surcharges.fuel_surcharge_rate,
        "distance_multiplier": distance_multiplier,
        "volumetric_divisor": volumetric_divisor,
        "discount_percent": discount.total_percent if discount is not None else 0.0,
        "is_international": is_international,
        "ship_date": ship_date or default_ship_date(),
    }

    schema = shipment_schema()
    return pl.DataFrame({col: [row[col]] for col in schema}, schema=schema, strict=False)


def _to_quote_result(row: dict, catalog: ServiceCatalog) -> QuoteResult:
    tier = catalog.get(row["service_id"])
    return QuoteResult(
        service_id=row["service_id"],
        service_name=row["service_name"],
        billable_weight=row["billable_weight"],
        volumetric_weight=row["dim_weight"],
        uses_volumetric_weight=row["uses_dim_weight"],
        base_cost=row["cost_base"],
        fuel_surcharge=row["cost_fuel"],
        insurance_cost=row["cost_insurance"],
        signature_cost=row["cost_signature"],
        special_handling_cost=row["cost_special_handling"],
        residential_cost=row["cost_residential"],
        total_cost=row["cost_total"],
        estimated_delivery_date=row["estimated_delivery_date"],
        transit_days=tier.transit_days,
        transit_label=row["transit_label"],
        features=tier.features,
        is_recommended=row["recommended"],
        discount_amount=row["cost_discount"],
        net_cost=row["cost_net"],
        calculator_version=row["calculator_version"],
    )


__all__ = [
    "divisor_for",
    "compute_volumetric_weight",
    "compute_billable_weight",
    "quote",
]
