"""
Rate Engine

Shipment cost and billable-weight calculation: volumetric weight, billing
weight selection, surcharges, discounts and ranked multi-service quotes.

Two entry points share one calculation:
    - rate_engine.engine          - single package -> list[QuoteResult]
    - rate_engine.calculate_costs - shipment DataFrame -> quote DataFrame
"""

from .errors import (
    RateEngineError,
    InvalidPackageError,
    InvalidInputError,
    EmptyCatalogError,
)
from .models import (
    PackageSpec,
    TransitDays,
    ServiceTier,
    SurchargeRequest,
    CustomerDiscount,
    QuoteResult,
)
from .catalog import ServiceCatalog
from .calculate_costs import calculate_quotes
from .engine import (
    divisor_for,
    compute_volumetric_weight,
    compute_billable_weight,
    quote,
)
from .version import VERSION

__all__ = [
    # Errors
    "RateEngineError",
    "InvalidPackageError",
    "InvalidInputError",
    "EmptyCatalogError",
    # Models
    "PackageSpec",
    "TransitDays",
    "ServiceTier",
    "SurchargeRequest",
    "CustomerDiscount",
    "QuoteResult",
    # Catalog
    "ServiceCatalog",
    # Calculation
    "calculate_quotes",
    "divisor_for",
    "compute_volumetric_weight",
    "compute_billable_weight",
    "quote",
    "VERSION",
]
