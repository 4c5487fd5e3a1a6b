"""
Rate Engine Models

Request-scoped value objects. Nothing here is persisted: a PackageSpec and a
SurchargeRequest are built per quote request, ServiceTiers come from a
ServiceCatalog, and QuoteResults are handed back to the caller.
"""

from dataclasses import dataclass
from datetime import date

from .data.reference.billable_weight import WEIGHT_UNITS, DIMENSION_UNITS
from .data.reference.fuel import RATE as DEFAULT_FUEL_RATE
from .errors import InvalidInputError


# =============================================================================
# PACKAGE
# =============================================================================

@dataclass(frozen=True)
class PackageSpec:
    """
    Physical package being shipped.

    Dimensions are optional. A missing, zero or negative dimension means
    volumetric weight is not computable and the actual weight is billed.
    """

    weight: float
    length: float | None = None
    width: float | None = None
    height: float | None = None
    declared_value: float = 0.0
    weight_unit: str = "lb"
    dimension_unit: str = "in"

    def __post_init__(self):
        if self.weight_unit not in WEIGHT_UNITS:
            raise InvalidInputError(
                f"weight_unit must be one of {WEIGHT_UNITS}, got '{self.weight_unit}'"
            )
        if self.dimension_unit not in DIMENSION_UNITS:
            raise InvalidInputError(
                f"dimension_unit must be one of {DIMENSION_UNITS}, got '{self.dimension_unit}'"
            )


# =============================================================================
# SERVICE TIERS
# =============================================================================

@dataclass(frozen=True)
class TransitDays:
    """Transit estimate in calendar days. A fixed estimate has min_days == max_days."""

    min_days: int
    max_days: int

    def __post_init__(self):
        if self.min_days < 0 or self.max_days < self.min_days:
            raise InvalidInputError(
                f"Invalid transit range {self.min_days}-{self.max_days}"
            )

    @classmethod
    def fixed(cls, days: int) -> "TransitDays":
        return cls(days, days)

    def __str__(self) -> str:
        if self.min_days == self.max_days:
            return str(self.min_days)
        return f"{self.min_days}-{self.max_days}"


@dataclass(frozen=True)
class ServiceTier:
    """
    A named shipping product.

    base_rate is currency per unit of billable weight. features are display
    text only and never enter pricing.
    """

    id: str
    name: str
    base_rate: float
    transit_days: TransitDays
    description: str = ""
    features: tuple[str, ...] = ()
    international: bool = False
    recommended: bool = False


# =============================================================================
# REQUEST OPTIONS
# =============================================================================

@dataclass(frozen=True)
class SurchargeRequest:
    """Optional add-ons selected for a shipment."""

    insurance_required: bool = False
    signature_required: bool = False
    special_handling_count: int = 0
    residential: bool = False
    fuel_surcharge_rate: float = DEFAULT_FUEL_RATE


@dataclass(frozen=True)
class CustomerDiscount:
    """
    Percent discounts applied to the base service cost.

    Reported as discount_amount / net_cost on each quote; total_cost is
    never reduced by a discount.
    """

    loyalty_percent: float = 0.0
    volume_percent: float = 0.0
    promo_percent: float = 0.0

    @property
    def total_percent(self) -> float:
        return self.loyalty_percent + self.volume_percent + self.promo_percent


# =============================================================================
# RESULT
# =============================================================================

@dataclass(frozen=True)
class QuoteResult:
    """
    One fully-priced option for one ServiceTier.

    Cost components are kept unrounded; total_cost is their sum rounded to
    cents. to_dict() rounds every amount for display.
    """

    service_id: str
    service_name: str
    billable_weight: float
    volumetric_weight: float
    uses_volumetric_weight: bool
    base_cost: float
    fuel_surcharge: float
    insurance_cost: float
    signature_cost: float
    special_handling_cost: float
    total_cost: float
    estimated_delivery_date: date
    transit_days: TransitDays
    transit_label: str
    features: tuple[str, ...] = ()
    is_recommended: bool = False
    residential_cost: float = 0.0
    discount_amount: float = 0.0
    net_cost: float = 0.0
    calculator_version: str = ""

    def to_dict(self) -> dict:
        """JSON-ready representation (money to 2 decimals, ISO-8601 date)."""
        return {
            "service_id": self.service_id,
            "service_name": self.service_name,
            "billable_weight": round(self.billable_weight, 2),
            "volumetric_weight": round(self.volumetric_weight, 2),
            "uses_volumetric_weight": self.uses_volumetric_weight,
            "base_cost": round(self.base_cost, 2),
            "fuel_surcharge": round(self.fuel_surcharge, 2),
            "insurance_cost": round(self.insurance_cost, 2),
            "signature_cost": round(self.signature_cost, 2),
            "special_handling_cost": round(self.special_handling_cost, 2),
            "residential_cost": round(self.residential_cost, 2),
            "total_cost": round(self.total_cost, 2),
            "discount_amount": round(self.discount_amount, 2),
            "net_cost": round(self.net_cost, 2),
            "estimated_delivery_date": self.estimated_delivery_date.isoformat(),
            "transit_days": str(self.transit_days),
            "transit_label": self.transit_label,
            "features": list(self.features),
            "is_recommended": self.is_recommended,
            "calculator_version": self.calculator_version,
        }


__all__ = [
    "PackageSpec",
    "TransitDays",
    "ServiceTier",
    "SurchargeRequest",
    "CustomerDiscount",
    "QuoteResult",
]
