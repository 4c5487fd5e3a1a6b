"""
Surcharges Package

Exports all surcharge classes and processing groups.

Processing Order:
    1. BASE      - surcharges driven by request options only
    2. DEPENDENT - surcharges computed from a cost column (via depends_on)
"""

from .base import Surcharge
from .insurance import INSURANCE
from .signature import SIGNATURE
from .special_handling import SPECIAL_HANDLING
from .residential import RESIDENTIAL
from .fuel import FUEL


# All surcharges (order is the cost breakdown order)
ALL = [FUEL, INSURANCE, SIGNATURE, SPECIAL_HANDLING, RESIDENTIAL]


# =============================================================================
# PROCESSING GROUPS
# =============================================================================

# Phase 1: Request-driven surcharges
BASE = [s for s in ALL if s.depends_on is None]
# [INSURANCE, SIGNATURE, SPECIAL_HANDLING, RESIDENTIAL]

# Phase 2: Surcharges computed from a cost column
DEPENDENT = [s for s in ALL if s.depends_on is not None]
# [FUEL]


# =============================================================================
# VALIDATION
# =============================================================================

PRICING_TYPES = ("FLAT", "PER_UNIT", "PERCENT")


def validate_surcharges() -> None:
    """
    Validate surcharge configuration integrity.

    Raises ValueError if any configuration issues are found.
    Called at import time to fail fast on configuration errors.
    """
    names = [s.name for s in ALL]
    errors = []

    if len(names) != len(set(names)):
        errors.append(f"duplicate surcharge names in ALL: {names}")

    for s in ALL:
        if s.pricing not in PRICING_TYPES:
            errors.append(f"{s.name}: pricing '{s.pricing}' not in {PRICING_TYPES}")

        if s.list_price < 0:
            errors.append(f"{s.name}: list_price must be non-negative, got {s.list_price}")

        # Percent rates are fractions
        if s.pricing == "PERCENT" and s.list_price >= 1:
            errors.append(f"{s.name}: PERCENT list_price must be < 1, got {s.list_price}")

        # Dependent surcharges read a cost column, never another request field
        if s.depends_on is not None and not s.depends_on.startswith("cost_"):
            errors.append(f"{s.name}: depends_on '{s.depends_on}' must be a cost column")

        if s.depends_on is not None and s.request_field is not None:
            errors.append(f"{s.name}: cannot have both depends_on and request_field")

    if errors:
        raise ValueError("Surcharge configuration errors:\n  " + "\n  ".join(errors))


# Run validation at import time
validate_surcharges()

__all__ = [
    # Base
    "Surcharge",
    # Surcharge classes
    "FUEL",
    "INSURANCE",
    "SIGNATURE",
    "SPECIAL_HANDLING",
    "RESIDENTIAL",
    # Lists
    "ALL",
    "BASE",
    "DEPENDENT",
    # Validation
    "validate_surcharges",
]
