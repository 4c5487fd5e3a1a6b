"""
Surcharge Base Class

Shared base class for all quote surcharges.
"""

from abc import ABC
import polars as pl


# =============================================================================
# BASE CLASS
# =============================================================================

class Surcharge(ABC):
    """
    Base class for all surcharges.

    Attributes:
        IDENTITY
            name            - Short code, also the column suffix
                              (surcharge_<name>, cost_<name>)

        PRICING
            list_price      - Flat fee, per-unit fee, or rate depending on pricing
            pricing         - "FLAT", "PER_UNIT" or "PERCENT"

        TRIGGER
            request_field   - Input column that selects the surcharge

        DEPENDENCIES
            depends_on      - Cost column the amount is computed from
                              (e.g., "cost_base"); None for request-driven fees
    """

    # -------------------------------------------------------------------------
    # IDENTITY
    # -------------------------------------------------------------------------
    name: str

    # -------------------------------------------------------------------------
    # PRICING
    # -------------------------------------------------------------------------
    list_price: float
    pricing: str = "FLAT"

    # -------------------------------------------------------------------------
    # TRIGGER
    # -------------------------------------------------------------------------
    request_field: str | None = None

    # -------------------------------------------------------------------------
    # DEPENDENCIES
    # -------------------------------------------------------------------------
    depends_on: str | None = None

    # -------------------------------------------------------------------------
    # METHODS
    # -------------------------------------------------------------------------

    @classmethod
    def flag_col(cls) -> str:
        return f"surcharge_{cls.name.lower()}"

    @classmethod
    def cost_col(cls) -> str:
        return f"cost_{cls.name.lower()}"

    @classmethod
    def conditions(cls) -> pl.Expr:
        """
        Polars expression for when this surcharge triggers.

        Default reads the boolean request_field. Override for surcharges
        with other conditions.
        """
        if cls.request_field is None:
            return pl.lit(True)
        return pl.col(cls.request_field).fill_null(False)

    @classmethod
    def amount(cls) -> pl.Expr:
        """Polars expression for the (unrounded) amount when triggered."""
        return pl.lit(cls.list_price)

    @classmethod
    def cost(cls) -> pl.Expr:
        """Amount when triggered, else 0.0. Unrounded; only the total is rounded."""
        return (
            pl.when(pl.col(cls.flag_col()))
            .then(cls.amount())
            .otherwise(pl.lit(0.0))
            .cast(pl.Float64)
        )
