"""
Unit Tests for the Single-Package Quote API

Tests volumetric and billable weight, quote pricing, ranking, discounts and
error handling through rate_engine.engine.
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import logging
import math

import pytest
from datetime import date

from rate_engine import (
    PackageSpec,
    TransitDays,
    ServiceTier,
    SurchargeRequest,
    CustomerDiscount,
    ServiceCatalog,
    InvalidPackageError,
    InvalidInputError,
    EmptyCatalogError,
    RateEngineError,
    divisor_for,
    compute_volumetric_weight,
    compute_billable_weight,
    quote,
    VERSION,
)


SHIP_DATE = date(2025, 6, 15)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def cube_package():
    """10 x 10 x 10 in, 5 lb, declared at 100."""
    return PackageSpec(weight=5.0, length=10, width=10, height=10, declared_value=100.0)


@pytest.fixture
def ground_tier():
    return ServiceTier("ground", "Ground", 3.00, TransitDays.fixed(3))


@pytest.fixture
def tiers():
    return ServiceCatalog([
        ServiceTier("express", "Express", 6.00, TransitDays(1, 2)),
        ServiceTier("ground", "Ground", 3.00, TransitDays(3, 5), recommended=True),
    ])


# =============================================================================
# VOLUMETRIC AND BILLABLE WEIGHT
# =============================================================================

class TestWeights:
    """Tests for compute_volumetric_weight and compute_billable_weight."""

    def test_volumetric_weight_inches(self, cube_package):
        assert compute_volumetric_weight(cube_package) == pytest.approx(6.02)

    def test_volumetric_weight_centimetres(self):
        """30 x 20 x 10 cm is converted to cubic inches before dividing."""
        package = PackageSpec(weight=1.0, length=30, width=20, height=10, dimension_unit="cm")
        expected = round((30 * 20 * 10 / 16.387) / 166, 2)
        assert compute_volumetric_weight(package) == pytest.approx(expected)
        assert compute_volumetric_weight(package) == pytest.approx(2.21)

    def test_missing_dimension_is_zero(self):
        package = PackageSpec(weight=5.0, length=10, width=10)
        assert compute_volumetric_weight(package) == 0.0

    @pytest.mark.parametrize("height", [0, -4, math.nan, math.inf])
    def test_unusable_dimension_is_zero(self, height):
        package = PackageSpec(weight=5.0, length=10, width=10, height=height)
        assert compute_volumetric_weight(package) == 0.0

    def test_volumetric_weight_never_raises_on_bad_weight(self):
        package = PackageSpec(weight=0.0, length=10, width=10, height=10)
        assert compute_volumetric_weight(package) == pytest.approx(6.02)

    def test_international_divisor(self, cube_package):
        assert compute_volumetric_weight(cube_package, divisor=139) == pytest.approx(7.19)

    def test_billable_uses_volumetric_when_heavier(self, cube_package):
        assert compute_billable_weight(cube_package) == pytest.approx(6.02)

    def test_billable_uses_actual_when_heavier(self):
        package = PackageSpec(weight=12.0, length=10, width=10, height=10)
        assert compute_billable_weight(package) == pytest.approx(12.0)

    @pytest.mark.parametrize("package", [
        PackageSpec(weight=0.5, length=20, width=15, height=10),
        PackageSpec(weight=30.0, length=5, width=5, height=5),
        PackageSpec(weight=2.0),
        PackageSpec(weight=2.0, length=30, width=20, height=10, weight_unit="kg", dimension_unit="cm"),
    ])
    def test_billable_never_below_actual(self, package):
        billable = compute_billable_weight(package)
        assert billable >= package.weight
        assert billable >= compute_volumetric_weight(package)

    @pytest.mark.parametrize("weight", [0.0, -1.0, math.nan, math.inf])
    def test_billable_rejects_bad_weight(self, weight):
        with pytest.raises(InvalidPackageError):
            compute_billable_weight(PackageSpec(weight=weight))

    def test_divisor_for(self):
        assert divisor_for(False) == 166
        assert divisor_for(True) == 166
        assert divisor_for(False, use_international_divisor=True) == 166
        assert divisor_for(True, use_international_divisor=True) == 139


# =============================================================================
# QUOTE PRICING
# =============================================================================

class TestQuote:
    """Tests for quote pricing."""

    def test_worked_example(self, cube_package, ground_tier):
        """Insurance on, 15% fuel, one 3.00/lb tier with 3-day transit."""
        results = quote(
            cube_package,
            SurchargeRequest(insurance_required=True, fuel_surcharge_rate=0.15),
            [ground_tier],
            ship_date=SHIP_DATE,
        )

        assert len(results) == 1
        q = results[0]
        assert q.volumetric_weight == pytest.approx(6.02)
        assert q.billable_weight == pytest.approx(6.02)
        assert q.uses_volumetric_weight is True
        assert q.base_cost == pytest.approx(18.06)
        assert q.fuel_surcharge == pytest.approx(2.709)
        assert q.insurance_cost == pytest.approx(1.00)
        assert q.signature_cost == pytest.approx(0.0)
        assert q.special_handling_cost == pytest.approx(0.0)
        assert q.total_cost == pytest.approx(21.77)
        assert q.estimated_delivery_date == date(2025, 6, 18)

    def test_no_surcharge_request(self, cube_package, ground_tier):
        """None means no add-ons; fuel still applies at the default rate."""
        q = quote(cube_package, None, [ground_tier], ship_date=SHIP_DATE)[0]
        assert q.insurance_cost == 0.0
        assert q.fuel_surcharge == pytest.approx(2.709)
        assert q.total_cost == pytest.approx(20.77)

    def test_signature_and_special_handling(self, cube_package, ground_tier):
        surcharges = SurchargeRequest(
            signature_required=True,
            special_handling_count=2,
            fuel_surcharge_rate=0.0,
        )
        q = quote(cube_package, surcharges, [ground_tier], ship_date=SHIP_DATE)[0]
        assert q.signature_cost == pytest.approx(5.50)
        assert q.special_handling_cost == pytest.approx(20.00)
        assert q.total_cost == pytest.approx(18.06 + 5.50 + 20.00)

    def test_total_is_sum_of_components(self, cube_package, tiers):
        surcharges = SurchargeRequest(
            insurance_required=True,
            signature_required=True,
            special_handling_count=1,
            fuel_surcharge_rate=0.12,
        )
        for q in quote(cube_package, surcharges, tiers, ship_date=SHIP_DATE):
            components = (
                q.base_cost + q.fuel_surcharge + q.insurance_cost +
                q.signature_cost + q.special_handling_cost + q.residential_cost
            )
            assert q.total_cost == pytest.approx(round(components, 2))

    def test_fuel_rate_monotonic(self, cube_package, ground_tier):
        low = quote(cube_package, SurchargeRequest(fuel_surcharge_rate=0.10), [ground_tier])[0]
        high = quote(cube_package, SurchargeRequest(fuel_surcharge_rate=0.20), [ground_tier])[0]
        assert high.total_cost > low.total_cost

    def test_sub_cent_components_rounded_once(self):
        """Two 0.004 fees add a cent to the total instead of vanishing."""
        tier = ServiceTier("penny", "Penny", 0.10, TransitDays.fixed(1))
        package = PackageSpec(weight=1.0, declared_value=0.4)
        q = quote(
            package,
            SurchargeRequest(insurance_required=True, fuel_surcharge_rate=0.04),
            [tier],
        )[0]
        assert q.fuel_surcharge == pytest.approx(0.004)
        assert q.insurance_cost == pytest.approx(0.004)
        assert q.total_cost == pytest.approx(0.11)

    def test_residential_surcharge(self, cube_package, tiers):
        """Residential delivery adds 3.50 to every tier and is not subject to fuel."""
        plain = quote(cube_package, SurchargeRequest(), tiers)
        residential = quote(cube_package, SurchargeRequest(residential=True), tiers)
        for before, after in zip(plain, residential):
            assert after.residential_cost == pytest.approx(3.50)
            assert after.fuel_surcharge == pytest.approx(before.fuel_surcharge)
            assert after.total_cost == pytest.approx(before.total_cost + 3.50)

    def test_distance_multiplier(self, cube_package, ground_tier):
        q = quote(
            cube_package,
            SurchargeRequest(fuel_surcharge_rate=0.0),
            [ground_tier],
            distance_multiplier=1.2,
        )[0]
        assert q.base_cost == pytest.approx(21.672)

    def test_international_divisor_opt_in(self, cube_package, ground_tier):
        q = quote(
            cube_package,
            None,
            [ground_tier],
            is_international=True,
            volumetric_divisor=divisor_for(True, use_international_divisor=True),
        )[0]
        assert q.billable_weight == pytest.approx(7.19)

    def test_international_does_not_add_tiers(self, cube_package, tiers):
        results = quote(cube_package, None, tiers, is_international=True)
        assert [q.service_id for q in results] == ["ground", "express"]

    def test_international_tier_added_by_caller(self, cube_package, tiers):
        intl = ServiceTier("intl", "International", 9.00, TransitDays(5, 10), international=True)
        results = quote(cube_package, None, tiers.with_tier(intl), is_international=True)
        assert [q.service_id for q in results] == ["ground", "express", "intl"]
        assert len(tiers) == 2

    def test_accepts_catalog_from_csv(self, cube_package):
        results = quote(cube_package, None, ServiceCatalog.load_default())
        assert len(results) == 4
        assert results[0].service_id == "standard"


# =============================================================================
# RANKING
# =============================================================================

class TestRanking:
    """Tests for quote ordering."""

    def test_cheapest_first(self, cube_package, tiers):
        results = quote(cube_package, None, tiers)
        totals = [q.total_cost for q in results]
        assert totals == sorted(totals)
        assert results[0].service_id == "ground"

    def test_equal_totals_keep_catalog_order(self, cube_package):
        a = ServiceTier("a", "A", 2.00, TransitDays.fixed(3))
        b = ServiceTier("b", "B", 2.00, TransitDays.fixed(3))

        assert [q.service_id for q in quote(cube_package, None, [a, b])] == ["a", "b"]
        assert [q.service_id for q in quote(cube_package, None, [b, a])] == ["b", "a"]

    def test_tier_metadata_carried(self, cube_package, tiers):
        ground = quote(cube_package, None, tiers, ship_date=SHIP_DATE)[0]
        assert ground.is_recommended is True
        assert ground.transit_days == TransitDays(3, 5)
        assert ground.transit_label == "3-5 business days"
        assert ground.estimated_delivery_date == date(2025, 6, 18)
        assert ground.calculator_version == VERSION


# =============================================================================
# DISCOUNTS
# =============================================================================

class TestDiscount:
    """Tests for discount reporting."""

    def test_discount_reported_separately(self, cube_package, ground_tier):
        q = quote(
            cube_package,
            SurchargeRequest(insurance_required=True),
            [ground_tier],
            discount=CustomerDiscount(loyalty_percent=10.0),
        )[0]
        assert q.total_cost == pytest.approx(21.77)
        assert q.discount_amount == pytest.approx(1.81)
        assert q.net_cost == pytest.approx(19.96)

    def test_no_discount(self, cube_package, ground_tier):
        q = quote(cube_package, None, [ground_tier])[0]
        assert q.discount_amount == 0.0
        assert q.net_cost == pytest.approx(q.total_cost)

    def test_discount_over_100_rejected(self, cube_package, ground_tier):
        with pytest.raises(InvalidInputError):
            quote(cube_package, None, [ground_tier], discount=CustomerDiscount(promo_percent=150.0))

    def test_combined_discount_over_100_rejected(self, cube_package, ground_tier):
        discount = CustomerDiscount(loyalty_percent=60.0, volume_percent=50.0)
        with pytest.raises(InvalidInputError):
            quote(cube_package, None, [ground_tier], discount=discount)


# =============================================================================
# ERRORS
# =============================================================================

class TestErrors:
    """Tests for input validation."""

    @pytest.mark.parametrize("weight", [0.0, -2.0, math.nan])
    def test_bad_weight(self, ground_tier, weight):
        with pytest.raises(InvalidPackageError):
            quote(PackageSpec(weight=weight), None, [ground_tier])

    def test_negative_declared_value(self, ground_tier):
        with pytest.raises(InvalidInputError):
            quote(PackageSpec(weight=1.0, declared_value=-5.0), None, [ground_tier])

    @pytest.mark.parametrize("surcharges", [
        SurchargeRequest(fuel_surcharge_rate=-0.1),
        SurchargeRequest(fuel_surcharge_rate=1.0),
        SurchargeRequest(special_handling_count=-1),
    ])
    def test_bad_surcharge_request(self, cube_package, ground_tier, surcharges):
        with pytest.raises(InvalidInputError):
            quote(cube_package, surcharges, [ground_tier])

    def test_negative_distance_multiplier(self, cube_package, ground_tier):
        with pytest.raises(InvalidInputError):
            quote(cube_package, None, [ground_tier], distance_multiplier=-1.0)

    def test_negative_base_rate(self, cube_package):
        tier = ServiceTier("bad", "Bad", -3.00, TransitDays.fixed(3))
        with pytest.raises(InvalidInputError):
            quote(cube_package, None, [tier])

    def test_empty_catalog(self, cube_package):
        with pytest.raises(EmptyCatalogError):
            quote(cube_package, None, [])

    def test_unknown_unit(self):
        with pytest.raises(InvalidInputError):
            PackageSpec(weight=1.0, weight_unit="oz")

    def test_errors_share_base_class(self, ground_tier):
        with pytest.raises(RateEngineError):
            quote(PackageSpec(weight=0.0), None, [ground_tier])
        with pytest.raises(ValueError):
            quote(PackageSpec(weight=0.0), None, [ground_tier])

    def test_fractional_special_handling_count(self, cube_package, ground_tier):
        with pytest.raises(InvalidInputError):
            quote(cube_package, SurchargeRequest(special_handling_count=1.7), [ground_tier])

    def test_whole_float_special_handling_count(self, cube_package, ground_tier):
        q = quote(cube_package, SurchargeRequest(special_handling_count=2.0), [ground_tier])[0]
        assert q.special_handling_cost == pytest.approx(20.00)

    def test_overflowing_dimensions(self):
        """Dimensions whose volume overflows are an error, not an inf or NaN quote."""
        package = PackageSpec(weight=1.0, length=1e200, width=1e200, height=1e200)
        tiers = [
            ServiceTier("free", "Free", 0.0, TransitDays.fixed(3)),
            ServiceTier("paid", "Paid", 1.0, TransitDays.fixed(3)),
        ]
        with pytest.raises(InvalidInputError):
            quote(package, SurchargeRequest(), tiers)
        with pytest.raises(InvalidInputError):
            compute_billable_weight(package)

    def test_overflowing_cost(self):
        """A finite weight whose cost overflows is an error."""
        tier = ServiceTier("pricey", "Pricey", 10.0, TransitDays.fixed(3))
        with pytest.raises(InvalidInputError):
            quote(PackageSpec(weight=1e308), SurchargeRequest(), [tier])


# =============================================================================
# SERIALIZATION AND LOGGING
# =============================================================================

class TestQuoteResult:
    """Tests for QuoteResult output."""

    def test_to_dict(self, cube_package, ground_tier):
        q = quote(
            cube_package,
            SurchargeRequest(insurance_required=True),
            [ground_tier],
            ship_date=SHIP_DATE,
        )[0]
        d = q.to_dict()
        assert d["service_id"] == "ground"
        assert d["fuel_surcharge"] == 2.71
        assert d["total_cost"] == pytest.approx(21.77)
        assert d["estimated_delivery_date"] == "2025-06-18"
        assert d["transit_days"] == "3"
        assert d["features"] == []

    def test_quote_logged(self, cube_package, ground_tier, caplog):
        with caplog.at_level(logging.DEBUG, logger="rate_engine.engine"):
            quote(cube_package, None, [ground_tier])
        assert "Quoted 1 service(s)" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
