"""
Shipment Rate Calculator
========================

Interactive CLI tool to quote every service tier for a single shipment.

Usage:
    python -m rate_engine.scripts.calculator
"""

from datetime import date

from rate_engine import (
    PackageSpec,
    SurchargeRequest,
    ServiceCatalog,
    quote,
    divisor_for,
)
from rate_engine.data import FUEL_RATE
from rate_engine.discounts import lookup_promo_code, build_customer_discount, loyalty_tier
from rate_engine.version import VERSION


def _ask_yes_no(prompt: str) -> bool:
    return input(f"{prompt} (y/n) [n]: ").strip().lower() in ("y", "yes")


def _ask_float(prompt: str) -> float | None:
    value = input(prompt).strip()
    return float(value) if value else None


def get_user_input() -> dict:
    """Prompt user for shipment details."""
    print("\n=== Shipment Rate Calculator ===")
    print(f"Version: {VERSION}\n")

    # Units
    weight_unit = input("Weight unit (lb/kg) [lb]: ").strip().lower() or "lb"
    dimension_unit = input("Dimension unit (in/cm) [in]: ").strip().lower() or "in"

    # Dimensions (blank = unknown)
    weight = float(input(f"Weight ({weight_unit}): "))
    length = _ask_float(f"Length ({dimension_unit}, blank if unknown): ")
    width = _ask_float(f"Width ({dimension_unit}, blank if unknown): ")
    height = _ask_float(f"Height ({dimension_unit}, blank if unknown): ")
    declared_value = _ask_float("Declared value [0]: ") or 0.0

    # Add-ons
    insurance_required = _ask_yes_no("Insurance")
    signature_required = _ask_yes_no("Signature on delivery")
    special_handling = input("Special handling flags (comma-separated, blank for none): ").strip()
    special_handling_count = len([f for f in special_handling.split(",") if f.strip()])
    residential = _ask_yes_no("Residential delivery")

    # Route
    origin_country = input("Origin country [US]: ").strip().upper() or "US"
    destination_country = input("Destination country [US]: ").strip().upper() or "US"
    use_international_divisor = False
    if origin_country != destination_country:
        use_international_divisor = _ask_yes_no("Use international volumetric divisor")

    # Ship date
    date_input = input(f"\nShip date (YYYY-MM-DD) [default: {date.today()}]: ").strip()
    if date_input:
        ship_date = date.fromisoformat(date_input)
    else:
        ship_date = date.today()

    # Customer discounts
    total_spend = _ask_float("\nCustomer lifetime spend [0]: ") or 0.0
    monthly_shipments = int(_ask_float("Shipments this month [0]: ") or 0)
    promo_code = input("Promo code (blank for none): ").strip()
    promo = None
    if promo_code:
        promo = lookup_promo_code(promo_code, today=ship_date)
        if promo is None:
            print(f"Promo code '{promo_code}' is unknown or expired; ignoring it.")

    return {
        "package": PackageSpec(
            weight=weight,
            length=length,
            width=width,
            height=height,
            declared_value=declared_value,
            weight_unit=weight_unit,
            dimension_unit=dimension_unit,
        ),
        "surcharges": SurchargeRequest(
            insurance_required=insurance_required,
            signature_required=signature_required,
            special_handling_count=special_handling_count,
            residential=residential,
            fuel_surcharge_rate=FUEL_RATE,
        ),
        "discount": build_customer_discount(total_spend, monthly_shipments, promo),
        "loyalty_tier": loyalty_tier(total_spend),
        "is_international": origin_country != destination_country,
        "use_international_divisor": use_international_divisor,
        "ship_date": ship_date,
    }


def print_results(quotes: list, shipment: dict) -> None:
    """Print calculation results."""
    package = shipment["package"]
    first = quotes[0]

    print("\n" + "=" * 60)
    print("CALCULATION RESULTS")
    print("=" * 60)

    # Input summary
    if package.length and package.width and package.height:
        dims = f"{package.length}x{package.width}x{package.height} {package.dimension_unit}"
    else:
        dims = "dimensions unknown"
    print(f"\nShipment: {dims}, {package.weight} {package.weight_unit}")
    print(f"International: {'yes' if shipment['is_international'] else 'no'}")
    print(f"Ship date: {shipment['ship_date']}")
    discount = shipment["discount"]
    if discount.total_percent > 0:
        print(f"Discount: {discount.total_percent:.0f}% (loyalty tier: {shipment['loyalty_tier']})")

    # Weight calculations
    print(f"\nBillable weight: {first.billable_weight:.2f} {package.weight_unit}", end="")
    if first.uses_volumetric_weight:
        print(f" (volumetric: {first.volumetric_weight:.2f})")
    else:
        print(" (actual)")

    # Quotes, cheapest first
    for rank, q in enumerate(quotes, start=1):
        marker = " *recommended*" if q.is_recommended else ""
        print(f"\n--- {rank}. {q.service_name}{marker} ---")
        print(f"Base rate:          ${q.base_cost:>8.2f}")
        if q.fuel_surcharge > 0:
            print(f"Fuel surcharge:     ${q.fuel_surcharge:>8.2f}")
        if q.insurance_cost > 0:
            print(f"Insurance:          ${q.insurance_cost:>8.2f}")
        if q.signature_cost > 0:
            print(f"Signature:          ${q.signature_cost:>8.2f}")
        if q.special_handling_cost > 0:
            print(f"Special handling:   ${q.special_handling_cost:>8.2f}")
        if q.residential_cost > 0:
            print(f"Residential:        ${q.residential_cost:>8.2f}")
        print(f"                    {'=' * 9}")
        print(f"TOTAL:              ${q.total_cost:>8.2f}")
        if q.discount_amount > 0:
            print(f"Discount:          -${q.discount_amount:>8.2f}")
            print(f"NET:                ${q.net_cost:>8.2f}")
        print(f"Delivery by {q.estimated_delivery_date:%a %b %d} ({q.transit_label})")
    print()


def main():
    """Main entry point."""
    try:
        # Get user input
        shipment = get_user_input()

        divisor = divisor_for(shipment["is_international"], shipment["use_international_divisor"])

        # Run through the engine
        quotes = quote(
            shipment["package"],
            shipment["surcharges"],
            ServiceCatalog.load_default(),
            shipment["is_international"],
            discount=shipment["discount"],
            ship_date=shipment["ship_date"],
            volumetric_divisor=divisor,
        )

        # Print results
        print_results(quotes, shipment)

    except KeyboardInterrupt:
        print("\n\nCancelled.")
    except Exception as e:
        print(f"\nError: {e}")
        raise


if __name__ == "__main__":
    main()
