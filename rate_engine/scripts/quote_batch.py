"""
Quote Shipments from CSV
========================

Calculates ranked service quotes for every shipment in a CSV file and writes
one row per (shipment, service tier) to an output CSV.

Input columns: see rate_engine.calculate_costs (only weight is required).

Usage:
    python -m rate_engine.scripts.quote_batch --input shipments.csv --output quotes.csv
    python -m rate_engine.scripts.quote_batch --input shipments.csv --output quotes.csv --cheapest-only
    python -m rate_engine.scripts.quote_batch --input shipments.csv --output quotes.csv \\
        --catalog tiers.csv --zones zone_multipliers.csv --international-divisor
"""

import argparse
import sys
from pathlib import Path

import polars as pl

from rate_engine.calculate_costs import calculate_quotes, cheapest_quotes
from rate_engine.catalog import ServiceCatalog
from rate_engine.columns import QUOTE_OUTPUT_COLS, ROUTE_COLS, MONEY_COLS
from rate_engine.data import load_zone_multipliers
from rate_engine.version import VERSION


# =============================================================================
# STEPS
# =============================================================================

def load_shipments(path: Path) -> pl.DataFrame:
    """Read the shipment CSV (dates parsed, zone and country columns kept as text)."""
    header = pl.read_csv(path, n_rows=0).columns
    return pl.read_csv(
        path,
        try_parse_dates=True,
        schema_overrides={c: pl.Utf8 for c in ROUTE_COLS if c in header},
    )


def select_output(quotes: pl.DataFrame, all_columns: bool = False) -> pl.DataFrame:
    """Keep the standard quote columns (plus shipment_id if present), money rounded to cents."""
    quotes = quotes.with_columns([pl.col(c).round(2) for c in MONEY_COLS])
    if all_columns:
        return quotes
    cols = [c for c in ["shipment_id"] if c in quotes.columns] + QUOTE_OUTPUT_COLS
    return quotes.select(cols)


def print_summary(shipments: pl.DataFrame, quotes: pl.DataFrame) -> None:
    """Print cheapest-service counts and totals."""
    cheapest = cheapest_quotes(quotes)

    print("\n" + "=" * 60)
    print("QUOTE SUMMARY")
    print("=" * 60)
    print(f"Shipments:          {len(shipments):,}")
    print(f"Quotes:             {len(quotes):,}")
    print(f"Cheapest total:     ${cheapest['cost_total'].sum():,.2f}")
    print(f"Using dim weight:   {cheapest['uses_dim_weight'].sum():,}")

    print("\nCheapest service by shipment count:")
    by_service = (
        cheapest
        .group_by("service_name")
        .agg([
            pl.len().alias("shipments"),
            pl.col("cost_total").mean().alias("avg_total"),
        ])
        .sort("shipments", descending=True)
    )
    for row in by_service.iter_rows(named=True):
        print(f"  {row['service_name']:<24} {row['shipments']:>6,}  avg ${row['avg_total']:>8.2f}")


# =============================================================================
# MAIN
# =============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="Calculate ranked service quotes for shipments in a CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m rate_engine.scripts.quote_batch --input shipments.csv --output quotes.csv
  python -m rate_engine.scripts.quote_batch --input shipments.csv --output quotes.csv --cheapest-only
  python -m rate_engine.scripts.quote_batch --input shipments.csv --output quotes.csv --zones zones.csv
        """
    )

    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Shipment CSV (weight required; see rate_engine.calculate_costs)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Where to write the quote CSV"
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Service tier CSV (default: built-in reference catalog)"
    )
    parser.add_argument(
        "--zones",
        type=Path,
        default=None,
        help="Zone multiplier CSV (origin_zone, destination_zone, multiplier)"
    )
    parser.add_argument(
        "--international-divisor",
        action="store_true",
        help="Use the international volumetric divisor for international shipments"
    )
    parser.add_argument(
        "--cheapest-only",
        action="store_true",
        help="Write only the cheapest quote per shipment"
    )
    parser.add_argument(
        "--all-columns",
        action="store_true",
        help="Write every calculation column, not just the standard quote columns"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Calculate and summarise, but don't write the output file"
    )

    args = parser.parse_args()

    try:
        print(f"Rate engine version {VERSION}")

        shipments = load_shipments(args.input)
        print(f"Loaded {len(shipments):,} shipments from {args.input}")

        catalog = ServiceCatalog.load_default(args.catalog)
        print(f"Catalog: {', '.join(t.id for t in catalog)}")

        zones = load_zone_multipliers(args.zones) if args.zones else None

        quotes = calculate_quotes(
            shipments,
            catalog,
            zone_multipliers=zones,
            use_international_divisor=args.international_divisor,
        )

        print_summary(shipments, quotes)

        if args.cheapest_only:
            quotes = cheapest_quotes(quotes)

        output = select_output(quotes, args.all_columns)

        print("\n" + "=" * 60)
        if args.dry_run:
            print(f"[DRY RUN] Would have written {len(output):,} rows to {args.output}")
        else:
            output.write_csv(args.output)
            print(f"Wrote {len(output):,} rows to {args.output}")
        print("=" * 60)

    except KeyboardInterrupt:
        print("\n\nCancelled.")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        raise


if __name__ == "__main__":
    main()
