"""
Customer Discount Configuration

Loyalty and volume tiers are (threshold, percent) pairs checked from the
highest threshold down. Percentages apply to the base service cost only.
"""

from datetime import date


# Loyalty tier by lifetime spend (currency)
LOYALTY_TIERS = (
    (5000.0, "platinum", 15.0),
    (2500.0, "gold", 10.0),
    (1000.0, "silver", 5.0),
    (0.0, "bronze", 0.0),
)

# Volume discount by shipments created in the current month
VOLUME_TIERS = (
    (50, 15.0),
    (25, 10.0),
    (10, 5.0),
)

# Promo codes: code -> (id, type, title, percent, valid_until, min_spend)
PROMO_CODES = {
    "NEWYEAR20": ("new-year-2024", "seasonal", "New Year Special", 20.0, date(2024, 1, 31), 25.0),
    "WELCOME10": ("welcome", "promotional", "Welcome Discount", 10.0, None, 15.0),
}
