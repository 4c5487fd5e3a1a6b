"""
Billable Weight Configuration

Dimensional weight divisors, expressed in cubic inches per unit of weight.

HOW DIM WEIGHT WORKS
--------------------
Billable weight = max(actual_weight, dim_weight).

    cubic_in   = length * width * height        (converted from cm3 if needed)
    dim_weight = round(cubic_in / DIM_FACTOR, 2)

The result is in the same weight unit the package is declared in. Packages
with a missing or non-positive dimension get dim_weight = 0, which means
"fall back to actual weight".

The domestic divisor is used for every quote unless the caller opts into the
international divisor (see divisor_for in rate_engine.engine).
"""

DIM_FACTOR_DOMESTIC = 166       # Cubic inches per lb (domestic)
DIM_FACTOR_INTERNATIONAL = 139  # Cubic inches per lb (international)

CM3_PER_IN3 = 16.387            # Volume is converted to cubic inches before dividing

WEIGHT_UNITS = ("lb", "kg")
DIMENSION_UNITS = ("in", "cm")
