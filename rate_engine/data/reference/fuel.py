"""
Fuel Surcharge

Applied as a percentage of the base service cost (after the zone multiplier,
before insurance, signature and special handling).
"""

RATE = 0.15                   # 15%
