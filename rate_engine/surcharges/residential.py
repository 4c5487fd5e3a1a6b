"""
Residential Surcharge (RESIDENTIAL)

Flat fee on every service tier when the destination is a residence.
"""

from .base import Surcharge


class RESIDENTIAL(Surcharge):
    """Residential delivery - flat fee."""

    name = "RESIDENTIAL"
    list_price = 3.50
    request_field = "residential"
