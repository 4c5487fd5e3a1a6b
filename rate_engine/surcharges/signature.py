"""
Signature Surcharge (SIGNATURE)

Flat fee for signature on delivery.
"""

from .base import Surcharge


class SIGNATURE(Surcharge):
    """Signature required - flat fee."""

    name = "SIGNATURE"
    list_price = 5.50
    request_field = "signature_required"
