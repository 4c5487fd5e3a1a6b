"""
Rate Engine Errors

All errors are raised synchronously to the caller. No partial results are
returned when one of these is raised.
"""


class RateEngineError(ValueError):
    """Base class for rate calculation failures."""


class InvalidPackageError(RateEngineError):
    """Package weight is missing, non-positive or not a finite number."""


class InvalidInputError(RateEngineError):
    """A rate, fee, count, declared value or unit is invalid (e.g. negative)."""


class EmptyCatalogError(RateEngineError):
    """No service tiers were supplied."""


__all__ = [
    "RateEngineError",
    "InvalidPackageError",
    "InvalidInputError",
    "EmptyCatalogError",
]
