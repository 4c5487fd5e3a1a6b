"""
Service Catalog

Immutable, ordered set of ServiceTiers passed explicitly into every quote.
Catalog order is significant: it breaks ties between equally priced quotes.
Changing the tier set (e.g. adding an international tier for a cross-border
shipment) returns a new catalog and never mutates the one in use.
"""

from pathlib import Path
from typing import Iterable, Iterator

import polars as pl

from .data import load_service_tiers
from .delivery import parse_transit_days, format_transit_time
from .errors import InvalidInputError
from .models import ServiceTier


TIER_FRAME_SCHEMA = {
    "tier_order": pl.Int64,
    "service_id": pl.Utf8,
    "service_name": pl.Utf8,
    "base_rate": pl.Float64,
    "transit_days_min": pl.Int64,
    "transit_days_max": pl.Int64,
    "transit_label": pl.Utf8,
    "international": pl.Boolean,
    "recommended": pl.Boolean,
}


class ServiceCatalog:
    """Ordered, read-only collection of service tiers."""

    def __init__(self, tiers: Iterable[ServiceTier] = ()):
        self._tiers = tuple(tiers)

        ids = [t.id for t in self._tiers]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise InvalidInputError(f"Duplicate service tier ids: {duplicates}")

    # -------------------------------------------------------------------------
    # CONSTRUCTION
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, tiers) -> "ServiceCatalog":
        """Accept a catalog, a tier frame from load_service_tiers, or any iterable of tiers."""
        if isinstance(tiers, ServiceCatalog):
            return tiers
        if isinstance(tiers, pl.DataFrame):
            return cls.from_frame(tiers)
        return cls(tiers)

    @classmethod
    def from_frame(cls, df: pl.DataFrame) -> "ServiceCatalog":
        """Build a catalog from a frame shaped like reference/service_tiers.csv."""
        tiers = []
        for row in df.iter_rows(named=True):
            features = row.get("features") or ""
            tiers.append(ServiceTier(
                id=str(row["id"]),
                name=row["name"],
                description=row.get("description") or "",
                base_rate=float(row["base_rate"]),
                transit_days=parse_transit_days(str(row["estimated_days"])),
                features=tuple(f.strip() for f in features.split(";") if f.strip()),
                international=bool(row.get("international") or False),
                recommended=bool(row.get("recommended") or False),
            ))
        return cls(tiers)

    @classmethod
    def load_default(cls, path: Path | str | None = None) -> "ServiceCatalog":
        """Load the catalog from CSV (reference/service_tiers.csv by default)."""
        return cls.from_frame(load_service_tiers(path))

    # -------------------------------------------------------------------------
    # ACCESS
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[ServiceTier]:
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    def __repr__(self) -> str:
        return f"ServiceCatalog({[t.id for t in self._tiers]})"

    @property
    def tiers(self) -> tuple[ServiceTier, ...]:
        return self._tiers

    def get(self, service_id: str) -> ServiceTier:
        for tier in self._tiers:
            if tier.id == service_id:
                return tier
        raise KeyError(service_id)

    @property
    def has_international_tier(self) -> bool:
        return any(t.international for t in self._tiers)

    # -------------------------------------------------------------------------
    # COPY-ON-WRITE
    # -------------------------------------------------------------------------

    def domestic(self) -> "ServiceCatalog":
        """Catalog without international-designated tiers."""
        return ServiceCatalog(t for t in self._tiers if not t.international)

    def with_tier(self, tier: ServiceTier) -> "ServiceCatalog":
        """New catalog with tier appended, or replacing the tier with the same id in place."""
        if any(t.id == tier.id for t in self._tiers):
            return ServiceCatalog(tier if t.id == tier.id else t for t in self._tiers)
        return ServiceCatalog(self._tiers + (tier,))

    # -------------------------------------------------------------------------
    # FRAME
    # -------------------------------------------------------------------------

    def to_frame(self) -> pl.DataFrame:
        """One row per tier in catalog order, ready to cross-join with shipments."""
        return pl.DataFrame(
            {
                "tier_order": list(range(len(self._tiers))),
                "service_id": [t.id for t in self._tiers],
                "service_name": [t.name for t in self._tiers],
                "base_rate": [float(t.base_rate) for t in self._tiers],
                "transit_days_min": [t.transit_days.min_days for t in self._tiers],
                "transit_days_max": [t.transit_days.max_days for t in self._tiers],
                "transit_label": [format_transit_time(t.transit_days.max_days) for t in self._tiers],
                "international": [t.international for t in self._tiers],
                "recommended": [t.recommended for t in self._tiers],
            },
            schema=TIER_FRAME_SCHEMA,
        )


__all__ = [
    "ServiceCatalog",
    "TIER_FRAME_SCHEMA",
]
