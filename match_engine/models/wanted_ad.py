"""Wanted ad, buyer and target location models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from match_engine.models.enums import LocationType


@dataclass
class Buyer:
    """Buyer profile."""

    buyer_id: str
    user_id: str
    name: str | None = None
    email: str | None = None


@dataclass
class TargetAddress:
    """A specific street address a buyer has named."""

    address: str
    suburb: str | None = None
    city: str | None = None
    region: str | None = None
    postcode: str | None = None


@dataclass
class TargetLocation:
    """An area-level location of interest."""

    location_type: LocationType
    name: str


@dataclass
class WantedAd:
    """A buyer's stored property search criteria.

    ``property_types`` and ``features`` hold the values as stored
    (JSON text, list of tags or ``None``).
    """

    wanted_ad_id: str
    buyer_id: str
    title: str
    budget: Decimal
    property_types: Any = None
    features: Any = None
    bedrooms_min: int | None = None
    bedrooms_max: int | None = None
    is_active: bool = True
    target_addresses: list[TargetAddress] = field(default_factory=list)
    target_locations: list[TargetLocation] = field(default_factory=list)
    created_at: datetime | None = None
