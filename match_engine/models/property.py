"""Property and owner models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any


@dataclass
class Owner:
    """Property owner profile."""

    owner_id: str
    user_id: str
    name: str | None = None
    email: str | None = None


@dataclass
class Property:
    """A registered property.

    ``features`` holds the value as stored: JSON text, a list of tags
    or ``None``. Use ``match_engine.matching.normalize`` to compare it.
    """

    property_id: str
    owner_id: str
    address: str
    property_type: str
    suburb: str | None = None
    city: str | None = None
    region: str | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    estimated_value: Decimal | None = None
    features: Any = field(default=None)
    created_at: datetime | None = None
    updated_at: datetime | None = None
