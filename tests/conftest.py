"""Pytest configuration and fixtures."""

from decimal import Decimal
from typing import Any, Callable

import pytest

from match_engine.models import (
    Buyer,
    LocationType,
    Notification,
    Owner,
    Property,
    TargetAddress,
    TargetLocation,
    WantedAd,
)
from match_engine.store import MatchDataStore


class RecordingSink:
    """Notification sink that keeps everything it is sent."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.sent.append(notification)


class FailingSink:
    """Notification sink that always raises."""

    def __init__(self) -> None:
        self.attempts = 0

    def send(self, notification: Notification) -> None:
        self.attempts += 1
        raise ConnectionError("notification service unavailable")


@pytest.fixture
def owner() -> Owner:
    """Sample property owner."""
    return Owner(owner_id="owner-001", user_id="user-owner-001", name="Olive Owner", email="olive@example.com")


@pytest.fixture
def buyer() -> Buyer:
    """Sample buyer."""
    return Buyer(buyer_id="buyer-001", user_id="user-buyer-001", name="Ben Buyer", email="ben@example.com")


@pytest.fixture
def make_property() -> Callable[..., Property]:
    """Factory for properties in Ponsonby, Auckland."""

    def _make(**overrides: Any) -> Property:
        data: dict[str, Any] = {
            "property_id": "prop-001",
            "owner_id": "owner-001",
            "address": "12 Example Street, Ponsonby",
            "suburb": "Ponsonby",
            "city": "Auckland",
            "region": "Auckland",
            "property_type": "HOUSE",
            "bedrooms": None,
            "estimated_value": Decimal("1000000"),
            "features": None,
        }
        data.update(overrides)
        return Property(**data)

    return _make


@pytest.fixture
def make_wanted_ad() -> Callable[..., WantedAd]:
    """Factory for active wanted ads targeting the Ponsonby suburb."""

    def _make(**overrides: Any) -> WantedAd:
        data: dict[str, Any] = {
            "wanted_ad_id": "ad-001",
            "buyer_id": "buyer-001",
            "title": "Family home in Ponsonby",
            "budget": Decimal("1050000"),
            "target_locations": [TargetLocation(LocationType.SUBURB, "Ponsonby")],
        }
        data.update(overrides)
        return WantedAd(**data)

    return _make


@pytest.fixture
def direct_target() -> TargetAddress:
    """Target address naming the sample property."""
    return TargetAddress(address="12 Example Street")


@pytest.fixture
def store(owner: Owner, buyer: Buyer) -> MatchDataStore:
    """Fresh store with one owner and one buyer."""
    s = MatchDataStore()
    s.add_owner(owner)
    s.add_buyer(buyer)
    return s


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible generators."""
    return 42
