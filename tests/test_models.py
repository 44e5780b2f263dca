"""Tests for domain models."""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from match_engine.models import (
    LocationType,
    Match,
    MatchResult,
    MatchSummary,
    MatchType,
    Notification,
    NotificationChannel,
    NotificationType,
    Property,
    RecalculationReport,
    ReconcileOutcome,
    WantedAd,
)


def result(property_id: str = "prop-001") -> MatchResult:
    return MatchResult(
        property_id=property_id,
        wanted_ad_id="ad-001",
        owner_id="owner-001",
        owner_user_id="user-owner-001",
        score=70,
        match_type=MatchType.CRITERIA,
        matched_on=("location", "budget"),
    )


class TestEntities:
    """Tests for property and wanted ad defaults."""

    def test_property_defaults(self) -> None:
        """Test property defaults."""
        prop = Property(property_id="prop-001", owner_id="owner-001", address="1 Road", property_type="HOUSE")

        assert prop.estimated_value is None
        assert prop.features is None
        assert prop.bedrooms is None

    def test_wanted_ad_defaults(self) -> None:
        """Test wanted ad defaults."""
        ad = WantedAd(wanted_ad_id="ad-001", buyer_id="buyer-001", title="Home", budget=Decimal("500000"))

        assert ad.is_active is True
        assert ad.target_addresses == []
        assert ad.target_locations == []
        assert ad.bedrooms_min is None and ad.bedrooms_max is None

    def test_target_lists_not_shared(self) -> None:
        """Test target lists are not shared between instances."""
        a = WantedAd("ad-1", "buyer-001", "A", Decimal("1"))
        b = WantedAd("ad-2", "buyer-001", "B", Decimal("1"))

        a.target_addresses.append("x")

        assert b.target_addresses == []

    def test_enums_are_strings(self) -> None:
        """Test enums compare equal to their string values."""
        assert LocationType.SUBURB == "SUBURB"
        assert MatchType("DIRECT") is MatchType.DIRECT
        assert NotificationChannel.IN_APP.value == "in_app"


class TestMatchModels:
    """Tests for match records and results."""

    def test_match_defaults(self) -> None:
        """Test match defaults."""
        match = Match("m-1", "ad-001", "prop-001", 70, MatchType.CRITERIA)

        assert match.matched_on == []
        assert match.viewed_by_owner is False
        assert match.updated_at is None

    def test_match_result_frozen(self) -> None:
        """Test MatchResult is immutable."""
        with pytest.raises(FrozenInstanceError):
            result().score = 100  # type: ignore[misc]

    def test_notification_defaults(self) -> None:
        """Test notification defaults."""
        n = Notification(user_id="user-1", title="t", message="m")

        assert n.notification_type == NotificationType.NEW_MATCH
        assert n.channel == NotificationChannel.IN_APP
        assert n.data == {}
        assert n.recipient is None


class TestRecalculationReport:
    """Tests for RecalculationReport counters."""

    def test_counts(self) -> None:
        """Test outcome counters."""
        report = RecalculationReport(
            anchor_id="prop-001",
            summaries=[
                MatchSummary(result("prop-001"), ReconcileOutcome.CREATED, "m-1"),
                MatchSummary(result("prop-002"), ReconcileOutcome.CREATED, "m-2"),
                MatchSummary(result("prop-003"), ReconcileOutcome.UPDATED, "m-3"),
                MatchSummary(result("prop-004"), ReconcileOutcome.UNCHANGED, "m-4"),
            ],
        )

        assert report.created == 2
        assert report.updated == 1
        assert report.unchanged == 1

    def test_empty_report(self) -> None:
        """Test an empty report counts nothing."""
        report = RecalculationReport(anchor_id="ad-001")

        assert (report.created, report.updated, report.unchanged) == (0, 0, 0)
        assert report.notifications_sent == 0
