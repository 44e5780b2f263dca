"""Domain models for property/wanted-ad matching."""

from match_engine.models.enums import (
    LocationType,
    MatchType,
    NotificationChannel,
    NotificationType,
    PropertyFeature,
    PropertyType,
    ReconcileOutcome,
)
from match_engine.models.match import Match, MatchResult, MatchSummary, RecalculationReport
from match_engine.models.notification import Notification
from match_engine.models.property import Owner, Property
from match_engine.models.wanted_ad import Buyer, TargetAddress, TargetLocation, WantedAd

__all__ = [
    "Buyer",
    "LocationType",
    "Match",
    "MatchResult",
    "MatchSummary",
    "MatchType",
    "Notification",
    "NotificationChannel",
    "NotificationType",
    "Owner",
    "Property",
    "PropertyFeature",
    "PropertyType",
    "RecalculationReport",
    "ReconcileOutcome",
    "TargetAddress",
    "TargetLocation",
    "WantedAd",
]
