"""Property/wanted-ad matching: classification, scoring, reconciliation."""

from match_engine.matching.engine import MatchingEngine
from match_engine.matching.location import LocationClass, classify_location
from match_engine.matching.normalize import normalize_tags
from match_engine.matching.notify import Notifier
from match_engine.matching.reconcile import reconcile
from match_engine.matching.scoring import Score, compose_score

__all__ = [
    "LocationClass",
    "MatchingEngine",
    "Notifier",
    "Score",
    "classify_location",
    "compose_score",
    "normalize_tags",
    "reconcile",
]
