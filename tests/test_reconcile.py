"""Tests for match reconciliation."""

from dataclasses import replace

import pytest

from match_engine.exceptions import DuplicateMatchError
from match_engine.matching.reconcile import reconcile
from match_engine.models import Match, MatchResult, MatchType, ReconcileOutcome
from match_engine.store import MatchDataStore


def make_result(score: int = 70, match_type: MatchType = MatchType.CRITERIA, matched_on=("location", "budget")):
    return MatchResult(
        property_id="prop-001",
        wanted_ad_id="ad-001",
        owner_id="owner-001",
        owner_user_id="user-owner-001",
        score=score,
        match_type=match_type,
        matched_on=tuple(matched_on),
    )


@pytest.fixture
def populated(store, make_property, make_wanted_ad) -> MatchDataStore:
    store.add_property(make_property())
    store.add_wanted_ad(make_wanted_ad())
    return store


class RacingStore(MatchDataStore):
    """Store where another writer inserts the pair just before we do."""

    def __init__(self, rival: Match | None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.rival = rival

    def insert_match(self, match: Match) -> Match:
        if self.rival is not None:
            super().insert_match(self.rival)
        raise DuplicateMatchError("pair already exists")


class TestReconcile:
    """Tests for create/update/unchanged outcomes."""

    def test_creates_new_match(self, populated) -> None:
        """Test a new pair is created."""
        summary = reconcile(populated, make_result())

        assert summary.outcome == ReconcileOutcome.CREATED
        stored = populated.get_match("prop-001", "ad-001")
        assert stored.match_id == summary.match_id
        assert stored.match_score == 70
        assert stored.match_type == MatchType.CRITERIA
        assert stored.matched_on == ["location", "budget"]

    def test_same_result_is_unchanged(self, populated) -> None:
        """Test an identical result is unchanged."""
        first = reconcile(populated, make_result())
        second = reconcile(populated, make_result())

        assert second.outcome == ReconcileOutcome.UNCHANGED
        assert second.match_id == first.match_id
        assert populated.get_match("prop-001", "ad-001").updated_at is None

    def test_unchanged_ignores_matched_on(self, populated) -> None:
        """Test matched_on alone does not count as a change."""
        reconcile(populated, make_result())

        summary = reconcile(populated, make_result(matched_on=("location", "features")))

        assert summary.outcome == ReconcileOutcome.UNCHANGED
        assert populated.get_match("prop-001", "ad-001").matched_on == ["location", "budget"]

    def test_score_change_updates(self, populated) -> None:
        """Test a score change updates the row."""
        first = reconcile(populated, make_result())

        summary = reconcile(populated, make_result(score=55, matched_on=("location", "budget_partial")))

        assert summary.outcome == ReconcileOutcome.UPDATED
        assert summary.match_id == first.match_id
        stored = populated.get_match("prop-001", "ad-001")
        assert stored.match_score == 55
        assert stored.matched_on == ["location", "budget_partial"]
        assert stored.updated_at is not None

    def test_type_change_updates(self, populated) -> None:
        """Test a type change updates the row."""
        reconcile(populated, make_result(score=100))

        summary = reconcile(populated, make_result(score=100, match_type=MatchType.DIRECT, matched_on=("direct_address",)))

        assert summary.outcome == ReconcileOutcome.UPDATED
        assert populated.get_match("prop-001", "ad-001").match_type == MatchType.DIRECT

    def test_one_row_per_pair(self, populated) -> None:
        """Test repeated reconciles keep one row per pair."""
        for score in (70, 55, 55, 70):
            reconcile(populated, make_result(score=score))

        assert len(populated.matches) == 1


class TestConcurrentInsert:
    """Tests for the duplicate-insert fallback."""

    def _racing_store(self, rival, owner, buyer, make_property, make_wanted_ad) -> RacingStore:
        store = RacingStore(rival)
        store.add_owner(owner)
        store.add_buyer(buyer)
        store.add_property(make_property())
        store.add_wanted_ad(make_wanted_ad())
        return store

    def test_duplicate_falls_back_to_update(self, owner, buyer, make_property, make_wanted_ad) -> None:
        """Test an insert conflict falls back to an update."""
        rival = Match(
            match_id="rival-match",
            wanted_ad_id="ad-001",
            property_id="prop-001",
            match_score=55,
            match_type=MatchType.CRITERIA,
            matched_on=["location", "budget_partial"],
        )
        store = self._racing_store(rival, owner, buyer, make_property, make_wanted_ad)

        summary = reconcile(store, make_result(score=70))

        assert summary.outcome == ReconcileOutcome.UPDATED
        assert summary.match_id == "rival-match"
        assert store.get_match("prop-001", "ad-001").match_score == 70

    def test_duplicate_with_same_values_is_unchanged(self, owner, buyer, make_property, make_wanted_ad) -> None:
        """Test an insert conflict with equal values is unchanged."""
        rival = Match(
            match_id="rival-match",
            wanted_ad_id="ad-001",
            property_id="prop-001",
            match_score=70,
            match_type=MatchType.CRITERIA,
        )
        store = self._racing_store(replace(rival), owner, buyer, make_property, make_wanted_ad)

        summary = reconcile(store, make_result(score=70))

        assert summary.outcome == ReconcileOutcome.UNCHANGED

    def test_duplicate_without_row_reraises(self, owner, buyer, make_property, make_wanted_ad) -> None:
        """Test an insert conflict with no stored row is re-raised."""
        store = self._racing_store(None, owner, buyer, make_property, make_wanted_ad)

        with pytest.raises(DuplicateMatchError):
            reconcile(store, make_result())
