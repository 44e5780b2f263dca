"""Reconcile computed match results against stored matches."""

import logging
import uuid

from match_engine.exceptions import DuplicateMatchError
from match_engine.models import Match, MatchResult, MatchSummary, MatchType, ReconcileOutcome
from match_engine.store.base import MatchStore

logger = logging.getLogger(__name__)


def _apply(store: MatchStore, stored: Match, result: MatchResult) -> MatchSummary:
    if stored.match_score == result.score and MatchType(stored.match_type) == result.match_type:
        return MatchSummary(result, ReconcileOutcome.UNCHANGED, stored.match_id)

    stored.match_score = result.score
    stored.match_type = result.match_type
    stored.matched_on = list(result.matched_on)
    updated = store.update_match(stored)
    return MatchSummary(result, ReconcileOutcome.UPDATED, updated.match_id)


def reconcile(store: MatchStore, result: MatchResult) -> MatchSummary:
    """Persist one computed result, writing only when something changed.

    Parameters
    ----------
    store : MatchStore
        Match storage.
    result : MatchResult
        Freshly computed match for a pair.

    Returns
    -------
    MatchSummary
        ``CREATED`` when no match existed, ``UPDATED`` when score or type
        changed, ``UNCHANGED`` otherwise.
    """
    stored = store.get_match(result.property_id, result.wanted_ad_id)
    if stored is not None:
        return _apply(store, stored, result)

    try:
        created = store.insert_match(
            Match(
                match_id=str(uuid.uuid4()),
                wanted_ad_id=result.wanted_ad_id,
                property_id=result.property_id,
                match_score=result.score,
                match_type=result.match_type,
                matched_on=list(result.matched_on),
            )
        )
    except DuplicateMatchError:
        # Another writer created the pair between our read and insert.
        logger.info(
            "Concurrent insert for wanted ad %s / property %s, updating instead",
            result.wanted_ad_id,
            result.property_id,
        )
        stored = store.get_match(result.property_id, result.wanted_ad_id)
        if stored is None:
            raise
        return _apply(store, stored, result)

    return MatchSummary(result, ReconcileOutcome.CREATED, created.match_id)
