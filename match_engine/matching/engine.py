"""Matching engine: compute, reconcile and notify.

One canonical scoring path serves every trigger (property registered,
wanted ad created, manual recalculation). Pairs are evaluated
sequentially and reconciled independently, so a run that stops part way
leaves valid partial progress.
"""

import logging
from decimal import Decimal
from typing import Callable

from match_engine.config import EngineConfig
from match_engine.exceptions import EntityNotFoundError
from match_engine.logging import log_fields
from match_engine.matching.location import classify_location
from match_engine.matching.normalize import property_features, wanted_ad_criteria
from match_engine.matching.notify import Notifier
from match_engine.matching.reconcile import reconcile
from match_engine.matching.scoring import compose_score
from match_engine.models import MatchResult, Owner, Property, RecalculationReport, WantedAd
from match_engine.store.base import MatchStore, ValueRange

logger = logging.getLogger(__name__)


def _sorted(results: list[MatchResult]) -> list[MatchResult]:
    return sorted(results, key=lambda r: r.score, reverse=True)


class MatchingEngine:
    """Match wanted ads against properties and persist the results.

    Parameters
    ----------
    store : MatchStore
        Source of properties and wanted ads, and destination for matches.
    notifier : Notifier | None
        Receives newly created matches. Without one, recalculation only
        persists.
    config : EngineConfig | None
        Scoring weights and candidate pre-filter settings.
    """

    def __init__(
        self,
        store: MatchStore,
        notifier: Notifier | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.config = config or EngineConfig()

    # Scoring
    def score_pair(self, prop: Property, owner: Owner, ad: WantedAd) -> MatchResult | None:
        """Classify and score a single pair; ``None`` means no match."""
        weights = self.config.weights
        location = classify_location(prop, ad, weights.min_direct_address_length)
        wanted_types, wanted_features = wanted_ad_criteria(ad)
        score = compose_score(
            location,
            prop,
            ad,
            wanted_types,
            wanted_features,
            property_features(prop),
            weights,
        )
        if score is None:
            return None
        return MatchResult(
            property_id=prop.property_id,
            wanted_ad_id=ad.wanted_ad_id,
            owner_id=prop.owner_id,
            owner_user_id=owner.user_id,
            score=score.score,
            match_type=score.match_type,
            matched_on=score.matched_on,
        )

    def _value_range(self, value: Decimal | None) -> ValueRange | None:
        """Budgets within tolerance of a property's estimated value."""
        if not self.config.prefilter_by_budget or not value:
            return None
        tolerance = self.config.prefilter_tolerance
        return value * (1 - tolerance), value * (1 + tolerance)

    def _property_range(self, budget: Decimal) -> ValueRange | None:
        """Estimated values whose tolerance band contains the budget."""
        if not self.config.prefilter_by_budget or not budget:
            return None
        tolerance = self.config.prefilter_tolerance
        high = budget / (1 - tolerance) if tolerance < 1 else Decimal("Infinity")
        return budget / (1 + tolerance), high

    def compute_matches_for_wanted_ad(self, wanted_ad_id: str) -> list[MatchResult]:
        """Score every property against one wanted ad.

        Returns an empty list for a missing or inactive ad.
        """
        try:
            ad = self.store.get_wanted_ad(wanted_ad_id)
        except EntityNotFoundError:
            logger.warning("Wanted ad %s not found, nothing to match", wanted_ad_id)
            return []
        if not ad.is_active:
            logger.info("Wanted ad %s is inactive, skipping", wanted_ad_id)
            return []

        owners: dict[str, Owner | None] = {}
        results = []
        for prop in self.store.list_properties(self._property_range(ad.budget)):
            if prop.owner_id not in owners:
                owners[prop.owner_id] = self._owner_or_none(prop)
            owner = owners[prop.owner_id]
            if owner is None:
                continue
            result = self.score_pair(prop, owner, ad)
            if result is not None:
                results.append(result)

        logger.debug("Wanted ad %s matched %d properties", wanted_ad_id, len(results))
        return _sorted(results)

    def compute_matches_for_property(self, property_id: str) -> list[MatchResult]:
        """Score every active wanted ad against one property.

        Returns an empty list for a missing property.
        """
        try:
            prop = self.store.get_property(property_id)
        except EntityNotFoundError:
            logger.warning("Property %s not found, nothing to match", property_id)
            return []
        owner = self._owner_or_none(prop)
        if owner is None:
            return []

        results = []
        for ad in self.store.list_active_wanted_ads(self._value_range(prop.estimated_value)):
            result = self.score_pair(prop, owner, ad)
            if result is not None:
                results.append(result)

        logger.debug("Property %s matched %d wanted ads", property_id, len(results))
        return _sorted(results)

    def _owner_or_none(self, prop: Property) -> Owner | None:
        try:
            return self.store.get_owner(prop.owner_id)
        except EntityNotFoundError:
            logger.warning(
                "Owner %s of property %s not found, skipping", prop.owner_id, prop.property_id
            )
            return None

    # Full pipeline
    def _reconcile_all(self, report: RecalculationReport, results: list[MatchResult]) -> None:
        """Reconcile each pair on its own; a vanished entity skips only that pair."""
        for result in results:
            try:
                report.summaries.append(reconcile(self.store, result))
            except EntityNotFoundError as e:
                report.skipped += 1
                logger.warning(
                    "Skipping wanted ad %s / property %s: %s",
                    result.wanted_ad_id,
                    result.property_id,
                    e,
                    extra=log_fields(
                        anchor_id=report.anchor_id,
                        wanted_ad_id=result.wanted_ad_id,
                        property_id=result.property_id,
                    ),
                )

    def _notify(self, report: RecalculationReport, send: Callable[[], tuple[int, int]]) -> None:
        """Run a notification step; matches are already stored, so failures are only logged."""
        if self.notifier is None or not report.created:
            return
        try:
            report.notifications_sent, report.notifications_failed = send()
        except Exception:
            report.notifications_failed += 1
            logger.exception(
                "Notification step failed for %s",
                report.anchor_id,
                extra=log_fields(anchor_id=report.anchor_id, created=report.created),
            )

    def recalculate_property_report(self, property_id: str) -> RecalculationReport:
        """Compute, reconcile and notify for one property."""
        report = RecalculationReport(anchor_id=property_id)
        results = self.compute_matches_for_property(property_id)
        if not results:
            return report

        self._reconcile_all(report, results)
        self._notify(
            report,
            lambda: self.notifier.for_property(
                self.store, self.store.get_property(property_id), report.summaries
            ),
        )

        self._log_report("property", report)
        return report

    def recalculate_wanted_ad_report(self, wanted_ad_id: str) -> RecalculationReport:
        """Compute, reconcile and notify for one wanted ad."""
        report = RecalculationReport(anchor_id=wanted_ad_id)
        results = self.compute_matches_for_wanted_ad(wanted_ad_id)
        if not results:
            return report

        self._reconcile_all(report, results)
        self._notify(
            report,
            lambda: self.notifier.for_wanted_ad(
                self.store, self.store.get_wanted_ad(wanted_ad_id), report.summaries
            ),
        )

        self._log_report("wanted ad", report)
        return report

    def recalculate_property(self, property_id: str) -> int:
        """Recalculate one property; return the number of newly created matches."""
        return self.recalculate_property_report(property_id).created

    def recalculate_wanted_ad(self, wanted_ad_id: str) -> int:
        """Recalculate one wanted ad; return the number of newly created matches."""
        return self.recalculate_wanted_ad_report(wanted_ad_id).created

    def _log_report(self, anchor: str, report: RecalculationReport) -> None:
        logger.info(
            "Recalculated %s %s: created=%d, updated=%d, unchanged=%d, skipped=%d, notified=%d, failed=%d",
            anchor,
            report.anchor_id,
            report.created,
            report.updated,
            report.unchanged,
            report.skipped,
            report.notifications_sent,
            report.notifications_failed,
            extra=log_fields(
                anchor_id=report.anchor_id,
                created=report.created,
                updated=report.updated,
                skipped=report.skipped,
            ),
        )
