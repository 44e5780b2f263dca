"""Match records and engine results."""

from dataclasses import dataclass, field
from datetime import datetime

from match_engine.models.enums import MatchType, ReconcileOutcome


@dataclass
class Match:
    """Stored, scored association between one property and one wanted ad."""

    match_id: str
    wanted_ad_id: str
    property_id: str
    match_score: int
    match_type: MatchType
    matched_on: list[str] = field(default_factory=list)
    viewed_by_owner: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class MatchResult:
    """Computed (not yet persisted) match for one candidate pair."""

    property_id: str
    wanted_ad_id: str
    owner_id: str
    owner_user_id: str
    score: int
    match_type: MatchType
    matched_on: tuple[str, ...]


@dataclass
class MatchSummary:
    """Outcome of reconciling one ``MatchResult``."""

    result: MatchResult
    outcome: ReconcileOutcome
    match_id: str


@dataclass
class RecalculationReport:
    """Aggregated outcome of one recalculation run."""

    anchor_id: str
    summaries: list[MatchSummary] = field(default_factory=list)
    skipped: int = 0  # pairs whose property or wanted ad vanished mid-run
    notifications_sent: int = 0
    notifications_failed: int = 0

    def _count(self, outcome: ReconcileOutcome) -> int:
        return sum(1 for s in self.summaries if s.outcome == outcome)

    @property
    def created(self) -> int:
        return self._count(ReconcileOutcome.CREATED)

    @property
    def updated(self) -> int:
        return self._count(ReconcileOutcome.UPDATED)

    @property
    def unchanged(self) -> int:
        return self._count(ReconcileOutcome.UNCHANGED)
