"""Storage interface consumed by the matching engine."""

from abc import ABC, abstractmethod
from decimal import Decimal

from match_engine.models import Buyer, Match, MatchType, Owner, Property, WantedAd

ValueRange = tuple[Decimal, Decimal]


class MatchStore(ABC):
    """Read properties and wanted ads; read and write matches.

    Implementations must enforce uniqueness of matches on
    ``(wanted_ad_id, property_id)``: ``insert_match`` raises
    ``DuplicateMatchError`` instead of writing a second row.
    """

    @abstractmethod
    def get_property(self, property_id: str) -> Property:
        """Return a property or raise ``EntityNotFoundError``."""

    @abstractmethod
    def get_owner(self, owner_id: str) -> Owner:
        """Return an owner or raise ``EntityNotFoundError``."""

    @abstractmethod
    def list_properties(self, value_range: ValueRange | None = None) -> list[Property]:
        """Return candidate properties.

        With ``value_range``, properties whose estimated value is known
        and outside the range are left out.
        """

    @abstractmethod
    def get_wanted_ad(self, wanted_ad_id: str) -> WantedAd:
        """Return a wanted ad with its targets, or raise ``EntityNotFoundError``."""

    @abstractmethod
    def get_buyer(self, buyer_id: str) -> Buyer:
        """Return a buyer or raise ``EntityNotFoundError``."""

    @abstractmethod
    def list_active_wanted_ads(self, budget_range: ValueRange | None = None) -> list[WantedAd]:
        """Return active wanted ads, optionally limited to a budget range."""

    @abstractmethod
    def get_match(self, property_id: str, wanted_ad_id: str) -> Match | None:
        """Return the stored match for a pair, if any."""

    @abstractmethod
    def insert_match(self, match: Match) -> Match:
        """Insert a new match or raise ``DuplicateMatchError``."""

    @abstractmethod
    def update_match(self, match: Match) -> Match:
        """Update score, type and matched_on of an existing match."""

    @abstractmethod
    def count_matches(self, property_id: str, match_type: MatchType | None = None) -> int:
        """Count stored matches for a property, optionally by type."""

    @abstractmethod
    def list_matches_for_property(
        self, property_id: str, match_type: MatchType | None = None
    ) -> list[Match]:
        """Return a property's matches, highest score first."""

    @abstractmethod
    def list_matches_for_wanted_ad(self, wanted_ad_id: str) -> list[Match]:
        """Return a wanted ad's matches, highest score first."""
