"""In-memory store with referential integrity and match uniqueness."""

from dataclasses import dataclass, field, replace
from datetime import datetime

from match_engine.exceptions import (
    DuplicateMatchError,
    EntityNotFoundError,
    ReferentialIntegrityError,
)
from match_engine.models import Buyer, Match, MatchType, Owner, Property, WantedAd
from match_engine.store.base import MatchStore, ValueRange

PairKey = tuple[str, str]  # (wanted_ad_id, property_id)


def _in_range(value, value_range: ValueRange | None) -> bool:
    if value_range is None or value is None:
        return True
    low, high = value_range
    return low <= value <= high


@dataclass
class MatchDataStore(MatchStore):
    """In-memory store for matching entities with relationship tracking."""

    # Primary entities
    owners: dict[str, Owner] = field(default_factory=dict)
    buyers: dict[str, Buyer] = field(default_factory=dict)
    properties: dict[str, Property] = field(default_factory=dict)
    wanted_ads: dict[str, WantedAd] = field(default_factory=dict)

    # Matches, unique per pair
    matches: dict[PairKey, Match] = field(default_factory=dict)

    # Relationship indexes
    _property_matches: dict[str, list[PairKey]] = field(default_factory=dict)
    _wanted_ad_matches: dict[str, list[PairKey]] = field(default_factory=dict)

    def add_owner(self, owner: Owner) -> None:
        """Add an owner to the store."""
        self.owners[owner.owner_id] = owner

    def add_buyer(self, buyer: Buyer) -> None:
        """Add a buyer to the store."""
        self.buyers[buyer.buyer_id] = buyer

    def add_property(self, prop: Property) -> None:
        """Add or replace a property."""
        if prop.owner_id not in self.owners:
            raise ReferentialIntegrityError(f"Owner {prop.owner_id} not found")

        if prop.created_at is None:
            prop.created_at = datetime.now()
        self.properties[prop.property_id] = prop
        self._property_matches.setdefault(prop.property_id, [])

    def add_wanted_ad(self, ad: WantedAd) -> None:
        """Add or replace a wanted ad."""
        if ad.buyer_id not in self.buyers:
            raise ReferentialIntegrityError(f"Buyer {ad.buyer_id} not found")

        if ad.created_at is None:
            ad.created_at = datetime.now()
        self.wanted_ads[ad.wanted_ad_id] = ad
        self._wanted_ad_matches.setdefault(ad.wanted_ad_id, [])

    def get_property(self, property_id: str) -> Property:
        try:
            return self.properties[property_id]
        except KeyError:
            raise EntityNotFoundError(f"Property {property_id} not found") from None

    def get_owner(self, owner_id: str) -> Owner:
        try:
            return self.owners[owner_id]
        except KeyError:
            raise EntityNotFoundError(f"Owner {owner_id} not found") from None

    def list_properties(self, value_range: ValueRange | None = None) -> list[Property]:
        return [p for p in self.properties.values() if _in_range(p.estimated_value, value_range)]

    def get_wanted_ad(self, wanted_ad_id: str) -> WantedAd:
        try:
            return self.wanted_ads[wanted_ad_id]
        except KeyError:
            raise EntityNotFoundError(f"Wanted ad {wanted_ad_id} not found") from None

    def get_buyer(self, buyer_id: str) -> Buyer:
        try:
            return self.buyers[buyer_id]
        except KeyError:
            raise EntityNotFoundError(f"Buyer {buyer_id} not found") from None

    def list_active_wanted_ads(self, budget_range: ValueRange | None = None) -> list[WantedAd]:
        return [
            ad
            for ad in self.wanted_ads.values()
            if ad.is_active and _in_range(ad.budget, budget_range)
        ]

    # Matches
    def get_match(self, property_id: str, wanted_ad_id: str) -> Match | None:
        match = self.matches.get((wanted_ad_id, property_id))
        return replace(match) if match else None

    def insert_match(self, match: Match) -> Match:
        key = (match.wanted_ad_id, match.property_id)
        if match.property_id not in self.properties:
            raise ReferentialIntegrityError(f"Property {match.property_id} not found")
        if match.wanted_ad_id not in self.wanted_ads:
            raise ReferentialIntegrityError(f"Wanted ad {match.wanted_ad_id} not found")
        if key in self.matches:
            raise DuplicateMatchError(
                f"Match for wanted ad {match.wanted_ad_id} and property {match.property_id} exists"
            )

        if match.created_at is None:
            match.created_at = datetime.now()
        stored = replace(match, matched_on=list(match.matched_on))
        self.matches[key] = stored
        self._property_matches.setdefault(match.property_id, []).append(key)
        self._wanted_ad_matches.setdefault(match.wanted_ad_id, []).append(key)
        return replace(stored)

    def update_match(self, match: Match) -> Match:
        key = (match.wanted_ad_id, match.property_id)
        stored = self.matches.get(key)
        if stored is None:
            raise EntityNotFoundError(
                f"Match for wanted ad {match.wanted_ad_id} and property {match.property_id} not found"
            )

        stored.match_score = match.match_score
        stored.match_type = match.match_type
        stored.matched_on = list(match.matched_on)
        stored.updated_at = datetime.now()
        return replace(stored)

    def count_matches(self, property_id: str, match_type: MatchType | None = None) -> int:
        return len(self.list_matches_for_property(property_id, match_type))

    def list_matches_for_property(
        self, property_id: str, match_type: MatchType | None = None
    ) -> list[Match]:
        keys = self._property_matches.get(property_id, [])
        found = [self.matches[k] for k in keys]
        if match_type is not None:
            found = [m for m in found if m.match_type == match_type]
        return sorted(found, key=lambda m: m.match_score, reverse=True)

    def list_matches_for_wanted_ad(self, wanted_ad_id: str) -> list[Match]:
        keys = self._wanted_ad_matches.get(wanted_ad_id, [])
        return sorted((self.matches[k] for k in keys), key=lambda m: m.match_score, reverse=True)

    def mark_viewed(self, property_id: str, wanted_ad_id: str) -> None:
        """Flag a match as seen by the property owner."""
        match = self.matches.get((wanted_ad_id, property_id))
        if match is None:
            raise EntityNotFoundError(
                f"Match for wanted ad {wanted_ad_id} and property {property_id} not found"
            )
        match.viewed_by_owner = True

    # Deletion cascades to matches
    def delete_property(self, property_id: str) -> None:
        """Delete a property and its matches."""
        self.get_property(property_id)
        for key in self._property_matches.pop(property_id, []):
            self.matches.pop(key, None)
            self._wanted_ad_matches.get(key[0], []).remove(key)
        del self.properties[property_id]

    def delete_wanted_ad(self, wanted_ad_id: str) -> None:
        """Delete a wanted ad and its matches."""
        self.get_wanted_ad(wanted_ad_id)
        for key in self._wanted_ad_matches.pop(wanted_ad_id, []):
            self.matches.pop(key, None)
            self._property_matches.get(key[1], []).remove(key)
        del self.wanted_ads[wanted_ad_id]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "owners": len(self.owners),
            "buyers": len(self.buyers),
            "properties": len(self.properties),
            "wanted_ads": len(self.wanted_ads),
            "matches": len(self.matches),
            "direct_matches": sum(1 for m in self.matches.values() if m.match_type == MatchType.DIRECT),
        }
