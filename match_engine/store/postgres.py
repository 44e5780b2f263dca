"""PostgreSQL store backed by psycopg.

Match uniqueness is enforced by a ``UNIQUE (wanted_ad_id, property_id)``
constraint; inserts use ``ON CONFLICT DO NOTHING`` so a concurrent writer
surfaces as ``DuplicateMatchError`` rather than an aborted transaction.
"""

import json
import logging
from decimal import Decimal
from typing import Any

import psycopg
from psycopg.rows import dict_row

from match_engine.exceptions import DuplicateMatchError, EntityNotFoundError, StoreError
from match_engine.models import (
    Buyer,
    LocationType,
    Match,
    MatchType,
    Owner,
    Property,
    TargetAddress,
    TargetLocation,
    WantedAd,
)
from match_engine.store.base import MatchStore, ValueRange

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS owners (
    owner_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT,
    email TEXT
);
CREATE TABLE IF NOT EXISTS buyers (
    buyer_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT,
    email TEXT
);
CREATE TABLE IF NOT EXISTS properties (
    property_id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL REFERENCES owners(owner_id),
    address TEXT NOT NULL,
    suburb TEXT,
    city TEXT,
    region TEXT,
    property_type TEXT NOT NULL,
    bedrooms INTEGER,
    bathrooms INTEGER,
    estimated_value NUMERIC(15, 2),
    features TEXT,
    created_at TIMESTAMP NOT NULL DEFAULT now(),
    updated_at TIMESTAMP
);
CREATE TABLE IF NOT EXISTS wanted_ads (
    wanted_ad_id TEXT PRIMARY KEY,
    buyer_id TEXT NOT NULL REFERENCES buyers(buyer_id),
    title TEXT NOT NULL,
    budget NUMERIC(15, 2) NOT NULL,
    property_types TEXT,
    features TEXT,
    bedrooms_min INTEGER,
    bedrooms_max INTEGER,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMP NOT NULL DEFAULT now()
);
CREATE TABLE IF NOT EXISTS target_addresses (
    id SERIAL PRIMARY KEY,
    wanted_ad_id TEXT NOT NULL REFERENCES wanted_ads(wanted_ad_id) ON DELETE CASCADE,
    address TEXT NOT NULL,
    suburb TEXT,
    city TEXT,
    region TEXT,
    postcode TEXT
);
CREATE TABLE IF NOT EXISTS target_locations (
    id SERIAL PRIMARY KEY,
    wanted_ad_id TEXT NOT NULL REFERENCES wanted_ads(wanted_ad_id) ON DELETE CASCADE,
    location_type TEXT NOT NULL,
    name TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS property_matches (
    match_id TEXT PRIMARY KEY,
    wanted_ad_id TEXT NOT NULL REFERENCES wanted_ads(wanted_ad_id) ON DELETE CASCADE,
    property_id TEXT NOT NULL REFERENCES properties(property_id) ON DELETE CASCADE,
    match_score INTEGER NOT NULL CHECK (match_score BETWEEN 0 AND 100),
    match_type TEXT NOT NULL,
    matched_on TEXT NOT NULL,
    viewed_by_owner BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMP NOT NULL DEFAULT now(),
    updated_at TIMESTAMP,
    CONSTRAINT uq_property_match UNIQUE (wanted_ad_id, property_id)
);
"""

PROPERTY_COLUMNS = (
    "property_id, owner_id, address, suburb, city, region, property_type, "
    "bedrooms, bathrooms, estimated_value, features, created_at, updated_at"
)
WANTED_AD_COLUMNS = (
    "wanted_ad_id, buyer_id, title, budget, property_types, features, "
    "bedrooms_min, bedrooms_max, is_active, created_at"
)
MATCH_COLUMNS = (
    "match_id, wanted_ad_id, property_id, match_score, match_type, matched_on, "
    "viewed_by_owner, created_at, updated_at"
)


def _row_to_property(row: dict[str, Any]) -> Property:
    return Property(**row)


def _row_to_match(row: dict[str, Any]) -> Match:
    data = dict(row)
    data["match_type"] = MatchType(data["match_type"])
    try:
        data["matched_on"] = json.loads(data["matched_on"] or "[]")
    except ValueError:
        logger.warning("Unparseable matched_on for match %s", data["match_id"])
        data["matched_on"] = []
    return Match(**data)


class PostgresMatchStore(MatchStore):
    """Match store on PostgreSQL."""

    def __init__(self, conninfo: str) -> None:
        """Open a connection.

        Parameters
        ----------
        conninfo : str
            libpq connection string or URL.
        """
        self.conn = psycopg.connect(conninfo, row_factory=dict_row)

    def create_schema(self) -> None:
        """Create tables and constraints if they do not exist."""
        self.conn.execute(SCHEMA)
        self.conn.commit()

    def _fetchone(self, query: str, params: tuple) -> dict[str, Any] | None:
        try:
            return self.conn.execute(query, params).fetchone()
        except psycopg.Error as e:
            self.conn.rollback()
            raise StoreError(str(e)) from e

    def _fetchall(self, query: str, params: tuple = ()) -> list[dict[str, Any]]:
        try:
            return self.conn.execute(query, params).fetchall()
        except psycopg.Error as e:
            self.conn.rollback()
            raise StoreError(str(e)) from e

    # Properties
    def get_property(self, property_id: str) -> Property:
        row = self._fetchone(
            f"SELECT {PROPERTY_COLUMNS} FROM properties WHERE property_id = %s",
            (property_id,),
        )
        if row is None:
            raise EntityNotFoundError(f"Property {property_id} not found")
        return _row_to_property(row)

    def get_owner(self, owner_id: str) -> Owner:
        row = self._fetchone(
            "SELECT owner_id, user_id, name, email FROM owners WHERE owner_id = %s",
            (owner_id,),
        )
        if row is None:
            raise EntityNotFoundError(f"Owner {owner_id} not found")
        return Owner(**row)

    def list_properties(self, value_range: ValueRange | None = None) -> list[Property]:
        if value_range is None:
            rows = self._fetchall(f"SELECT {PROPERTY_COLUMNS} FROM properties ORDER BY created_at")
        else:
            rows = self._fetchall(
                f"SELECT {PROPERTY_COLUMNS} FROM properties "  # noqa: S608
                "WHERE estimated_value IS NULL OR estimated_value BETWEEN %s AND %s "
                "ORDER BY created_at",
                (Decimal(value_range[0]), Decimal(value_range[1])),
            )
        return [_row_to_property(r) for r in rows]

    # Wanted ads
    def _load_targets(self, ad: WantedAd) -> WantedAd:
        addresses = self._fetchall(
            "SELECT address, suburb, city, region, postcode FROM target_addresses "
            "WHERE wanted_ad_id = %s ORDER BY id",
            (ad.wanted_ad_id,),
        )
        locations = self._fetchall(
            "SELECT location_type, name FROM target_locations WHERE wanted_ad_id = %s ORDER BY id",
            (ad.wanted_ad_id,),
        )
        ad.target_addresses = [TargetAddress(**r) for r in addresses]
        ad.target_locations = [
            TargetLocation(location_type=LocationType(r["location_type"]), name=r["name"])
            for r in locations
            if r["location_type"] in LocationType._value2member_map_
        ]
        return ad

    def get_wanted_ad(self, wanted_ad_id: str) -> WantedAd:
        row = self._fetchone(
            f"SELECT {WANTED_AD_COLUMNS} FROM wanted_ads WHERE wanted_ad_id = %s",
            (wanted_ad_id,),
        )
        if row is None:
            raise EntityNotFoundError(f"Wanted ad {wanted_ad_id} not found")
        return self._load_targets(WantedAd(**row))

    def get_buyer(self, buyer_id: str) -> Buyer:
        row = self._fetchone(
            "SELECT buyer_id, user_id, name, email FROM buyers WHERE buyer_id = %s",
            (buyer_id,),
        )
        if row is None:
            raise EntityNotFoundError(f"Buyer {buyer_id} not found")
        return Buyer(**row)

    def list_active_wanted_ads(self, budget_range: ValueRange | None = None) -> list[WantedAd]:
        if budget_range is None:
            rows = self._fetchall(
                f"SELECT {WANTED_AD_COLUMNS} FROM wanted_ads WHERE is_active ORDER BY created_at"
            )
        else:
            rows = self._fetchall(
                f"SELECT {WANTED_AD_COLUMNS} FROM wanted_ads "  # noqa: S608
                "WHERE is_active AND budget BETWEEN %s AND %s ORDER BY created_at",
                (Decimal(budget_range[0]), Decimal(budget_range[1])),
            )
        return [self._load_targets(WantedAd(**r)) for r in rows]

    # Matches
    def get_match(self, property_id: str, wanted_ad_id: str) -> Match | None:
        row = self._fetchone(
            f"SELECT {MATCH_COLUMNS} FROM property_matches "
            "WHERE wanted_ad_id = %s AND property_id = %s",
            (wanted_ad_id, property_id),
        )
        return _row_to_match(row) if row else None

    def insert_match(self, match: Match) -> Match:
        try:
            row = self.conn.execute(
                "INSERT INTO property_matches "
                "(match_id, wanted_ad_id, property_id, match_score, match_type, matched_on) "
                "VALUES (%s, %s, %s, %s, %s, %s) "
                "ON CONFLICT (wanted_ad_id, property_id) DO NOTHING "
                f"RETURNING {MATCH_COLUMNS}",
                (
                    match.match_id,
                    match.wanted_ad_id,
                    match.property_id,
                    match.match_score,
                    MatchType(match.match_type).value,
                    json.dumps(list(match.matched_on)),
                ),
            ).fetchone()
            self.conn.commit()
        except psycopg.Error as e:
            self.conn.rollback()
            raise StoreError(str(e)) from e

        if row is None:
            raise DuplicateMatchError(
                f"Match for wanted ad {match.wanted_ad_id} and property {match.property_id} exists"
            )
        return _row_to_match(row)

    def update_match(self, match: Match) -> Match:
        try:
            row = self.conn.execute(
                "UPDATE property_matches "
                "SET match_score = %s, match_type = %s, matched_on = %s, updated_at = now() "
                "WHERE wanted_ad_id = %s AND property_id = %s "
                f"RETURNING {MATCH_COLUMNS}",
                (
                    match.match_score,
                    MatchType(match.match_type).value,
                    json.dumps(list(match.matched_on)),
                    match.wanted_ad_id,
                    match.property_id,
                ),
            ).fetchone()
            self.conn.commit()
        except psycopg.Error as e:
            self.conn.rollback()
            raise StoreError(str(e)) from e

        if row is None:
            raise EntityNotFoundError(
                f"Match for wanted ad {match.wanted_ad_id} and property {match.property_id} not found"
            )
        return _row_to_match(row)

    def count_matches(self, property_id: str, match_type: MatchType | None = None) -> int:
        if match_type is None:
            row = self._fetchone(
                "SELECT COUNT(*) AS n FROM property_matches WHERE property_id = %s",
                (property_id,),
            )
        else:
            row = self._fetchone(
                "SELECT COUNT(*) AS n FROM property_matches "
                "WHERE property_id = %s AND match_type = %s",
                (property_id, MatchType(match_type).value),
            )
        return int(row["n"]) if row else 0

    def list_matches_for_property(
        self, property_id: str, match_type: MatchType | None = None
    ) -> list[Match]:
        if match_type is None:
            rows = self._fetchall(
                f"SELECT {MATCH_COLUMNS} FROM property_matches "
                "WHERE property_id = %s ORDER BY match_score DESC, created_at",
                (property_id,),
            )
        else:
            rows = self._fetchall(
                f"SELECT {MATCH_COLUMNS} FROM property_matches "
                "WHERE property_id = %s AND match_type = %s ORDER BY match_score DESC, created_at",
                (property_id, MatchType(match_type).value),
            )
        return [_row_to_match(r) for r in rows]

    def list_matches_for_wanted_ad(self, wanted_ad_id: str) -> list[Match]:
        rows = self._fetchall(
            f"SELECT {MATCH_COLUMNS} FROM property_matches "
            "WHERE wanted_ad_id = %s ORDER BY match_score DESC, created_at",
            (wanted_ad_id,),
        )
        return [_row_to_match(r) for r in rows]

    def mark_viewed(self, property_id: str, wanted_ad_id: str) -> None:
        """Flag a match as seen by the property owner."""
        try:
            self.conn.execute(
                "UPDATE property_matches SET viewed_by_owner = TRUE "
                "WHERE wanted_ad_id = %s AND property_id = %s",
                (wanted_ad_id, property_id),
            )
            self.conn.commit()
        except psycopg.Error as e:
            self.conn.rollback()
            raise StoreError(str(e)) from e

    def close(self) -> None:
        """Close the connection."""
        self.conn.close()
