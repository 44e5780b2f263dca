"""Stores for properties, wanted ads and matches."""

from match_engine.store.base import MatchStore
from match_engine.store.memory import MatchDataStore
from match_engine.store.postgres import PostgresMatchStore

__all__ = ["MatchDataStore", "MatchStore", "PostgresMatchStore"]
