"""Custom exception hierarchy for match-engine."""


class MatchEngineError(Exception):
    """Base exception for all match-engine errors."""


class EntityNotFoundError(MatchEngineError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class DuplicateMatchError(MatchEngineError):
    """Raised when a match already exists for a (wanted ad, property) pair."""


class ConfigurationError(MatchEngineError):
    """Raised when configuration is invalid or missing."""


class StoreError(MatchEngineError):
    """Raised when a storage operation fails."""


class SinkError(MatchEngineError):
    """Raised when a notification sink operation fails."""
