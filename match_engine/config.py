"""Configuration management for match-engine."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from match_engine.exceptions import ConfigurationError


@dataclass(frozen=True)
class ScoringWeights:
    """Score weights and thresholds used by the score composer.

    The default weights sum to 100 for a perfect area match.
    """

    location: int = 40
    budget: int = 30
    budget_partial: int = 15
    property_type: int = 10
    bedrooms: int = 10
    features: int = 10
    direct_address: int = 100
    budget_tolerance: Decimal = Decimal("0.2")  # fraction of estimated value
    threshold: int = 40  # inclusive
    min_direct_address_length: int = 5  # target address must be longer than this
    max_score: int = 100


@dataclass
class EngineConfig:
    """Matching engine behaviour."""

    weights: ScoringWeights = field(default_factory=ScoringWeights)
    prefilter_by_budget: bool = False
    prefilter_tolerance: Decimal = Decimal("0.2")


@dataclass
class KafkaConfig:
    """Kafka producer configuration for notification events."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 5
    retries: int = 3
    topic: str = "matching.notifications"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "retries": self.retries,
        }


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "matching"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class MatchEngineConfig:
    """Main configuration for match-engine."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "MatchEngineConfig":
        """Create config from environment variables."""
        import os

        weights = ScoringWeights(
            threshold=_int_env("MATCH_THRESHOLD", 40),
            budget_tolerance=_decimal_env("MATCH_BUDGET_TOLERANCE", "0.2"),
        )
        engine = EngineConfig(
            weights=weights,
            prefilter_by_budget=os.getenv("MATCH_PREFILTER", "false").lower() == "true",
            prefilter_tolerance=_decimal_env("MATCH_PREFILTER_TOLERANCE", "0.2"),
        )

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic=os.getenv("NOTIFICATION_TOPIC", "matching.notifications"),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=_int_env("POSTGRES_PORT", 5432),
            database=os.getenv("POSTGRES_DB", "matching"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        return cls(
            engine=engine,
            kafka=kafka,
            postgres=postgres,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _int_env(name: str, default: int) -> int:
    import os

    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _decimal_env(name: str, default: str) -> Decimal:
    import os

    raw = os.getenv(name) or default
    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {raw!r}")
    return value
