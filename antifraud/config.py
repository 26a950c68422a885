"""Configuration for the risk engine and its adapters."""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from antifraud.exceptions import ConfigurationError


@dataclass(frozen=True)
class RiskThresholds:
    """Limits used by the risk rules.

    Amount limits are compared with a strict greater-than; count limits are
    inclusive. The night window covers ``hour >= night_start_hour`` or
    ``hour <= night_end_hour`` of the event timestamp.
    """

    high_value: Decimal = Decimal("2000.00")
    new_receiver_amount: Decimal = Decimal("1000.00")
    geo_amount_floor: Decimal = Decimal("200.00")
    panic_window: timedelta = timedelta(minutes=5)
    panic_count: int = 3
    receiver_window: timedelta = timedelta(hours=1)
    distinct_receivers: int = 3
    night_start_hour: int = 22
    night_end_hour: int = 6
    auth_attempts: int = 3
    receiver_lookback: timedelta = timedelta(days=36500)

    def is_night(self, hour: int) -> bool:
        """Whether an hour of day falls inside the night window."""
        return hour >= self.night_start_hour or hour <= self.night_end_hour


@dataclass
class KafkaConfig:
    """Settings of the verdict producer.

    Idempotence is on by default so retried sends cannot reorder or
    duplicate the verdicts of one sender account.
    """

    bootstrap_servers: str = "localhost:9092"
    client_id: str = "antifraud"
    acks: str = "all"
    enable_idempotence: bool = True
    linger_ms: int = 5
    verdict_topic: str = "antifraud.verdicts"

    def to_dict(self) -> dict[str, Any]:
        """Producer settings in confluent-kafka's dotted-key form."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "client.id": self.client_id,
            "acks": self.acks,
            "enable.idempotence": self.enable_idempotence,
            "linger.ms": self.linger_ms,
        }


@dataclass
class PostgresConfig:
    """Location of the PostgreSQL history database."""

    host: str = "localhost"
    port: int = 5432
    database: str = "antifraud"
    user: str = "postgres"
    password: str = "postgres"
    connect_timeout: int = 10

    @property
    def connection_string(self) -> str:
        """libpq URL, tagged with the application name."""
        return (
            f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"
            f"?application_name=antifraud&connect_timeout={self.connect_timeout}"
        )


@dataclass
class OutputConfig:
    """Where and how file and console sinks write verdicts."""

    output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty: bool = False


@dataclass
class AntifraudConfig:
    """Top-level configuration assembled from the environment."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    thresholds: RiskThresholds = field(default_factory=RiskThresholds)
    serialize_by_sender: bool = False
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "AntifraudConfig":
        """Read configuration from environment variables.

        Unset variables keep their defaults.

        Raises
        ------
        ConfigurationError
            If a numeric, amount or log format variable holds an invalid value.
        """
        defaults = RiskThresholds()

        log_format = os.getenv("LOG_FORMAT", "standard")
        if log_format not in ("standard", "json"):
            raise ConfigurationError(f"LOG_FORMAT must be 'standard' or 'json', got {log_format!r}")

        return cls(
            kafka=KafkaConfig(
                bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
                acks=os.getenv("KAFKA_ACKS", "all"),
                verdict_topic=os.getenv("VERDICT_TOPIC", "antifraud.verdicts"),
            ),
            postgres=PostgresConfig(
                host=os.getenv("POSTGRES_HOST", "localhost"),
                port=_int_env("POSTGRES_PORT", 5432),
                database=os.getenv("POSTGRES_DB", "antifraud"),
                user=os.getenv("POSTGRES_USER", "postgres"),
                password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            ),
            output=OutputConfig(
                output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
                pretty=_bool_env("PRETTY_JSON"),
            ),
            thresholds=RiskThresholds(
                high_value=_decimal_env("RISK_HIGH_VALUE", defaults.high_value),
                new_receiver_amount=_decimal_env("RISK_NEW_RECEIVER_AMOUNT", defaults.new_receiver_amount),
                geo_amount_floor=_decimal_env("RISK_GEO_AMOUNT_FLOOR", defaults.geo_amount_floor),
            ),
            serialize_by_sender=_bool_env("SERIALIZE_BY_SENDER"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=log_format,
        )


def _bool_env(name: str) -> bool:
    return os.getenv(name, "false").lower() == "true"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _decimal_env(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be a decimal amount, got {raw!r}") from None
    if not value.is_finite() or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative amount, got {raw!r}")
    return value
