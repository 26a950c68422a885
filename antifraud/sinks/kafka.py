"""Kafka sink publishing verdicts of evaluated transactions."""

import logging
from dataclasses import dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from antifraud.config import KafkaConfig
from antifraud.exceptions import SinkError
from antifraud.models import Transaction
from antifraud.sinks.serialization import to_json

logger = logging.getLogger(__name__)


@dataclass
class ProducerStats:
    """Delivery counters of a sink."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0
    suspicious: int = 0

    @property
    def success_rate(self) -> float:
        """Share of delivery reports that succeeded."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Publish evaluated transactions as JSON messages.

    Messages are keyed by sender account so that every verdict of an account
    lands on the same partition in evaluation order. Transactions also carry
    a ``suspicious`` header so consumers can route alerts without decoding
    the body.
    """

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.

        Raises
        ------
        SinkError
            If the producer rejects the configuration.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        try:
            self.producer = Producer(config.to_dict())
        except KafkaException as e:
            raise SinkError(f"Cannot create Kafka producer: {e}") from e
        self.stats = ProducerStats()

    def _on_delivery(self, err: Any, msg: Any) -> None:
        if err:
            self.stats.failed += 1
            logger.error("Verdict delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Verdict delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    @staticmethod
    def _key_and_headers(record: Any) -> tuple[str | None, list[tuple[str, bytes]] | None]:
        if isinstance(record, Transaction):
            flag = b"true" if record.is_suspicious else b"false"
            return record.sender_account_id, [("suspicious", flag)]
        if isinstance(record, dict):
            return record.get("sender_account_id"), None
        return None, None

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Queue one record for delivery."""
        default_key, headers = self._key_and_headers(record)
        key = key or default_key

        self.producer.produce(
            topic=topic,
            key=key.encode("utf-8") if key else None,
            value=to_json(record).encode("utf-8"),
            headers=headers,
            on_delivery=self._on_delivery,
        )
        self.stats.sent += 1
        if getattr(record, "is_suspicious", False):
            self.stats.suspicious += 1
        # Serve delivery callbacks of earlier messages
        self.producer.poll(0)

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Publish a batch and wait for its delivery reports."""
        for record in records:
            self.send(topic, record)
        self.flush()
        logger.info(
            "Published %d verdicts to %s (%d suspicious, %.1f%% delivered)",
            len(records),
            topic,
            self.stats.suspicious,
            self.stats.success_rate * 100,
        )

    def flush(self, timeout: float = 30.0) -> None:
        """Wait for outstanding messages; log any left undelivered."""
        remaining = self.producer.flush(timeout)
        if remaining:
            logger.warning("%d verdict messages still queued after %.0fs", remaining, timeout)

    def close(self) -> None:
        """Flush and report totals."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
