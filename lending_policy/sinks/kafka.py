"""Kafka sink for publishing registry output to Kafka topics."""

import json
import logging
from dataclasses import dataclass, is_dataclass
from typing import Any

from confluent_kafka import Producer

from lending_policy.config import KafkaConfig
from lending_policy.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


@dataclass
class ProducerConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str
    acks: str = "all"  # "0", "1", "all"
    batch_size: int = 16384  # bytes
    linger_ms: int = 5  # ms to wait for batching
    compression: str = "snappy"  # none, gzip, snappy, lz4
    retries: int = 3

    @classmethod
    def from_kafka_config(cls, config: KafkaConfig) -> "ProducerConfig":
        """Build producer settings from the application config."""
        return cls(
            bootstrap_servers=config.bootstrap_servers,
            acks=config.acks,
            batch_size=config.batch_size,
            linger_ms=config.linger_ms,
            compression=config.compression,
            retries=config.retries,
        )


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Output records to Kafka topics as JSON messages."""

    # Entity type to key field mapping
    KEY_FIELDS = {
        "policies": "policy_id",
        "policy_history": "policy_id",
        "loan_decisions": "member_id",
        "policy_events": "subject",
    }

    def __init__(self, config: ProducerConfig | str, topic_prefix: str | None = None) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : ProducerConfig | str
            Producer configuration or bootstrap servers string.
        topic_prefix : str | None
            Prefix joined to entity types with a dot (e.g. ``dev.lending``).
        """
        if isinstance(config, str):
            config = ProducerConfig(bootstrap_servers=config)

        self.config = config
        self.topic_prefix = topic_prefix
        self.producer = self._create_producer()
        self.stats = ProducerStats()

    def _create_producer(self) -> Producer:
        """Create Kafka producer with configuration."""
        return Producer(
            {
                "bootstrap.servers": self.config.bootstrap_servers,
                "acks": self.config.acks,
                "retries": self.config.retries,
                "linger.ms": self.config.linger_ms,
                "batch.size": self.config.batch_size,
                "compression.type": self.config.compression,
            }
        )

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def _get_entity_type(self, topic: str) -> str:
        """Extract entity type from topic name."""
        # dev.lending.policy-events -> policy_events
        return topic.split(".")[-1].replace("-", "_")

    def _get_key(self, topic: str, record: Any) -> str | None:
        """Extract message key from record based on topic."""
        key_field = self.KEY_FIELDS.get(self._get_entity_type(topic))
        if not key_field:
            return None

        if is_dataclass(record):
            value = getattr(record, key_field, None)
        elif isinstance(record, dict):
            value = record.get(key_field)
        else:
            value = None
        return None if value is None else str(value)

    def topic_for(self, entity_type: str) -> str:
        """Topic name for an entity type."""
        return f"{self.topic_prefix}.{entity_type}" if self.topic_prefix else entity_type

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Send a single record to a Kafka topic."""
        value = json.dumps(to_dict(record), ensure_ascii=False, default=str).encode("utf-8")

        if key is None:
            key = self._get_key(topic, record)

        self.producer.produce(
            topic=topic,
            key=key.encode("utf-8") if key else None,
            value=value,
            callback=self._delivery_callback,
        )
        self.stats.sent += 1
        self.producer.poll(0)

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to the entity type's topic."""
        topic = self.topic_for(entity_type)
        logger.info("Writing batch to %s: %d records", topic, len(records))

        for record in records:
            self.send(topic, record)

        self.flush()
        logger.info("Batch complete: sent=%d, delivered=%d, failed=%d",
                    self.stats.sent, self.stats.delivered, self.stats.failed)

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
