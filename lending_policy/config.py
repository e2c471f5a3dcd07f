"""Configuration management for lending-policy."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from lending_policy.exceptions import ConfigurationError

DEFAULT_OWNER = "ST1VOTER"
DEFAULT_MAX_POLICIES = 100


@dataclass
class RegistryConfig:
    """Policy registry configuration.

    ``owner`` is the bootstrap principal allowed to configure the
    authorization oracle; ``max_policies`` bounds how many policies can
    ever be created.
    """

    owner: str = DEFAULT_OWNER
    max_policies: int = DEFAULT_MAX_POLICIES

    def validate(self) -> None:
        """Raise ConfigurationError if the configuration is unusable."""
        if not self.owner:
            raise ConfigurationError("Registry owner must be a non-empty principal")
        if self.max_policies < 0:
            raise ConfigurationError(
                f"max_policies must be >= 0, got {self.max_policies}"
            )


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class ScenarioConfig:
    """Configuration for scenario execution."""

    name: str
    num_policies: int = 3
    num_loan_requests: int = 100
    violation_rate: float = 0.2
    oracle: str = "ST2VOTING"


@dataclass
class LendingPolicyConfig:
    """Main configuration for lending-policy."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed: int | None = None
    log_level: str = "INFO"
    topic_prefix: str = "dev.lending"

    @classmethod
    def from_env(cls) -> "LendingPolicyConfig":
        """Create config from environment variables."""
        import os

        registry = RegistryConfig(
            owner=os.getenv("REGISTRY_OWNER", DEFAULT_OWNER),
            max_policies=int(os.getenv("MAX_POLICIES", str(DEFAULT_MAX_POLICIES))),
        )
        registry.validate()

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            registry=registry,
            kafka=kafka,
            output=output,
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.lending"),
        )
