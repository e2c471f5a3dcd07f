"""Tests for config and logging."""

import json
import logging
import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

import lending_policy
from lending_policy.config import (
    DEFAULT_MAX_POLICIES,
    DEFAULT_OWNER,
    KafkaConfig,
    LendingPolicyConfig,
    OutputConfig,
    RegistryConfig,
    ScenarioConfig,
)
from lending_policy.exceptions import ConfigurationError
from lending_policy.logging import JsonFormatter, setup_logging

ENV_VARS = [
    "REGISTRY_OWNER",
    "MAX_POLICIES",
    "KAFKA_BOOTSTRAP_SERVERS",
    "KAFKA_ACKS",
    "OUTPUT_DIR",
    "PRETTY_JSON",
    "TOPIC_PREFIX",
    "SEED",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestRegistryConfig:
    """Tests for RegistryConfig."""

    def test_default_values(self) -> None:
        config = RegistryConfig()

        assert config.owner == DEFAULT_OWNER == "ST1VOTER"
        assert config.max_policies == DEFAULT_MAX_POLICIES == 100
        config.validate()

    def test_zero_capacity_is_valid(self) -> None:
        RegistryConfig(max_policies=0).validate()

    def test_empty_owner_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="owner"):
            RegistryConfig(owner="").validate()

    def test_negative_capacity_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="max_policies"):
            RegistryConfig(max_policies=-1).validate()


class TestKafkaConfig:
    """Tests for KafkaConfig."""

    def test_default_values(self) -> None:
        config = KafkaConfig()

        assert config.bootstrap_servers == "localhost:9092"
        assert config.acks == "all"
        assert config.batch_size == 16384
        assert config.linger_ms == 5
        assert config.compression == "snappy"
        assert config.retries == 3

    def test_to_dict(self) -> None:
        result = KafkaConfig(bootstrap_servers="kafka:9092", compression="gzip").to_dict()

        assert result["bootstrap.servers"] == "kafka:9092"
        assert result["acks"] == "all"
        assert result["batch.size"] == 16384
        assert result["linger.ms"] == 5
        assert result["compression.type"] == "gzip"
        assert result["retries"] == 3


class TestOutputConfig:
    """Tests for OutputConfig."""

    def test_default_values(self) -> None:
        config = OutputConfig()

        assert config.json_output_dir == Path("output")
        assert config.pretty_json is False


class TestScenarioConfig:
    """Tests for ScenarioConfig."""

    def test_default_values(self) -> None:
        config = ScenarioConfig(name="governance")

        assert config.num_policies == 3
        assert config.num_loan_requests == 100
        assert config.violation_rate == 0.2
        assert config.oracle == "ST2VOTING"


class TestLendingPolicyConfig:
    """Tests for LendingPolicyConfig."""

    def test_default_values(self) -> None:
        config = LendingPolicyConfig()

        assert isinstance(config.registry, RegistryConfig)
        assert config.seed is None
        assert config.log_level == "INFO"
        assert config.topic_prefix == "dev.lending"

    def test_from_env_default(self, clean_env: None) -> None:
        config = LendingPolicyConfig.from_env()

        assert config.registry.owner == "ST1VOTER"
        assert config.registry.max_policies == 100
        assert config.kafka.bootstrap_servers == "localhost:9092"
        assert config.kafka.acks == "all"
        assert config.output.json_output_dir == Path("output")
        assert config.output.pretty_json is False
        assert config.seed is None
        assert config.log_level == "INFO"
        assert config.topic_prefix == "dev.lending"

    def test_from_env_custom(self, clean_env: None) -> None:
        env_vars = {
            "REGISTRY_OWNER": "ST9DAO",
            "MAX_POLICIES": "5",
            "KAFKA_BOOTSTRAP_SERVERS": "kafka-cluster:9092",
            "KAFKA_ACKS": "1",
            "OUTPUT_DIR": "/tmp/policies",
            "PRETTY_JSON": "true",
            "TOPIC_PREFIX": "prod.lending",
            "SEED": "42",
            "LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars):
            config = LendingPolicyConfig.from_env()

        assert config.registry.owner == "ST9DAO"
        assert config.registry.max_policies == 5
        assert config.kafka.bootstrap_servers == "kafka-cluster:9092"
        assert config.kafka.acks == "1"
        assert config.output.json_output_dir == Path("/tmp/policies")
        assert config.output.pretty_json is True
        assert config.topic_prefix == "prod.lending"
        assert config.seed == 42
        assert config.log_level == "DEBUG"

    def test_from_env_negative_capacity(self, clean_env: None) -> None:
        with patch.dict(os.environ, {"MAX_POLICIES": "-3"}):
            with pytest.raises(ConfigurationError):
                LendingPolicyConfig.from_env()

    def test_from_env_empty_owner(self, clean_env: None) -> None:
        with patch.dict(os.environ, {"REGISTRY_OWNER": ""}):
            with pytest.raises(ConfigurationError):
                LendingPolicyConfig.from_env()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()

        assert logging.getLogger("lending_policy").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("lending_policy").level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Test logging with invalid level defaults to INFO."""
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")

        logger = logging.getLogger()
        assert any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        logger = logging.getLogger()
        logger.addHandler(logging.StreamHandler())
        logger.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(logger.handlers) == 1

    def test_external_loggers_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("confluent_kafka").level == logging.WARNING
        assert logging.getLogger("faker").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    @staticmethod
    def _record(level: int = logging.INFO, msg: str = "Test message", exc_info=None) -> logging.LogRecord:
        return logging.LogRecord(
            name="lending_policy.registry",
            level=level,
            pathname="/path/to/file.py",
            lineno=42,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "lending_policy.registry"
        assert data["message"] == "Test message"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(self._record(logging.ERROR, "Error", exc_info)))

        assert data["level"] == "ERROR"
        assert "ValueError" in data["exception"]

    def test_format_with_extra(self) -> None:
        record = self._record()
        record.extra = {"policy_id": 3, "caller": "ST2VOTING"}

        data = json.loads(JsonFormatter().format(record))

        assert data["policy_id"] == 3
        assert data["caller"] == "ST2VOTING"


def test_version() -> None:
    assert lending_policy.__version__ == "0.1.0"
