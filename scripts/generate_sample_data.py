#!/usr/bin/env python3
"""Run the governance scenario and export its output.

Writes policies, policy history, loan decisions and registry events as JSON
files (one per entity type), and optionally publishes them to Kafka.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from lending_policy.config import LendingPolicyConfig
from lending_policy.logging import setup_logging
from lending_policy.scenarios import PolicyGovernanceScenario
from lending_policy.sinks import JsonFileSink, KafkaSink
from lending_policy.sinks.kafka import ProducerConfig

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    config = LendingPolicyConfig.from_env()

    parser = argparse.ArgumentParser(
        description="Run the lending policy governance scenario and export results"
    )
    parser.add_argument(
        "--policies",
        type=int,
        default=3,
        help="Number of policies to add (default: 3)",
    )
    parser.add_argument(
        "--loan-requests",
        type=int,
        default=100,
        help="Number of loan requests to screen (default: 100)",
    )
    parser.add_argument(
        "--violation-rate",
        type=float,
        default=0.2,
        help="Share of requests breaking one policy check (default: 0.2)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.output.json_output_dir,
        help="Directory for JSON output (default: output)",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        default=config.output.pretty_json,
        help="Pretty-print JSON files",
    )
    parser.add_argument(
        "--kafka-bootstrap",
        type=str,
        default=None,
        help="Kafka bootstrap servers; publishes to Kafka when set",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=config.log_level,
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default="standard",
        help="Log output format",
    )
    args = parser.parse_args()

    setup_logging(level=args.log_level, format_type=args.log_format)

    scenario = PolicyGovernanceScenario(
        num_policies=args.policies,
        num_loan_requests=args.loan_requests,
        violation_rate=args.violation_rate,
        seed=args.seed,
        registry_config=config.registry,
    )
    scenario.generate()

    sinks = [JsonFileSink(args.output_dir, pretty=args.pretty)]
    if args.kafka_bootstrap:
        config.kafka.bootstrap_servers = args.kafka_bootstrap
        sinks.append(
            KafkaSink(
                ProducerConfig.from_kafka_config(config.kafka),
                topic_prefix=config.topic_prefix,
            )
        )

    scenario.export(sinks)
    for sink in sinks:
        sink.close()

    print(json.dumps(scenario.get_summary(), indent=2))


if __name__ == "__main__":
    main()
