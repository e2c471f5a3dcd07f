"""Output sinks for exporting registry data."""

from lending_policy.sinks.console import ConsoleSink
from lending_policy.sinks.json_file import JsonFileSink
from lending_policy.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
