"""Output sinks for exporting evaluated transactions."""

from antifraud.sinks.console import ConsoleSink
from antifraud.sinks.json_file import JsonFileSink
from antifraud.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
