"""Notification sinks."""

from match_engine.sinks.console import ConsoleNotificationSink
from match_engine.sinks.kafka import KafkaNotificationSink

__all__ = ["ConsoleNotificationSink", "KafkaNotificationSink"]
