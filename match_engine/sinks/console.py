"""Console sink for debugging and development."""

import json

from match_engine.models import Notification
from match_engine.sinks.serialization import to_dict


class ConsoleNotificationSink:
    """Print notifications to stdout as JSON."""

    def __init__(self, pretty: bool = True) -> None:
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def send(self, notification: Notification) -> None:
        """Print a single notification."""
        data = to_dict(notification)
        if self.pretty:
            print(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        else:
            print(json.dumps(data, ensure_ascii=False, default=str))

        channel = notification.channel.value
        self._counts[channel] = self._counts.get(channel, 0) + 1

    def close(self) -> None:
        """Print summary and close."""
        print(f"\n{'='*60}")
        print("Console Sink Summary")
        print("=" * 60)
        for channel, count in self._counts.items():
            print(f"  {channel}: {count} notifications")
