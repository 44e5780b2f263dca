"""Notification event model."""

from dataclasses import dataclass, field
from typing import Any

from match_engine.models.enums import NotificationChannel, NotificationType


@dataclass
class Notification:
    """Domain event handed to a notification sink.

    Delivery, templating and email are the sink's responsibility.
    """

    user_id: str
    title: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    notification_type: NotificationType = NotificationType.NEW_MATCH
    channel: NotificationChannel = NotificationChannel.IN_APP
    template: str | None = None  # email template name
    recipient: str | None = None  # email address for the email channel
