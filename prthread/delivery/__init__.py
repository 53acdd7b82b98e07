"""Chat delivery port and its Slack adapter."""

from __future__ import annotations

from .errors import DeliveryConfigError, DeliveryError
from .models import DeliveryReceipt, Notification
from .protocol import ChatDelivery
from .slack import SlackChatDelivery, SlackConfig

__all__ = [
    "ChatDelivery",
    "DeliveryConfigError",
    "DeliveryError",
    "DeliveryReceipt",
    "Notification",
    "SlackChatDelivery",
    "SlackConfig",
]
