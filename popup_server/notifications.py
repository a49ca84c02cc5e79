"""Buffered sinks for servers that report popup events as responses."""

import logging
from typing import Optional

from pydantic import BaseModel

from .models import NotificationLevel

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    message: str
    level: NotificationLevel


class EventLog:
    """Collects notifications and the latest cart count until drained."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []
        self.cart_count: Optional[int] = None

    def notify(self, message: str, level: NotificationLevel) -> None:
        logger.info(f"[{level.value}] {message}")
        self.notifications.append(Notification(message=message, level=level))

    def update_cart_count(self, item_count: int) -> None:
        self.cart_count = item_count

    def drain(self) -> list[Notification]:
        """Return pending notifications and clear them."""
        pending, self.notifications = self.notifications, []
        return pending
