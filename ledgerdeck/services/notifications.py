"""
Transaction notifications.

Every user-triggered store operation ends with a short-lived status message
("Card created", "Ledger unavailable", ...). Notifications carry their own
expiry so clients can hide them without polling the server.
"""

import time
from enum import Enum

from pydantic import BaseModel, Field

from ledgerdeck.config import settings
from ledgerdeck.models.failure import KnownError, is_user_rejection


class NotificationStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    """A time-bounded status message."""

    status: NotificationStatus
    message: str
    created_at: float = Field(..., description="Epoch seconds")
    visible_seconds: float = Field(..., description="How long the message stays visible")

    @property
    def expires_at(self) -> float:
        return self.created_at + self.visible_seconds

    def is_visible(self, now: float | None = None) -> bool:
        return (time.time() if now is None else now) < self.expires_at


def success_notification(message: str, now: float | None = None) -> Notification:
    return Notification(
        status=NotificationStatus.SUCCESS,
        message=message,
        created_at=time.time() if now is None else now,
        visible_seconds=settings.success_notification_seconds,
    )


def error_notification(message: str, now: float | None = None) -> Notification:
    return Notification(
        status=NotificationStatus.ERROR,
        message=message,
        created_at=time.time() if now is None else now,
        visible_seconds=settings.error_notification_seconds,
    )


def notification_for_error(error: KnownError, action: str = "Operation") -> Notification:
    """
    Map a known error to the message shown to the user.

    Rejected signatures get their own message; everything else is prefixed
    with the action that failed.
    """
    if is_user_rejection(error.message) or is_user_rejection(error.detail or ""):
        return error_notification("Transaction rejected by user")
    return error_notification(f"{action} failed: {error.message}")
