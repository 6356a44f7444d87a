"""Toast notifications emitted by panel mutations."""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

LOGGER = logging.getLogger(__name__)


class NotificationKind(Enum):
    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def icon(self) -> str:
        return "check" if self is NotificationKind.SUCCESS else "delete"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    message: str

    @property
    def icon(self) -> str:
        return self.kind.icon


class Notifier(Protocol):
    """Fire-and-forget delivery of a user-visible notification."""

    def notify(self, kind: NotificationKind, message: str) -> None: ...


class NotificationCenter:
    """Logs notifications and buffers them until the UI collects them.

    :param max_pending: Oldest notifications are dropped past this many
    """

    DEFAULT_MAX_PENDING = 50

    def __init__(self, max_pending: int = DEFAULT_MAX_PENDING) -> None:
        self._pending: deque[Notification] = deque(maxlen=max_pending)

    def notify(self, kind: NotificationKind, message: str) -> None:
        if kind is NotificationKind.FAILURE:
            LOGGER.warning("Notify failure: %s", message)
        else:
            LOGGER.info("Notify success: %s", message)
        self._pending.append(Notification(kind, message))

    def drain(self) -> list[Notification]:
        """Return and forget every pending notification, oldest first."""
        notifications = list(self._pending)
        self._pending.clear()
        return notifications

    def __len__(self) -> int:
        return len(self._pending)
