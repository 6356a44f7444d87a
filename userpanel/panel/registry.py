"""One panel per actor for the HTTP surface."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from userpanel.auth import Session
    from userpanel.notifications import NotificationCenter
    from userpanel.services import HttpUserService

    from .panel import UserPanel

LOGGER = logging.getLogger(__name__)


@dataclass
class PanelEntry:
    panel: "UserPanel"
    notifications: "NotificationCenter"
    service: "HttpUserService"


class PanelRegistry:
    """Keeps the panel of every actor between requests.

    A panel is rebuilt when the actor snapshot changes. A new session token
    for the same actor is handed to the existing service, so the cache and
    any staged deletion survive a token refresh.

    :param factory: Builds a fresh entry for a session
    """

    def __init__(self, factory: "Callable[[Session], PanelEntry]") -> None:
        self._factory = factory
        self._entries: dict[str, PanelEntry] = {}

    def get(self, session: "Session") -> PanelEntry:
        entry = self._entries.get(session.actor.id)
        if entry is None or entry.panel.actor != session.actor:
            LOGGER.debug("Creating panel for %s", session.actor.id)
            entry = self._factory(session)
            self._entries[session.actor.id] = entry
        elif entry.service.token != session.token:
            LOGGER.debug("Refreshing token for %s", session.actor.id)
            entry.service.token = session.token
        return entry
