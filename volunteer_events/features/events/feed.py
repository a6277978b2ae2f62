"""
Events feature: state behind the events map/list screen.
"""

import logging
from datetime import datetime
from enum import Enum

from volunteer_events.core.cancellation import CancellationToken, is_cancelled
from volunteer_events.core.exceptions import NoDataAvailable
from volunteer_events.features.events.repository import EventRepository
from volunteer_events.features.events.schemas import Event

logger = logging.getLogger(__name__)


class FeedStatus(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"
    OFFLINE_EMPTY = "offline_empty"   # no network and nothing cached


class EventFeed:
    """Holds the last applied list of upcoming events.

    The screen calls refresh() on mount and every time it regains focus.
    """

    def __init__(self, repository: EventRepository):
        self.repository = repository
        self.events: list[Event] = []
        self.status = FeedStatus.IDLE

    async def refresh(
        self, token: CancellationToken | None = None, now: datetime | None = None
    ) -> bool:
        """Reload the list. Returns False if the result was discarded.

        A result is discarded when `token` was cancelled while loading, so a
        torn-down screen never gets updated. On NoDataAvailable the previous
        list is kept and the status flips to OFFLINE_EMPTY.
        """
        try:
            events = await self.repository.list_upcoming_events(now=now)
        except NoDataAvailable:
            if is_cancelled(token):
                return False
            logger.warning("No events to show: offline with an empty cache")
            self.status = FeedStatus.OFFLINE_EMPTY
            return True

        if is_cancelled(token):
            logger.info("Discarding event list: view no longer active")
            return False

        self.events = events
        self.status = FeedStatus.LOADED
        return True

    @property
    def summary(self) -> str:
        """e.g. "1 upcoming event", "3 upcoming events"."""
        count = len(self.events)
        return f"{count} upcoming event{'' if count == 1 else 's'}"
