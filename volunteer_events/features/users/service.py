"""
Users feature: organizer lookups with a small in-memory TTL cache.
"""

import logging

import httpx
from cachetools import TTLCache
from pydantic import ValidationError

from volunteer_events.config import get_settings
from volunteer_events.features.events.api_client import EventAPIClient
from volunteer_events.features.users.schemas import User

logger = logging.getLogger(__name__)


class OrganizerDirectory:
    """Resolves organizer profiles via GET /users/{id}.

    Profiles rarely change, so repeat lookups within the TTL skip the network.
    Failed lookups are not cached.
    """

    def __init__(self, client: EventAPIClient, cache: TTLCache | None = None):
        settings = get_settings()
        self.client = client
        self._cache: TTLCache = cache if cache is not None else TTLCache(
            maxsize=settings.ORGANIZER_CACHE_SIZE,
            ttl=settings.ORGANIZER_CACHE_TTL_SECONDS,
        )

    async def get_organizer(self, user_id: str) -> User | None:
        """Return the organizer profile, or None if it could not be loaded."""
        if not user_id:
            return None
        if user_id in self._cache:
            return self._cache[user_id]

        try:
            user = User.model_validate(await self.client.get_user(user_id))
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning(f"Organizer {user_id} unavailable: {e}")
            return None

        self._cache[user_id] = user
        return user
