"""
Events feature: repository for the upcoming-events list and event CRUD.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone

import httpx
from pydantic import ValidationError

from volunteer_events.config import get_settings
from volunteer_events.core.connectivity import ConnectivityProbe
from volunteer_events.core.exceptions import (
    AuthenticationRequired,
    EventLoadFailed,
    EventSaveFailed,
    NetworkUnavailable,
    NoDataAvailable,
    ValidationFailed,
)
from volunteer_events.core.session import Session
from volunteer_events.core.storage import KeyValueStore
from volunteer_events.features.drafts.schemas import EventDraft
from volunteer_events.features.drafts.validator import parse_volunteers_needed, validate
from volunteer_events.features.events.api_client import EventAPIClient
from volunteer_events.features.events.schemas import Event, EventCreate, as_aware

logger = logging.getLogger(__name__)

# Everything that can go wrong talking to the API or decoding its answer
REMOTE_ERRORS = (httpx.HTTPError, ValueError, ValidationError)


class EventRepository:
    """
    Resolves the list of upcoming events with a network-first strategy.

    Flow: probe connectivity → if online, fetch + filter + overwrite cache →
    otherwise (or on any remote failure) read the cache → else NoDataAvailable.
    """

    def __init__(
        self,
        client: EventAPIClient,
        store: KeyValueStore,
        probe: ConnectivityProbe,
        cache_key: str | None = None,
    ):
        self.client = client
        self.store = store
        self.probe = probe
        self.cache_key = cache_key or get_settings().EVENTS_CACHE_KEY
        self._cache_lock = asyncio.Lock()

    # ── Upcoming events (network first, cache fallback) ──

    async def list_upcoming_events(self, now: datetime | None = None) -> list[Event]:
        """Return all events not in the past.

        `now` defaults to the wall clock at call time.

        Raises:
            NoDataAvailable: offline (or API failed) and nothing cached.
        """
        try:
            return await self._refresh_from_network(now)
        except NetworkUnavailable as e:
            logger.warning(f"Falling back to cached events: {e.message}")

        cached = await self._read_cache()
        if cached is None:
            raise NoDataAvailable()
        return cached

    async def _refresh_from_network(self, now: datetime | None) -> list[Event]:
        """Fetch, filter and cache. Raises NetworkUnavailable on any failure."""
        if not await self._is_connected():
            raise NetworkUnavailable("Device is offline")

        try:
            raw_events = await self.client.list_events()
            events = [Event.model_validate(e) for e in raw_events]
        except REMOTE_ERRORS as e:
            raise NetworkUnavailable(f"Event API failed: {e}") from e

        # Filter against the clock *after* the fetch, not when the call started
        now = as_aware(now or datetime.now(timezone.utc))
        upcoming = [e for e in events if e.is_upcoming(now)]

        await self._write_cache(upcoming)
        logger.info(f"Loaded {len(upcoming)} upcoming of {len(events)} events from API")
        return upcoming

    async def _is_connected(self) -> bool:
        try:
            return await self.probe.is_connected()
        except Exception as e:
            logger.warning(f"Connectivity probe raised, assuming offline: {e}")
            return False

    # ── Cache Layer ──────────────────────────────────────

    async def _write_cache(self, events: list[Event]) -> None:
        """Full overwrite of the snapshot; never merged.

        A failed write keeps the previous snapshot and does not fail the
        fetch that produced `events`.
        """
        payload = json.dumps([e.to_wire() for e in events])
        async with self._cache_lock:
            try:
                await self.store.set(self.cache_key, payload)
            except Exception as e:
                logger.warning(f"Could not write event cache under '{self.cache_key}': {e}")

    async def _read_cache(self) -> list[Event] | None:
        try:
            raw = await self.store.get(self.cache_key)
        except Exception as e:
            logger.error(f"Could not read event cache under '{self.cache_key}': {e}")
            return None
        if raw is None:
            return None
        try:
            return [Event.model_validate(e) for e in json.loads(raw)]
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Event cache under '{self.cache_key}' is unreadable: {e}")
            return None

    # ── Single event ─────────────────────────────────────

    async def get_event(self, event_id: str) -> Event:
        """Fetch one event from the API (no cache)."""
        try:
            return Event.model_validate(await self.client.get_event(event_id))
        except REMOTE_ERRORS as e:
            raise EventLoadFailed(event_id, str(e)) from e

    async def create_event(
        self, draft: EventDraft, session: Session, now: datetime | None = None
    ) -> Event:
        """Validate the draft and POST it as a new event owned by the session user.

        Raises:
            ValidationFailed: draft is not submittable (checked again here).
            AuthenticationRequired: no user logged in.
            EventSaveFailed: the API call failed.
        """
        result = validate(draft, now=now)
        if not result.valid:
            raise ValidationFailed(result.field_errors)
        if not session.is_authenticated:
            raise AuthenticationRequired("You must log in to create an event.")

        body = EventCreate(
            name=draft.name,
            description=draft.description,
            organizer_id=session.user_id,
            date_time=draft.date_time,
            image_url=draft.image_url,
            position=draft.position,
            volunteers_needed=parse_volunteers_needed(draft.volunteers_needed),
            volunteers_ids=[],
        )

        try:
            created = Event.model_validate(await self.client.create_event(body.to_wire()))
        except REMOTE_ERRORS as e:
            logger.error(f"Could not save event '{draft.name}': {e}")
            raise EventSaveFailed(str(e)) from e

        logger.info(f"Created event {created.id} ({created.name})")
        return created
