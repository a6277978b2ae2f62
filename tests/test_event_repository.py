"""
Unit tests for EventRepository: network-first listing with cache fallback,
single-event reads and event creation.
"""

import asyncio
import json
from datetime import timedelta

import pytest

from fakes import NOW, FakeEventServer, FakeProbe, event_dict
from volunteer_events.core.exceptions import (
    AuthenticationRequired,
    EventLoadFailed,
    EventSaveFailed,
    NoDataAvailable,
    ValidationFailed,
)
from volunteer_events.core.session import Session
from volunteer_events.core.storage import MemoryStore
from volunteer_events.features.drafts.schemas import EventDraft
from volunteer_events.features.events.repository import EventRepository
from volunteer_events.features.events.schemas import Position

CACHE_KEY = "@events_cache"


def _repo(server: FakeEventServer, store: MemoryStore, connected: bool = True) -> EventRepository:
    return EventRepository(server.client(), store, FakeProbe(connected), cache_key=CACHE_KEY)


def _cached_ids(store: MemoryStore) -> list[str]:
    raw = asyncio.run(store.get(CACHE_KEY))
    return [e["id"] for e in json.loads(raw)]


# -- list_upcoming_events --

class TestListUpcomingEvents:
    def test_connected_filters_past_and_overwrites_cache(self):
        server = FakeEventServer(events=[
            event_dict("future1", days_from_now=1),
            event_dict("past", days_from_now=-1),
            event_dict("future2", days_from_now=3),
        ])
        store = MemoryStore({CACHE_KEY: json.dumps([event_dict("stale")])})
        repo = _repo(server, store)

        events = asyncio.run(repo.list_upcoming_events(now=NOW))

        assert [e.id for e in events] == ["future1", "future2"]
        assert _cached_ids(store) == ["future1", "future2"]

    def test_event_exactly_now_counts_as_upcoming(self):
        server = FakeEventServer(events=[event_dict("now", days_from_now=0)])
        repo = _repo(server, MemoryStore())

        events = asyncio.run(repo.list_upcoming_events(now=NOW))

        assert [e.id for e in events] == ["now"]

    def test_disconnected_returns_cache_unaltered(self):
        cached = event_dict("cached", volunteersIds=["u1"])
        server = FakeEventServer(events=[event_dict("remote")])
        store = MemoryStore({CACHE_KEY: json.dumps([cached])})
        repo = _repo(server, store, connected=False)

        events = asyncio.run(repo.list_upcoming_events(now=NOW))

        assert len(events) == 1
        assert events[0].to_wire() == cached
        assert server.requests == []  # never hits the network when offline

    def test_remote_error_falls_back_to_cache(self):
        server = FakeEventServer()
        server.raise_transport_error = True
        store = MemoryStore({CACHE_KEY: json.dumps([event_dict("cached")])})
        repo = _repo(server, store)

        events = asyncio.run(repo.list_upcoming_events(now=NOW))

        assert [e.id for e in events] == ["cached"]
        assert _cached_ids(store) == ["cached"]  # failed fetch never writes

    def test_http_error_status_falls_back_to_cache(self):
        server = FakeEventServer()
        server.fail_with = 500
        store = MemoryStore({CACHE_KEY: json.dumps([event_dict("cached")])})

        events = asyncio.run(_repo(server, store).list_upcoming_events(now=NOW))

        assert [e.id for e in events] == ["cached"]

    def test_malformed_payload_falls_back_to_cache(self):
        server = FakeEventServer(events=[{"id": "broken"}])
        store = MemoryStore({CACHE_KEY: json.dumps([event_dict("cached")])})

        events = asyncio.run(_repo(server, store).list_upcoming_events(now=NOW))

        assert [e.id for e in events] == ["cached"]

    def test_offline_without_cache_raises_no_data(self):
        repo = _repo(FakeEventServer(), MemoryStore(), connected=False)
        with pytest.raises(NoDataAvailable):
            asyncio.run(repo.list_upcoming_events(now=NOW))

    def test_remote_failure_without_cache_raises_no_data(self):
        server = FakeEventServer()
        server.fail_with = 503
        with pytest.raises(NoDataAvailable):
            asyncio.run(_repo(server, MemoryStore()).list_upcoming_events(now=NOW))

    def test_offline_read_matches_last_online_read(self):
        server = FakeEventServer(events=[
            event_dict("a", days_from_now=2),
            event_dict("old", days_from_now=-2),
        ])
        store = MemoryStore()
        online = asyncio.run(_repo(server, store).list_upcoming_events(now=NOW))
        offline = asyncio.run(_repo(server, store, connected=False).list_upcoming_events(now=NOW))

        assert offline == online

    def test_probe_exception_counts_as_offline(self):
        class BrokenProbe:
            async def is_connected(self):
                raise RuntimeError("netinfo crashed")

        store = MemoryStore({CACHE_KEY: json.dumps([event_dict("cached")])})
        repo = EventRepository(FakeEventServer().client(), store, BrokenProbe(), cache_key=CACHE_KEY)

        events = asyncio.run(repo.list_upcoming_events(now=NOW))

        assert [e.id for e in events] == ["cached"]

    def test_naive_now_is_treated_as_utc(self):
        server = FakeEventServer(events=[
            event_dict("future", days_from_now=1),
            event_dict("past", days_from_now=-1),
        ])

        events = asyncio.run(
            _repo(server, MemoryStore()).list_upcoming_events(now=NOW.replace(tzinfo=None))
        )

        assert [e.id for e in events] == ["future"]


# -- cache store failures --

class FullDiskStore(MemoryStore):
    async def set(self, key, value):
        raise OSError("disk full")


class UnreadableStore(MemoryStore):
    async def get(self, key):
        raise PermissionError("store unreadable")


class TestCacheStoreFailures:
    def test_failed_cache_write_still_returns_fresh_events(self):
        server = FakeEventServer(events=[event_dict("fresh", days_from_now=1)])
        store = FullDiskStore({CACHE_KEY: json.dumps([event_dict("old")])})

        events = asyncio.run(_repo(server, store).list_upcoming_events(now=NOW))

        assert [e.id for e in events] == ["fresh"]
        assert _cached_ids(store) == ["old"]  # previous snapshot left in place

    def test_failed_cache_read_offline_raises_no_data(self):
        store = UnreadableStore({CACHE_KEY: json.dumps([event_dict("cached")])})
        repo = _repo(FakeEventServer(), store, connected=False)

        with pytest.raises(NoDataAvailable):
            asyncio.run(repo.list_upcoming_events(now=NOW))

    def test_failed_cache_read_does_not_affect_online_load(self):
        server = FakeEventServer(events=[event_dict("fresh", days_from_now=1)])
        store = UnreadableStore()

        events = asyncio.run(_repo(server, store).list_upcoming_events(now=NOW))

        assert [e.id for e in events] == ["fresh"]


# -- get_event --

class TestGetEvent:
    def test_returns_event(self):
        server = FakeEventServer(events=[event_dict("e1")])
        event = asyncio.run(_repo(server, MemoryStore()).get_event("e1"))
        assert event.id == "e1"
        assert event.volunteers_needed == 2

    def test_missing_event_raises_load_failed(self):
        with pytest.raises(EventLoadFailed):
            asyncio.run(_repo(FakeEventServer(), MemoryStore()).get_event("nope"))


# -- create_event --

def _valid_draft() -> EventDraft:
    return EventDraft(
        name="Park cleanup",
        description="Bring gloves",
        volunteers_needed="4",
        date_time=NOW + timedelta(days=2),
        position=Position(latitude=1.5, longitude=2.5),
        image_url="https://i.ibb.co/xyz/park.jpg",
    )


class TestCreateEvent:
    def test_posts_full_body_owned_by_session_user(self):
        server = FakeEventServer()
        repo = _repo(server, MemoryStore())

        created = asyncio.run(repo.create_event(_valid_draft(), Session.for_user("u9"), now=NOW))

        body = json.loads(server.calls("POST")[0].content)
        assert body["organizerId"] == "u9"
        assert body["volunteersNeeded"] == 4
        assert body["volunteersIds"] == []
        assert "id" not in body
        assert created.id in server.events

    def test_invalid_draft_raises_before_any_request(self):
        server = FakeEventServer()
        draft = _valid_draft().model_copy(update={"volunteers_needed": "0"})

        with pytest.raises(ValidationFailed) as exc:
            asyncio.run(_repo(server, MemoryStore()).create_event(draft, Session.for_user("u9"), now=NOW))

        assert "volunteers_needed" in exc.value.field_errors
        assert server.requests == []

    def test_requires_login(self):
        with pytest.raises(AuthenticationRequired):
            asyncio.run(
                _repo(FakeEventServer(), MemoryStore()).create_event(_valid_draft(), Session.anonymous(), now=NOW)
            )

    def test_server_error_raises_save_failed(self):
        server = FakeEventServer()
        server.fail_with = 500
        with pytest.raises(EventSaveFailed):
            asyncio.run(_repo(server, MemoryStore()).create_event(_valid_draft(), Session.for_user("u9"), now=NOW))

    def test_create_does_not_touch_cache(self):
        store = MemoryStore()
        asyncio.run(_repo(FakeEventServer(), store).create_event(_valid_draft(), Session.for_user("u9"), now=NOW))
        assert asyncio.run(store.get(CACHE_KEY)) is None
