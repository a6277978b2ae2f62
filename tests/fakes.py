"""
Shared fakes for the test suite: an in-memory json-server behind
httpx.MockTransport, plus probe / picker / file stand-ins.
"""

import json
from datetime import datetime, timedelta, timezone

import httpx

from volunteer_events.features.events.api_client import EventAPIClient
from volunteer_events.features.events.schemas import Event
from volunteer_events.features.images.schemas import PickerResult

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def event_dict(event_id: str, days_from_now: float = 1, **overrides) -> dict:
    data = {
        "id": event_id,
        "name": f"Event {event_id}",
        "description": "Beach cleanup",
        "organizerId": "org1",
        "dateTime": (NOW + timedelta(days=days_from_now)).isoformat().replace("+00:00", "Z"),
        "imageUrl": "https://i.ibb.co/abc/beach.jpg",
        "position": {"latitude": -27.2, "longitude": -49.6},
        "volunteersNeeded": 2,
        "volunteersIds": [],
    }
    data.update(overrides)
    return data


def make_event(event_id: str = "e1", **overrides) -> Event:
    return Event.model_validate(event_dict(event_id, **overrides))


class FakeEventServer:
    """Tiny json-server: /events and /users backed by dicts."""

    def __init__(self, events: list[dict] | None = None, users: list[dict] | None = None):
        self.events = {e["id"]: dict(e) for e in (events or [])}
        self.users = {u["id"]: dict(u) for u in (users or [])}
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None        # HTTP status to answer every call with
        self.raise_transport_error = False
        self._next_id = 100

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_transport_error:
            raise httpx.ConnectError("connection refused", request=request)
        if self.fail_with:
            return httpx.Response(self.fail_with, json={"error": "boom"})

        parts = request.url.path.strip("/").split("/")
        if parts[0] == "events":
            return self._events(request, parts[1:])
        if parts[0] == "users" and len(parts) == 2:
            user = self.users.get(parts[1])
            return httpx.Response(200, json=user) if user else httpx.Response(404, json={})
        return httpx.Response(404, json={})

    def _events(self, request: httpx.Request, rest: list[str]) -> httpx.Response:
        if not rest:
            if request.method == "GET":
                return httpx.Response(200, json=list(self.events.values()))
            if request.method == "POST":
                body = json.loads(request.content)
                self._next_id += 1
                body["id"] = str(self._next_id)
                self.events[body["id"]] = body
                return httpx.Response(201, json=body)

        event = self.events.get(rest[0]) if rest else None
        if event is None:
            return httpx.Response(404, json={})
        if request.method == "GET":
            return httpx.Response(200, json=event)
        if request.method == "PATCH":
            event.update(json.loads(request.content))
            return httpx.Response(200, json=event)
        return httpx.Response(405, json={})

    def client(self) -> EventAPIClient:
        return EventAPIClient(base_url="http://test", transport=httpx.MockTransport(self.handler))

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


class FakeProbe:
    def __init__(self, connected: bool = True):
        self.connected = connected
        self.checks = 0

    async def is_connected(self) -> bool:
        self.checks += 1
        return self.connected


class FakePicker:
    def __init__(
        self,
        result: PickerResult | None = None,
        camera: bool = True,
        library: bool = True,
    ):
        self.result = result or PickerResult(canceled=True)
        self.camera = camera
        self.library = library
        self.launched: list[str] = []

    async def request_camera_permission(self) -> bool:
        return self.camera

    async def request_library_permission(self) -> bool:
        return self.library

    async def pick_from_library(self) -> PickerResult:
        self.launched.append("library")
        return self.result

    async def capture_photo(self) -> PickerResult:
        self.launched.append("camera")
        return self.result


class FakeFiles:
    def __init__(self, contents: dict[str, str] | None = None, sizes: dict[str, int] | None = None):
        self.contents = contents or {}
        self.sizes = sizes or {}
        self.reads: list[str] = []

    async def get_size(self, uri: str) -> int | None:
        return self.sizes.get(uri)

    async def read_base64(self, uri: str) -> str:
        self.reads.append(uri)
        if uri not in self.contents:
            raise FileNotFoundError(uri)
        return self.contents[uri]


class FakeHost:
    def __init__(self, url: str = "https://i.ibb.co/xyz/photo.jpg", error: Exception | None = None):
        self.url = url
        self.error = error
        self.payloads: list[str] = []

    async def upload(self, base64_payload: str) -> str:
        self.payloads.append(base64_payload)
        if self.error:
            raise self.error
        return self.url
