"""
Events feature: HTTP client for the event REST API.

ENDPOINTS:
  1. List events:    GET   /events
  2. One event:      GET   /events/{id}
  3. Create event:   POST  /events          body: full event minus id
  4. Patch event:    PATCH /events/{id}     body: changed fields only, e.g. {volunteersIds}
  5. User profile:   GET   /users/{id}

Every method raises httpx.HTTPError (transport or non-2xx status) or
ValueError (malformed JSON); callers convert those into client errors.
"""

import httpx

from volunteer_events.config import get_settings


class EventAPIClient:
    """Thin async wrapper around the event API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.API_TIMEOUT

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=float(self._timeout),
            transport=transport,
            headers={
                "User-Agent": f"{settings.APP_NAME}/{settings.APP_VERSION}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )

    # ── Events ───────────────────────────────────────────

    async def list_events(self) -> list[dict]:
        """GET /events"""
        response = await self._client.get("/events")
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of events, got {type(data).__name__}")
        return data

    async def get_event(self, event_id: str) -> dict:
        """GET /events/{id}"""
        response = await self._client.get(f"/events/{event_id}")
        response.raise_for_status()
        return self._expect_object(response)

    async def create_event(self, body: dict) -> dict:
        """POST /events"""
        response = await self._client.post("/events", json=body)
        response.raise_for_status()
        return self._expect_object(response)

    async def patch_event(self, event_id: str, changes: dict) -> dict:
        """PATCH /events/{id} with only the changed fields."""
        response = await self._client.patch(f"/events/{event_id}", json=changes)
        response.raise_for_status()
        # json-server echoes the merged event; some backends answer 204
        if not response.content:
            return {}
        return self._expect_object(response)

    # ── Users ────────────────────────────────────────────

    async def get_user(self, user_id: str) -> dict:
        """GET /users/{id}"""
        response = await self._client.get(f"/users/{user_id}")
        response.raise_for_status()
        return self._expect_object(response)

    # ── Helpers ──────────────────────────────────────────

    @staticmethod
    def _expect_object(response: httpx.Response) -> dict:
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "EventAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
