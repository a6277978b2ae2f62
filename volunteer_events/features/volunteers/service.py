"""
Volunteers feature: participation state and the signup transition.

Signup is an optimistic write: the new volunteer list is PATCHed and, once the
API accepts it, the same list is applied to the in-memory event without
re-reading it. There is no conflict detection, so two clients signing up at
the same moment race and the server keeps whichever PATCH lands last.
"""

import logging

import httpx

from volunteer_events.core.exceptions import AuthenticationRequired, SignupFailed
from volunteer_events.core.session import Session
from volunteer_events.features.events.api_client import EventAPIClient
from volunteer_events.features.events.schemas import Event
from volunteer_events.features.volunteers.schemas import (
    EventAction,
    ParticipationState,
    ParticipationStatus,
)

logger = logging.getLogger(__name__)


# ── Pure derivation ──────────────────────────────────────

def is_volunteered(event: Event, user_id: str | None) -> bool:
    if not user_id:
        return False
    return user_id in event.volunteers_ids


def is_full(event: Event) -> bool:
    """Advisory only: nothing stops the list growing past the target."""
    return len(event.volunteers_ids) >= event.volunteers_needed


def participation_state(event: Event, user_id: str | None) -> ParticipationState:
    """Volunteered beats Full beats Open."""
    if is_volunteered(event, user_id):
        status = ParticipationStatus.VOLUNTEERED
    elif is_full(event):
        status = ParticipationStatus.FULL
    else:
        status = ParticipationStatus.OPEN
    return ParticipationState(
        status=status,
        volunteer_count=len(event.volunteers_ids),
        volunteers_needed=event.volunteers_needed,
    )


def available_actions(state: ParticipationState) -> list[EventAction]:
    """Buttons shown on the detail screen for a given state."""
    if state.status == ParticipationStatus.VOLUNTEERED:
        return [EventAction.SHARE, EventAction.CALL, EventAction.TEXT]
    if state.status == ParticipationStatus.OPEN:
        return [EventAction.SHARE, EventAction.VOLUNTEER]
    return []


# ── Signup ───────────────────────────────────────────────

class VolunteerCoordinator:
    """Signs the session user up for an event."""

    def __init__(self, client: EventAPIClient):
        self.client = client

    async def volunteer(self, event: Event, session: Session) -> Event:
        """Add the session user to `event.volunteers_ids`.

        Already volunteered or full: returns the event untouched (double-tap safe).

        Raises:
            AuthenticationRequired: no user logged in.
            SignupFailed: the PATCH failed; `event` is left unchanged.
        """
        user_id = session.user_id
        if not user_id:
            raise AuthenticationRequired("You must log in to volunteer.")

        if is_volunteered(event, user_id) or is_full(event):
            logger.info(f"Signup for event {event.id} skipped: already volunteered or full")
            return event

        updated_ids = [*event.volunteers_ids, user_id]

        try:
            await self.client.patch_event(event.id, {"volunteersIds": updated_ids})
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Signup PATCH failed for event {event.id}: {e}")
            raise SignupFailed(event.id, str(e)) from e

        event.volunteers_ids = updated_ids
        logger.info(f"User {user_id} volunteered for event {event.id}")
        return event
