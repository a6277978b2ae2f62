"""
Events feature: everything the event detail screen needs in one model.
"""

import logging

from pydantic import BaseModel

from volunteer_events.core.cancellation import CancellationToken, is_cancelled
from volunteer_events.core.session import Session
from volunteer_events.features.events.repository import EventRepository
from volunteer_events.features.events.schemas import Event
from volunteer_events.features.users.schemas import User, display_name, normalize_phone
from volunteer_events.features.users.service import OrganizerDirectory
from volunteer_events.features.volunteers.schemas import EventAction, ParticipationState
from volunteer_events.features.volunteers.service import available_actions, participation_state

logger = logging.getLogger(__name__)


class EventDetails(BaseModel):
    event: Event
    organizer: User | None = None
    state: ParticipationState
    actions: list[EventAction]
    organizer_name: str
    organizer_phone: str

    @property
    def share_message(self) -> str:
        when = self.event.date_time.astimezone().strftime("%x %X")
        return f"Join me at {self.event.name} on {when}!"

    def contact_uri(self, action: EventAction) -> str | None:
        """tel:/sms: link for the organizer, None without a phone number."""
        if not self.organizer_phone:
            return None
        if action == EventAction.CALL:
            return f"tel:{self.organizer_phone}"
        if action == EventAction.TEXT:
            return f"sms:{self.organizer_phone}"
        return None

    def directions_uri(self, platform: str = "android") -> str:
        """Maps link routing to the event; Apple Maps on iOS, Google Maps elsewhere."""
        position = self.event.position
        host = "maps.apple.com" if platform == "ios" else "maps.google.com"
        return f"http://{host}/?daddr={position.latitude},{position.longitude}"


def build_details(event: Event, organizer: User | None, session: Session) -> EventDetails:
    """Combine event, organizer and the current user into the screen model."""
    state = participation_state(event, session.user_id)
    return EventDetails(
        event=event,
        organizer=organizer,
        state=state,
        actions=available_actions(state),
        organizer_name=display_name(organizer),
        organizer_phone=normalize_phone(organizer.mobile if organizer else None),
    )


class EventDetailsLoader:
    def __init__(self, repository: EventRepository, organizers: OrganizerDirectory):
        self.repository = repository
        self.organizers = organizers

    async def load(
        self,
        event_id: str,
        session: Session,
        token: CancellationToken | None = None,
    ) -> EventDetails | None:
        """Load the event, then its organizer.

        Returns None if `token` got cancelled along the way.

        Raises:
            EventLoadFailed: the event itself could not be read.
        """
        event = await self.repository.get_event(event_id)
        if is_cancelled(token):
            return None

        organizer = await self.organizers.get_organizer(event.organizer_id)
        if is_cancelled(token):
            return None

        return build_details(event, organizer, session)
