"""
Volunteers feature: participation status models.
"""

from enum import Enum

from pydantic import BaseModel


class ParticipationStatus(str, Enum):
    VOLUNTEERED = "volunteered"
    FULL = "full"
    OPEN = "open"


class EventAction(str, Enum):
    SHARE = "share"
    VOLUNTEER = "volunteer"
    CALL = "call"
    TEXT = "text"


class ParticipationState(BaseModel):
    """What the detail screen shows for one (event, user) pair."""
    status: ParticipationStatus
    volunteer_count: int
    volunteers_needed: int

    @property
    def label(self) -> str:
        if self.status == ParticipationStatus.VOLUNTEERED:
            return "Volunteered"
        if self.status == ParticipationStatus.FULL:
            return "Team is full"
        return f"{self.volunteer_count} of {self.volunteers_needed} needed"
