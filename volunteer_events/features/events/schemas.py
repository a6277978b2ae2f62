"""
Events feature: wire models for the event API.

Field names are snake_case in Python and camelCase on the wire
(organizerId, dateTime, volunteersNeeded, ...).
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


def as_aware(value: datetime) -> datetime:
    """Naive timestamps are treated as UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Position(CamelModel):
    latitude: float
    longitude: float


class Event(CamelModel):
    """A community event as returned by GET /events."""
    id: str
    name: str
    description: str = ""
    organizer_id: str
    date_time: datetime           # ISO-8601, always tz-aware after validation
    image_url: str | None = None
    position: Position
    volunteers_needed: int
    volunteers_ids: list[str] = []

    @field_validator("date_time")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return as_aware(value)

    @field_validator("volunteers_ids", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    def is_upcoming(self, now: datetime) -> bool:
        """Not earlier than `now`."""
        return self.date_time >= now

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class EventCreate(CamelModel):
    """Body for POST /events (everything but the id)."""
    name: str
    description: str
    organizer_id: str
    date_time: datetime
    image_url: str
    position: Position
    volunteers_needed: int
    volunteers_ids: list[str] = []

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
