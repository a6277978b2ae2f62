"""
Drafts feature: the event form's in-progress state.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from volunteer_events.features.events.schemas import Position


class EventDraft(BaseModel):
    """Every editable field of a new event, exactly as typed/picked."""
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    description: str = ""
    volunteers_needed: str = ""   # raw text input, parsed by the validator
    date_time: datetime | None = None
    position: Position | None = None
    image_url: str | None = None


class ValidationResult(BaseModel):
    valid: bool
    field_errors: dict[str, str] = {}
