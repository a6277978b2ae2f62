"""
Drafts feature: pure validation of an event draft before submission.
"""

import math
from datetime import datetime, timezone

from volunteer_events.config import get_settings
from volunteer_events.features.drafts.schemas import EventDraft, ValidationResult
from volunteer_events.features.events.schemas import as_aware


def parse_volunteers_needed(raw: str) -> int | None:
    """Parse the headcount input. Returns None unless it is a positive integer.

    "4" and "4.0" are accepted; "0", "-3", "2.5", "abc" and "" are not.
    """
    text = (raw or "").strip()
    # int()/float() accept digit separators like "1_000"; the form does not
    if not text or "_" in text:
        return None
    try:
        return _positive(int(text))
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return _positive(int(number))


def _positive(value: int) -> int | None:
    return value if value > 0 else None


def validate(draft: EventDraft, now: datetime | None = None) -> ValidationResult:
    """Check every field of the draft; valid only if all rules pass.

    The date rule is evaluated against `now` (default: current time), so it
    must be re-run at save time, not only when the date is picked.
    """
    now = as_aware(now or datetime.now(timezone.utc))
    max_len = get_settings().DESCRIPTION_MAX_LENGTH
    errors: dict[str, str] = {}

    if not draft.name:
        errors["name"] = "Event name is required."

    if len(draft.description) > max_len:
        errors["description"] = f"Description must be at most {max_len} characters."

    if parse_volunteers_needed(draft.volunteers_needed) is None:
        errors["volunteers_needed"] = "Volunteers needed must be a positive whole number."

    if draft.date_time is None:
        errors["date_time"] = "Pick a date and time."
    elif as_aware(draft.date_time) < now:
        errors["date_time"] = "Date cannot be in the past."

    if draft.position is None:
        errors["position"] = "No position selected."

    if not draft.image_url:
        errors["image_url"] = "Upload a picture for the event."

    return ValidationResult(valid=not errors, field_errors=errors)
