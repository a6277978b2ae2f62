"""
Users feature: organizer profile models.
"""

import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PlainName(BaseModel):
    """Name stored as a single string, e.g. "Ada Lovelace"."""
    kind: Literal["plain"] = "plain"
    text: str = ""


class StructuredName(BaseModel):
    """Name stored as {first, last}."""
    kind: Literal["structured"] = "structured"
    first: str | None = None
    last: str | None = None


PersonName = Annotated[Union[PlainName, StructuredName], Field(discriminator="kind")]


class User(BaseModel):
    """Response model for GET /users/{id}."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email: str = ""
    mobile: str | None = None
    name: PersonName | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _tag_name(cls, value):
        # The API sends either a bare string or an untagged {first, last} object
        if value is None or isinstance(value, (PlainName, StructuredName)):
            return value
        if isinstance(value, str):
            return {"kind": "plain", "text": value}
        if isinstance(value, dict) and "kind" not in value:
            return {"kind": "structured", **value}
        return value


def display_name(user: User | None) -> str:
    """Resolve the name shown for an organizer: name -> email -> "Unknown"."""
    if user is None:
        return "Unknown"
    fallback = user.email or "Unknown"
    name = user.name
    if isinstance(name, PlainName):
        return name.text or fallback
    if isinstance(name, StructuredName):
        full = f"{name.first or ''} {name.last or ''}".strip()
        return full or fallback
    return fallback


def normalize_phone(mobile: str | None) -> str:
    """Keep only digits and '+' ("(555) 010-2030" -> "5550102030")."""
    if not mobile:
        return ""
    return re.sub(r"[^\d+]", "", mobile)
