"""
Session: who is logged in on this device.

The session is an explicit object handed to the repository and coordinator at
call time. SessionManager owns its lifecycle against the key-value store:
login persists it, restore reads it back, logout clears it.
"""

import json
import logging

from pydantic import BaseModel, ConfigDict, ValidationError

from volunteer_events.config import get_settings
from volunteer_events.core.storage import KeyValueStore

logger = logging.getLogger(__name__)


class SessionUser(BaseModel):
    """The `userInfo` blob saved at login ({id, email, ...})."""
    model_config = ConfigDict(extra="allow")

    id: str
    email: str | None = None


class Session(BaseModel):
    user: SessionUser | None = None
    access_token: str | None = None

    @property
    def user_id(self) -> str | None:
        if self.user is None or not self.user.id:
            return None
        return self.user.id

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()

    @classmethod
    def for_user(cls, user_id: str, email: str | None = None) -> "Session":
        return cls(user=SessionUser(id=user_id, email=email))


class SessionManager:
    """Persists and restores the Session in the key-value store."""

    def __init__(self, store: KeyValueStore):
        settings = get_settings()
        self.store = store
        self.user_key = settings.SESSION_USER_KEY
        self.token_key = settings.SESSION_TOKEN_KEY

    async def login(self, user_info: dict, access_token: str | None = None) -> Session:
        """Save the user blob (and token, if any) and return the live session."""
        user = SessionUser.model_validate(user_info)
        await self.store.set(self.user_key, json.dumps(user.model_dump(exclude_none=True)))
        if access_token:
            await self.store.set(self.token_key, access_token)
        logger.info(f"Session started for user {user.id}")
        return Session(user=user, access_token=access_token)

    async def restore(self) -> Session:
        """Read the persisted session. Missing or unreadable data = anonymous."""
        raw = await self.store.get(self.user_key)
        if not raw:
            return Session.anonymous()
        try:
            user = SessionUser.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable session blob: {e}")
            return Session.anonymous()
        token = await self.store.get(self.token_key)
        return Session(user=user, access_token=token)

    async def logout(self) -> Session:
        await self.store.remove([self.user_key, self.token_key])
        logger.info("Session cleared")
        return Session.anonymous()
