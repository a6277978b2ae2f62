"""
Client configuration using Pydantic Settings.
All config is loaded from environment variables / .env file.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Client settings loaded from .env file."""

    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "volunteer-events"
    APP_VERSION: str = "0.1.0"

    # ── Event API ────────────────────────────────────────
    API_BASE_URL: str = "http://192.168.1.89:3333"  # local json server address
    API_TIMEOUT: int = 15  # HTTP timeout in seconds

    # ── Connectivity ─────────────────────────────────────
    CONNECTIVITY_CHECK_URL: str = ""  # empty = probe API_BASE_URL
    CONNECTIVITY_TIMEOUT: float = 3.0

    # ── Image Hosting ────────────────────────────────────
    IMAGE_HOST_URL: str = "https://api.imgbb.com/1/upload"
    IMAGE_HOST_API_KEY: str = ""
    IMAGE_HOST_TIMEOUT: int = 60

    # ── Local Storage ────────────────────────────────────
    STORE_PATH: str = ".volunteer_events_store.json"
    EVENTS_CACHE_KEY: str = "@events_cache"
    SESSION_USER_KEY: str = "userInfo"
    SESSION_TOKEN_KEY: str = "accessToken"

    # ── Drafts ───────────────────────────────────────────
    DESCRIPTION_MAX_LENGTH: int = 300

    # ── Organizer profiles ───────────────────────────────
    ORGANIZER_CACHE_SIZE: int = 128
    ORGANIZER_CACHE_TTL_SECONDS: int = 600

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (singleton)."""
    return Settings()
