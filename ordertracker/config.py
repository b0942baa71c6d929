"""
Runtime configuration for the Order Tracker service.

Values come from environment variables (optionally loaded from a `.env`
file at startup). Every integration is optional: a missing key simply
turns the matching feature off.
"""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_MODEL = os.getenv("ORDER_TRACKER_MODEL", "gemini-2.5-flash")

# Project root (where .env and the data/ directory live)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Settings(BaseModel):
    """Service settings resolved from the environment."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Bind port")

    # Carrier tracking (AfterShip)
    aftership_api_key: str | None = Field(default=None)

    # AI chat (Gemini through Google ADK)
    google_api_key: str | None = Field(default=None)
    use_vertex_ai: bool = Field(default=False)
    model: str = Field(default=DEFAULT_MODEL)

    # Email (SMTP relay)
    smtp_host: str | None = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_user: str | None = Field(default=None)
    smtp_password: str | None = Field(default=None)
    smtp_from_email: str | None = Field(default=None)
    smtp_timeout: int = Field(default=10, description="Seconds before a send is abandoned")

    # Gmail scan
    gmail_client_id: str | None = Field(default=None)
    gmail_client_secret: str | None = Field(default=None)
    gmail_refresh_token: str | None = Field(default=None)

    # Geocoding
    geocoder_user_agent: str = Field(default="order-tracker-demo")
    geocode_cache_file: Path = Field(
        default=PROJECT_ROOT / "data" / "geocode-cache.json"
    )

    # Persistence
    subscriptions_file: Path = Field(
        default=PROJECT_ROOT / "data" / "subscriptions.json"
    )

    # UI / live updates
    stream_interval_seconds: int = Field(default=10, ge=1)
    map_mode: str = Field(default="leaflet")
    gmaps_api_key: str | None = Field(default=None)

    # Optional guard for demo admin endpoints
    admin_token: str | None = Field(default=None)

    @property
    def ai_enabled(self) -> bool:
        return bool(self.google_api_key) or self.use_vertex_ai

    @property
    def carrier_enabled(self) -> bool:
        return bool(self.aftership_api_key)

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.smtp_from_email)

    @property
    def gmail_enabled(self) -> bool:
        return bool(
            self.gmail_client_id
            and self.gmail_client_secret
            and self.gmail_refresh_token
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        data: dict = {
            "host": os.getenv("HOST", "0.0.0.0"),
            "port": _env_int("PORT", 3000),
            "aftership_api_key": os.getenv("AFTERSHIP_API_KEY") or None,
            "google_api_key": os.getenv("GOOGLE_API_KEY") or None,
            "use_vertex_ai": _env_flag("GOOGLE_GENAI_USE_VERTEXAI"),
            "model": os.getenv("ORDER_TRACKER_MODEL", DEFAULT_MODEL),
            "smtp_host": os.getenv("SMTP_HOST") or None,
            "smtp_port": _env_int("SMTP_PORT", 587),
            "smtp_user": os.getenv("SMTP_USER") or None,
            "smtp_password": os.getenv("SMTP_PASSWORD") or None,
            "smtp_timeout": _env_int("SMTP_TIMEOUT", 10),
            "gmail_client_id": os.getenv("GMAIL_CLIENT_ID") or None,
            "gmail_client_secret": os.getenv("GMAIL_CLIENT_SECRET") or None,
            "gmail_refresh_token": os.getenv("GMAIL_REFRESH_TOKEN") or None,
            "geocoder_user_agent": os.getenv(
                "GEOCODER_USER_AGENT", "order-tracker-demo"
            ),
            "stream_interval_seconds": _env_int("STREAM_INTERVAL_SECONDS", 10),
            "map_mode": os.getenv("MAP_MODE", "leaflet"),
            "gmaps_api_key": os.getenv("GMAPS_API_KEY") or None,
            "admin_token": os.getenv("ADMIN_TOKEN") or None,
        }
        # Sender defaults to the SMTP login, like most relays expect
        data["smtp_from_email"] = os.getenv("SMTP_FROM_EMAIL") or data["smtp_user"]

        if os.getenv("GEOCODE_CACHE_FILE"):
            data["geocode_cache_file"] = Path(os.environ["GEOCODE_CACHE_FILE"])
        if os.getenv("SUBSCRIPTIONS_FILE"):
            data["subscriptions_file"] = Path(os.environ["SUBSCRIPTIONS_FILE"])

        return cls(**data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings (read once)."""
    return Settings.from_env()
