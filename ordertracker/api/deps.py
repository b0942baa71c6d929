"""
FastAPI dependencies.

Each collaborator is built once per process from the settings. Tests swap
them with ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from ordertracker.assistant import ASSISTANT_INSTRUCTION, ChatAssistant
from ordertracker.config import Settings, get_settings
from ordertracker.providers.aftership import AfterShipProvider
from ordertracker.providers.base import (
    CompletionProvider,
    Geocoder,
    MailSender,
    TrackingProvider,
)
from ordertracker.providers.geocoding import GeocodeCache, NominatimGeocoder
from ordertracker.providers.gmail import GmailScanner
from ordertracker.providers.mail import SmtpMailSender
from ordertracker.store import (
    FileSubscriptionStore,
    InMemoryOrderStore,
    OrderStore,
    SubscriptionStore,
)
from ordertracker.tracking.lookup import TrackingLookup


@lru_cache(maxsize=1)
def get_order_store() -> OrderStore:
    return InMemoryOrderStore.with_demo_orders()


@lru_cache(maxsize=1)
def get_subscription_store() -> SubscriptionStore:
    return FileSubscriptionStore(get_settings().subscriptions_file)


@lru_cache(maxsize=1)
def get_tracking_provider() -> TrackingProvider | None:
    """AfterShip client, or None when no API key is set."""
    settings = get_settings()
    if not settings.carrier_enabled:
        return None
    return AfterShipProvider(api_key=settings.aftership_api_key)


@lru_cache(maxsize=1)
def get_geocoder() -> Geocoder:
    settings = get_settings()
    return NominatimGeocoder(
        cache=GeocodeCache(settings.geocode_cache_file),
        user_agent=settings.geocoder_user_agent,
    )


@lru_cache(maxsize=1)
def get_completion_provider() -> CompletionProvider | None:
    """Gemini agent, or None when no Google credentials are configured."""
    settings = get_settings()
    if not settings.ai_enabled:
        return None

    # ADK pulls in the google-genai client; only import it when AI is on
    from ordertracker.providers.gemini import GeminiCompletionProvider

    return GeminiCompletionProvider(instruction=ASSISTANT_INSTRUCTION, model=settings.model)


@lru_cache(maxsize=1)
def get_mail_sender() -> MailSender | None:
    """SMTP sender, or None when no relay is configured."""
    settings = get_settings()
    if not settings.email_enabled:
        return None
    return SmtpMailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        from_email=settings.smtp_from_email,
        timeout=settings.smtp_timeout,
    )


@lru_cache(maxsize=1)
def get_gmail_scanner() -> GmailScanner:
    settings = get_settings()
    return GmailScanner(
        client_id=settings.gmail_client_id,
        client_secret=settings.gmail_client_secret,
        refresh_token=settings.gmail_refresh_token,
    )


def get_tracking_lookup(
    orders: OrderStore = Depends(get_order_store),
    provider: TrackingProvider | None = Depends(get_tracking_provider),
    geocoder: Geocoder = Depends(get_geocoder),
) -> TrackingLookup:
    return TrackingLookup(orders=orders, provider=provider, geocoder=geocoder)


def get_assistant(
    lookup: TrackingLookup = Depends(get_tracking_lookup),
    completion: CompletionProvider | None = Depends(get_completion_provider),
) -> ChatAssistant:
    return ChatAssistant(lookup=lookup, completion=completion)


async def require_admin(
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Guard for demo admin endpoints.

    Open when ADMIN_TOKEN is unset; otherwise the X-Admin-Token header must match.

    Raises:
        HTTPException: 401 if the token is missing or wrong
    """
    if not settings.admin_token:
        return
    if x_admin_token != settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Admin-Token header is missing or invalid",
        )
