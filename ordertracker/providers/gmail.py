"""
Read-only Gmail access for the shipping-email scan.

An access token is minted from a long-lived refresh token (installed-app
OAuth flow done out of band) and used against the Gmail REST API.
"""

import base64
import logging
from dataclasses import dataclass

import google.auth.exceptions
import requests
from google.auth.transport.requests import AuthorizedSession, Request
from google.oauth2.credentials import Credentials

from ordertracker.providers.base import ProviderNotConfigured, ProviderUnavailable

logger = logging.getLogger(__name__)

GMAIL_API_URL = "https://gmail.googleapis.com/gmail/v1/users/me"
TOKEN_URI = "https://oauth2.googleapis.com/token"
GMAIL_SCOPES = ["https://www.googleapis.com/auth/gmail.readonly"]

DEFAULT_QUERY = (
    'newer_than:14d (tracking OR shipped OR dispatched OR "out for delivery" OR AWB)'
)


@dataclass
class GmailMessage:
    """Decoded Gmail message (headers we use plus text body)."""

    id: str
    subject: str | None
    sender: str | None
    body: str


def _decode_part_data(data: str) -> str:
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8", errors="replace")


def extract_body(payload: dict) -> str:
    """Concatenate the text/plain and text/html parts of a message payload."""
    chunks: list[str] = []

    def walk(part: dict):
        mime_type = part.get("mimeType", "")
        data = (part.get("body") or {}).get("data")
        if data and mime_type in ("text/plain", "text/html"):
            chunks.append(_decode_part_data(data))
        for child in part.get("parts") or []:
            walk(child)

    walk(payload)
    return "\n".join(chunks)


def _header(payload: dict, name: str) -> str | None:
    for header in payload.get("headers") or []:
        if header.get("name", "").lower() == name.lower():
            return header.get("value")
    return None


class GmailScanner:
    """Lists and reads recent messages matching a Gmail search query."""

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        refresh_token: str | None,
        query: str = DEFAULT_QUERY,
        max_results: int = 10,
        timeout: int = 15,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.query = query
        self.max_results = max_results
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret and self.refresh_token)

    def _session(self) -> AuthorizedSession:
        if not self.enabled:
            raise ProviderNotConfigured(
                "Gmail scan not configured (set GMAIL_CLIENT_ID, GMAIL_CLIENT_SECRET, GMAIL_REFRESH_TOKEN)"
            )

        credentials = Credentials(
            token=None,
            refresh_token=self.refresh_token,
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_uri=TOKEN_URI,
            scopes=GMAIL_SCOPES,
        )
        try:
            credentials.refresh(Request())
        except google.auth.exceptions.RefreshError as e:
            logger.warning("Gmail token refresh failed: %s", e)
            raise ProviderUnavailable("Gmail token refresh failed") from e

        return AuthorizedSession(credentials)

    def recent_messages(self) -> list[GmailMessage]:
        """
        Fetch the newest messages matching the query.

        Raises:
            ProviderNotConfigured: OAuth client or refresh token missing
            ProviderUnavailable: Token refresh or Gmail API failure
        """
        session = self._session()

        try:
            listing = session.get(
                f"{GMAIL_API_URL}/messages",
                params={"q": self.query, "maxResults": self.max_results},
                timeout=self.timeout,
            )
            listing.raise_for_status()
            message_ids = [m["id"] for m in listing.json().get("messages", [])]

            messages = []
            for message_id in message_ids:
                response = session.get(
                    f"{GMAIL_API_URL}/messages/{message_id}",
                    params={"format": "full"},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                payload = response.json().get("payload") or {}
                messages.append(
                    GmailMessage(
                        id=message_id,
                        subject=_header(payload, "Subject"),
                        sender=_header(payload, "From"),
                        body=extract_body(payload),
                    )
                )
        except requests.RequestException as e:
            logger.warning("Gmail API request failed: %s", e)
            raise ProviderUnavailable("Gmail API request failed") from e
        except ValueError as e:
            raise ProviderUnavailable("Failed to parse Gmail response") from e

        logger.info("Fetched %d Gmail messages", len(messages))
        return messages
