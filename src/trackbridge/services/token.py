"""Spotify access token lifecycle (client credentials flow)."""

from __future__ import annotations

import base64
import logging
import time
from dataclasses import dataclass, field

import httpx

from trackbridge.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"


@dataclass(frozen=True)
class AccessToken:
    """Bearer token with its expiry.

    Attributes:
        token: Access token string.
        token_type: Authorization scheme (usually "Bearer").
        expires_in: Lifetime in seconds.
        created_at: Monotonic timestamp of issue.
    """

    token: str
    token_type: str
    expires_in: float
    created_at: float = field(default_factory=time.monotonic)

    @property
    def is_expired(self) -> bool:
        """Whether the token lifetime has elapsed."""
        return time.monotonic() > self.created_at + self.expires_in

    @property
    def authorization(self) -> str:
        """Value for the Authorization header."""
        return f"{self.token_type} {self.token}"


class SpotifyTokenManager:
    """Obtains and refreshes access tokens.

    Refresh is check-then-refresh without locking: concurrent refreshes are
    idempotent and the last one wins. The stored token is shared by all
    callers of the same manager.
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        http: httpx.AsyncClient,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._http = http
        self._token: AccessToken | None = None

    @property
    def enabled(self) -> bool:
        """Whether credentials are configured."""
        return bool(self._client_id and self._client_secret)

    @property
    def token(self) -> AccessToken | None:
        """Current token, possibly expired."""
        return self._token

    @property
    def authorization_key(self) -> str | None:
        """Base64 ``id:secret`` for HTTP Basic auth, or None without credentials."""
        if not self.enabled:
            return None
        raw = f"{self._client_id}:{self._client_secret}".encode()
        return base64.b64encode(raw).decode()

    def is_token_expired(self) -> bool:
        """Whether a new token is needed."""
        return self._token is None or self._token.is_expired

    async def request_token(self) -> AccessToken:
        """Request a new token and store it.

        Raises:
            AuthenticationError: If credentials are missing or the token
                endpoint fails.
        """
        key = self.authorization_key
        if key is None:
            raise AuthenticationError("Spotify client credentials are not configured")

        logger.debug("Requesting Spotify access token")
        try:
            response = await self._http.post(
                TOKEN_URL,
                data={"grant_type": "client_credentials"},
                headers={"Authorization": f"Basic {key}"},
            )
            response.raise_for_status()
            body = response.json()
            token = AccessToken(
                token=body["access_token"],
                token_type=body.get("token_type", "Bearer"),
                expires_in=float(body.get("expires_in", 3600)),
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(f"Failed to obtain access token: {e}") from e

        self._token = token
        logger.debug("Got Spotify access token (expires in %.0fs)", token.expires_in)
        return token
