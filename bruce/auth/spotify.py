"""
Spotify Accounts/Web API client for the authorization-code flow.

Each method makes exactly one outbound request and returns a ``Result``.
Nothing is retried.
"""
import base64
import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from bruce.auth.schemas import SpotifyProfile, TokenGrant
from bruce.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)

SPOTIFY_SCOPES = (
    "user-read-private",
    "user-read-email",
    "streaming",
    "user-read-playback-state",
    "user-modify-playback-state",
    "playlist-read-private",
    "playlist-modify-private",
)


class SpotifyClient:
    def __init__(
        self,
        *,
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: str,
        http: httpx.AsyncClient,
        accounts_url: str = "https://accounts.spotify.com",
        api_url: str = "https://api.spotify.com/v1",
    ):
        self.client_id = client_id or ""
        self.client_secret = client_secret or ""
        self.redirect_uri = redirect_uri
        self.http = http
        self.accounts_url = accounts_url.rstrip("/")
        self.api_url = api_url.rstrip("/")

    @property
    def token_url(self) -> str:
        return f"{self.accounts_url}/api/token"

    @property
    def profile_url(self) -> str:
        return f"{self.api_url}/me"

    def authorize_url(self) -> str:
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "scope": " ".join(SPOTIFY_SCOPES),
            "redirect_uri": self.redirect_uri,
        }
        return f"{self.accounts_url}/authorize?{urlencode(params)}"

    def basic_auth_header(self) -> str:
        raw = f"{self.client_id}:{self.client_secret}".encode()
        return f"Basic {base64.b64encode(raw).decode()}"

    async def exchange_code(self, code: str) -> Result[TokenGrant]:
        """Exchange an authorization code for an access/refresh token pair."""
        try:
            response = await self.http.post(
                self.token_url,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                },
                headers={
                    "Authorization": self.basic_auth_header(),
                    "Content-Type": "application/x-www-form-urlencoded",
                },
            )
        except httpx.HTTPError as e:
            return Err(ErrorKind.NETWORK, f"token exchange failed: {e}")

        return _parse(response, TokenGrant, "token exchange")

    async def fetch_profile(self, access_token: str) -> Result[SpotifyProfile]:
        """Fetch the profile of the user owning ``access_token``."""
        try:
            response = await self.http.get(
                self.profile_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            return Err(ErrorKind.NETWORK, f"profile fetch failed: {e}")

        return _parse(response, SpotifyProfile, "profile fetch")

    async def aclose(self) -> None:
        await self.http.aclose()


def _parse(response: httpx.Response, schema, step: str) -> Result:
    if not response.is_success:
        return Err(
            ErrorKind.UPSTREAM_STATUS,
            f"{step} returned {response.status_code}: {response.text[:200]}",
        )
    try:
        return Ok(schema.model_validate(response.json()))
    except (ValueError, ValidationError) as e:
        return Err(ErrorKind.MALFORMED_PAYLOAD, f"{step} payload invalid: {e}")
