import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from urllib.parse import urlencode

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from bruce.auth.crud_credential import credential as credential_crud
from bruce.auth.spotify import SpotifyClient
from bruce.base import utcnow
from bruce.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)


def begin_login(spotify: SpotifyClient) -> str:
    """Where to send the browser to start a login. Reads configuration only."""
    return spotify.authorize_url()


class AuthHandshake:
    """
    Spotify authorization-code login.

    ``complete_login`` runs token exchange, profile fetch, expiry computation
    and the credential upsert in that order. The first failing step ends the
    handshake; nothing is written before the upsert, so a failure leaves no
    partial state behind.

    The resulting redirect target carries the raw access token as a query
    parameter, which exposes it to browser history and referrer headers.
    """

    def __init__(
        self,
        *,
        spotify: SpotifyClient,
        session: Session,
        post_login_redirect: str = "/index.html",
        clock: Callable[[], datetime] = utcnow,
    ):
        self.spotify = spotify
        self.session = session
        self.post_login_redirect = post_login_redirect
        self.clock = clock

    async def complete_login(self, code: Optional[str]) -> Result[str]:
        if not code:
            return Err(ErrorKind.INVALID_REQUEST, "missing authorization code")

        grant = await self.spotify.exchange_code(code)
        if isinstance(grant, Err):
            return grant
        tokens = grant.value

        profile = await self.spotify.fetch_profile(tokens.access_token)
        if isinstance(profile, Err):
            return profile

        expires_at = self.clock() + timedelta(seconds=tokens.expires_in)

        try:
            credential_crud.upsert_tokens(
                self.session,
                spotify_id=profile.value.id,
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
                expires_at=expires_at,
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            return Err(ErrorKind.STORE, f"credential upsert failed: {e}")

        logger.info(f"Stored credential for Spotify user {profile.value.id}")
        query = urlencode({"token": tokens.access_token})
        return Ok(f"{self.post_login_redirect}?{query}")
