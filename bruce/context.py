"""
Application context: the collaborators every handler needs.

Built once by ``create_app`` and stored on ``app.state.context``. Handlers
reach it through the dependencies in ``bruce.deps``; nothing here is a
module-level singleton.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from openai import AsyncOpenAI
from sqlalchemy.engine import Engine

from bruce.ai.service import CompletionClient, CompletionRelay
from bruce.auth.spotify import SpotifyClient
from bruce.config import Settings
from bruce.database import create_db_engine

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    engine: Engine
    spotify: SpotifyClient
    relay: CompletionRelay

    async def aclose(self) -> None:
        await self.spotify.aclose()
        await self.relay.aclose()


def build_context(
    settings: Settings,
    *,
    engine: Optional[Engine] = None,
    spotify_transport: Optional[httpx.AsyncBaseTransport] = None,
    openai_client: Optional[AsyncOpenAI] = None,
) -> AppContext:
    """Construct all collaborators from settings.

    ``engine``, ``spotify_transport`` and ``openai_client`` replace the
    defaults built from settings.
    """
    if engine is None:
        engine = create_db_engine(settings.SQLALCHEMY_DATABASE_URI)

    spotify = SpotifyClient(
        client_id=settings.SPOTIFY_CLIENT_ID,
        client_secret=settings.SPOTIFY_CLIENT_SECRET,
        redirect_uri=settings.REDIRECT_URI,
        accounts_url=settings.SPOTIFY_ACCOUNTS_URL,
        api_url=settings.SPOTIFY_API_URL,
        http=httpx.AsyncClient(
            timeout=settings.OUTBOUND_TIMEOUT_SECONDS, transport=spotify_transport
        ),
    )

    if openai_client is None and settings.openai_configured:
        openai_client = AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.OUTBOUND_TIMEOUT_SECONDS,
            max_retries=0,
        )

    completion = None
    if openai_client is not None:
        completion = CompletionClient(openai_client, model=settings.COMPLETION_MODEL)
    else:
        logger.warning("OPENAI_API_KEY is not set, every question will get the error reply")

    return AppContext(
        settings=settings,
        engine=engine,
        spotify=spotify,
        relay=CompletionRelay(completion),
    )
