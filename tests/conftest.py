import asyncio
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from bruce.config import Settings
from bruce.context import build_context
from bruce.database import create_db_engine, init_db
from bruce.main import create_app
from bruce.utils.request_id import get_request_id

CLIENT_ID = "client-id"
CLIENT_SECRET = "client-secret"
REDIRECT_URI = "http://localhost:4000/callback"

TOKEN_PAYLOAD = {
    "access_token": "access-123",
    "token_type": "Bearer",
    "scope": "user-read-private user-read-email",
    "expires_in": 3600,
    "refresh_token": "refresh-456",
}
PROFILE_PAYLOAD = {"id": "spotify-user-1", "display_name": "Bruce", "email": "bruce@example.com"}


class FakeSpotify:
    """Mock transport handler standing in for the Spotify accounts and web APIs."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.token: Tuple[int, Any] = (200, TOKEN_PAYLOAD)
        self.profile: Tuple[int, Any] = (200, PROFILE_PAYLOAD)
        self.error: Optional[Exception] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if request.url.path == "/api/token":
            status, body = self.token
        elif request.url.path == "/v1/me":
            status, body = self.profile
        else:
            return httpx.Response(404)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]


class FakeCompletions:
    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None
        self.choices: Optional[list] = None
        self.delays: Dict[str, float] = {}
        self.finished: List[str] = []
        self.request_ids: List[Optional[str]] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        self.request_ids.append(get_request_id())
        prompt = kwargs["messages"][-1]["content"]
        if prompt in self.delays:
            await asyncio.sleep(self.delays[prompt])
        self.finished.append(prompt)
        if self.error is not None:
            raise self.error
        if self.choices is not None:
            return SimpleNamespace(choices=self.choices)
        message = SimpleNamespace(content=f"Answer to {prompt}")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """Just enough of ``AsyncOpenAI`` for the completion client."""

    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)
        self.closed = False

    async def close(self):
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        SPOTIFY_CLIENT_ID=CLIENT_ID,
        SPOTIFY_CLIENT_SECRET=CLIENT_SECRET,
        REDIRECT_URI=REDIRECT_URI,
        OPENAI_API_KEY=None,
        POSTGRES_URI=None,
        BACKEND_CORS_ORIGINS="*",
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """SQLite on disk, so concurrent sessions use separate connections."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'bruce.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def fake_spotify() -> FakeSpotify:
    return FakeSpotify()


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def app(settings, engine, fake_spotify, fake_openai):
    context = build_context(
        settings,
        engine=engine,
        spotify_transport=fake_spotify.transport(),
        openai_client=fake_openai,
    )
    return create_app(context=context)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
