"""
Tests for the handshake itself, without the HTTP layer.

Run with: pytest tests/test_auth_service.py
"""
import threading
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from bruce.auth import service as auth_service
from bruce.auth.models import Credential
from bruce.auth.service import AuthHandshake, begin_login
from bruce.auth.spotify import SpotifyClient
from bruce.result import Err, ErrorKind, Ok

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def handshake(session, fake_spotify):
    spotify = SpotifyClient(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://localhost:4000/callback",
        http=httpx.AsyncClient(transport=fake_spotify.transport()),
    )
    return AuthHandshake(spotify=spotify, session=session, clock=lambda: FIXED_NOW)


@pytest.mark.asyncio
async def test_complete_login_stores_expiry_from_call_time(handshake, session):
    result = await handshake.complete_login("good-code")

    assert result == Ok("/index.html?token=access-123")
    stored = auth_service.credential_crud.get_by_spotify_id(session, spotify_id="spotify-user-1")
    assert stored.access_token == "access-123"
    expected = FIXED_NOW + timedelta(seconds=3600)
    assert stored.expires_at.replace(tzinfo=None) == expected.replace(tzinfo=None)


@pytest.mark.asyncio
async def test_complete_login_with_real_clock_is_within_tolerance(session, fake_spotify):
    spotify = SpotifyClient(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://localhost:4000/callback",
        http=httpx.AsyncClient(transport=fake_spotify.transport()),
    )
    handshake = AuthHandshake(spotify=spotify, session=session)

    before = datetime.now(timezone.utc).replace(tzinfo=None)
    await handshake.complete_login("good-code")
    after = datetime.now(timezone.utc).replace(tzinfo=None)

    stored = session.exec(select(Credential)).one()
    expires_at = stored.expires_at.replace(tzinfo=None)
    assert before + timedelta(seconds=3600) <= expires_at <= after + timedelta(seconds=3600)


def test_begin_login_is_the_authorize_url(handshake):
    assert begin_login(handshake.spotify) == handshake.spotify.authorize_url()


@pytest.mark.asyncio
async def test_rejected_code_is_upstream_status_error(handshake, session, fake_spotify):
    fake_spotify.token = (400, {"error": "invalid_grant"})

    result = await handshake.complete_login("bad-code")

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.UPSTREAM_STATUS
    assert session.exec(select(Credential)).all() == []


@pytest.mark.asyncio
async def test_network_failure_is_network_error(handshake, fake_spotify):
    fake_spotify.error = httpx.ConnectError("connection refused")

    result = await handshake.complete_login("good-code")

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.NETWORK


@pytest.mark.asyncio
async def test_profile_without_id_is_malformed(handshake, session, fake_spotify):
    fake_spotify.profile = (200, {"display_name": "No Id"})

    result = await handshake.complete_login("good-code")

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.MALFORMED_PAYLOAD
    assert session.exec(select(Credential)).all() == []


@pytest.mark.asyncio
async def test_missing_code_is_invalid_request(handshake, fake_spotify):
    result = await handshake.complete_login(None)

    assert result == Err(ErrorKind.INVALID_REQUEST, "missing authorization code")
    assert fake_spotify.requests == []


@pytest.mark.asyncio
async def test_store_failure_is_store_error(handshake, monkeypatch):
    def broken_upsert(*args, **kwargs):
        raise OperationalError("INSERT INTO credentials", {}, Exception("database is locked"))

    monkeypatch.setattr(auth_service.credential_crud, "upsert_tokens", broken_upsert)

    result = await handshake.complete_login("good-code")

    assert isinstance(result, Err)
    assert result.kind == ErrorKind.STORE


def test_simultaneous_logins_for_one_user_keep_a_single_credential(file_engine, monkeypatch):
    crud = auth_service.credential_crud
    both_written = threading.Barrier(2, timeout=10)
    get_by = crud.get_by

    def get_by_together(session, **kwargs):
        both_written.wait()
        return get_by(session, **kwargs)

    monkeypatch.setattr(crud, "get_by", get_by_together)
    errors = []

    def login(access_token):
        try:
            with Session(file_engine) as session:
                crud.upsert_tokens(
                    session,
                    spotify_id="spotify-user-1",
                    access_token=access_token,
                    refresh_token=None,
                    expires_at=FIXED_NOW,
                )
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=login, args=(token,)) for token in ("tab-1", "tab-2")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    with Session(file_engine) as session:
        credentials = session.exec(select(Credential)).all()
    assert len(credentials) == 1
    assert credentials[0].access_token in ("tab-1", "tab-2")
