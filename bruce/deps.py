from typing import Annotated, Generator

from fastapi import Depends
from sqlmodel import Session
from starlette.requests import HTTPConnection

from bruce.auth.service import AuthHandshake
from bruce.context import AppContext


def get_context(conn: HTTPConnection) -> AppContext:
    return conn.app.state.context


ContextDep = Annotated[AppContext, Depends(get_context)]


def get_db(context: ContextDep) -> Generator[Session, None, None]:
    with Session(context.engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]


def get_auth_handshake(context: ContextDep, session: SessionDep) -> AuthHandshake:
    return AuthHandshake(
        spotify=context.spotify,
        session=session,
        post_login_redirect=context.settings.POST_LOGIN_REDIRECT,
    )


AuthHandshakeDep = Annotated[AuthHandshake, Depends(get_auth_handshake)]
