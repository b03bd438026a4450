"""
Correlation ids for log lines.

Every HTTP request and every ``/ws`` connection gets an id, taken from the
client's ``X-Request-ID`` (or ``X-Correlation-ID``) header when present.
The id lives in a contextvar that ``CompactFilter`` prints as a prefix.
Relay tasks copy the context of the connection that created them, so an
answer logged after the socket closed still carries the connection's id.
"""

import uuid
from contextvars import ContextVar, Token
from typing import Optional

from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def generate_request_id() -> str:
    return str(uuid.uuid4())


def request_id_from(headers: Headers) -> str:
    """The client's id if it sent one, otherwise a fresh one."""
    return (
        headers.get(REQUEST_ID_HEADER)
        or headers.get(CORRELATION_ID_HEADER)
        or generate_request_id()
    )


def bind_request_id(headers: Headers) -> tuple[str, Token]:
    """Set the id for the current context; reset with the returned token."""
    request_id = request_id_from(headers)
    return request_id, request_id_var.set(request_id)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Binds an id to every HTTP request and echoes it in ``X-Request-ID``.

    WebSocket scopes pass through; the relay endpoint binds its own.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id, token = bind_request_id(request.headers)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)
