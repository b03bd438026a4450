"""
Spotify login routes.
"""
import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, RedirectResponse

from bruce.auth.service import begin_login
from bruce.deps import AuthHandshakeDep, ContextDep
from bruce.result import Err, ErrorKind

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/login")
def login(context: ContextDep):
    """Redirect the browser to the Spotify consent screen."""
    return RedirectResponse(url=begin_login(context.spotify), status_code=302)


@router.get("/callback")
async def callback(
    handshake: AuthHandshakeDep,
    code: Optional[str] = None,
    error: Optional[str] = None,
):
    """Finish the authorization-code flow and hand the access token to the UI."""
    if error:
        result = Err(ErrorKind.INVALID_REQUEST, f"provider returned error={error}")
    else:
        result = await handshake.complete_login(code)

    if isinstance(result, Err):
        logger.error(f"Spotify login failed: {result}")
        return PlainTextResponse("Authentication failed", status_code=500)

    return RedirectResponse(url=result.value, status_code=302)
