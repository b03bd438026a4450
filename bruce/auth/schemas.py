from typing import Optional

from pydantic import BaseModel, ConfigDict


class TokenGrant(BaseModel):
    """Token endpoint response for the authorization-code grant."""
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: int
    token_type: str = "Bearer"
    scope: Optional[str] = None


class SpotifyProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
