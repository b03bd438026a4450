"""
Credential database model for Spotify OAuth tokens.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlmodel import Field, SQLModel

from bruce.base import utcnow


class Credential(SQLModel, table=True):
    """One row per Spotify user, overwritten on every successful login."""
    __tablename__ = "credentials"

    id: Optional[int] = Field(default=None, primary_key=True)
    spotify_id: str = Field(max_length=255, unique=True, index=True)
    access_token: str = Field(sa_type=Text)
    refresh_token: Optional[str] = Field(default=None, sa_type=Text)
    expires_at: datetime = Field(sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
