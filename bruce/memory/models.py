from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime
from sqlmodel import Field, SQLModel

from bruce.base import utcnow


class Memory(SQLModel, table=True):
    __tablename__ = "memory"

    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(max_length=255, unique=True, index=True)
    value: Any = Field(default=None, sa_type=JSON, nullable=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
