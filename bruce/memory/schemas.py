from typing import Any

from pydantic import BaseModel, ConfigDict


class MemoryWrite(BaseModel):
    key: str
    value: Any = None


class MemoryEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    value: Any = None
