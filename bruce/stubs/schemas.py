from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VoiceCommand(BaseModel):
    command: str


class VoiceCommandResponse(BaseModel):
    response: str


class PlaylistRequest(BaseModel):
    mood: Optional[str] = None


class PlaylistResponse(BaseModel):
    genres: List[str]


class Track(BaseModel):
    title: str
    artist: str


class UpdateCheck(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    update_available: bool = Field(alias="updateAvailable")
    version: str
    changelog: str
