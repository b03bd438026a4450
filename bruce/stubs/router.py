from typing import Any, List

from fastapi import APIRouter

from bruce.stubs.catalog import FREQUENT_TRACKS, OFFLINE_TRACKS, UPDATE_INFO, genres_for
from bruce.stubs.schemas import (
    PlaylistRequest,
    PlaylistResponse,
    Track,
    UpdateCheck,
    VoiceCommand,
    VoiceCommandResponse,
)

router = APIRouter()


@router.post("/voice-command", response_model=VoiceCommandResponse)
def voice_command(request: VoiceCommand) -> Any:
    return VoiceCommandResponse(response=f"🎤 Executing: {request.command}")


@router.post("/playlist", response_model=PlaylistResponse)
def playlist(request: PlaylistRequest) -> Any:
    """Genres for a mood; unknown moods get an empty list."""
    return PlaylistResponse(genres=genres_for(request.mood))


@router.get("/offline-tracks", response_model=List[Track])
def offline_tracks() -> Any:
    return OFFLINE_TRACKS


@router.get("/frequent-tracks", response_model=List[Track])
def frequent_tracks() -> Any:
    return FREQUENT_TRACKS


@router.get("/update-check", response_model=UpdateCheck)
def update_check() -> Any:
    return UpdateCheck(**UPDATE_INFO)
