"""Fixed tables behind the command and track endpoints."""
from enum import Enum
from typing import Dict, List, Optional


class Mood(str, Enum):
    CHILL = "chill"
    PARTY = "party"
    FOCUS = "focus"
    SAD = "sad"
    HYPE = "hype"
    HAPPY = "happy"


MOOD_GENRES: Dict[Mood, List[str]] = {
    Mood.CHILL: ["lofi", "ambient"],
    Mood.PARTY: ["edm", "dance"],
    Mood.FOCUS: ["piano", "instrumental"],
    Mood.SAD: ["acoustic", "melancholy"],
    Mood.HYPE: ["hip-hop", "trap"],
    Mood.HAPPY: ["pop", "feel-good"],
}

OFFLINE_TRACKS = [
    {"title": "Offline Track 1", "artist": "Bruce AI"},
    {"title": "Offline Track 2", "artist": "Bruce Synth"},
]

FREQUENT_TRACKS = [
    {"title": "Most Played 1", "artist": "Bruce"},
    {"title": "Most Played 2", "artist": "AI Dream"},
]

UPDATE_INFO = {
    "update_available": True,
    "version": "2.0.0",
    "changelog": "🎉 New AI Avatar UI + Voice + Playlist Generator + Bug Fixes",
}


def genres_for(mood: Optional[str]) -> List[str]:
    try:
        return list(MOOD_GENRES[Mood(mood)])
    except ValueError:
        return []
