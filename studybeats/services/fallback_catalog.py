"""Static study playlists served when Spotify cannot produce anything."""
from typing import List

from studybeats.schemas.playlist import Playlist, Track

FALLBACK_PLAYLISTS = (
    {
        "id": "fallback-deep-focus",
        "title": "Deep Focus",
        "artist": "StudyBeats",
        "description": "Ambient soundscapes to help you stay focused",
        "tracks": [
            ("Deep Focus", "Ambient Study", 260000),
            ("Concentration Flow", "Chillhop", 195000),
        ],
    },
    {
        "id": "fallback-lofi-study",
        "title": "Lo-Fi Study Beats",
        "artist": "StudyBeats",
        "description": "Mellow lo-fi beats for long study sessions",
        "tracks": [
            ("Study Session", "Lo-Fi Beats", 225000),
            ("Mindful Coding", "Study Vibes", 235000),
        ],
    },
    {
        "id": "fallback-classical-concentration",
        "title": "Classical Concentration",
        "artist": "StudyBeats",
        "description": "Calm classical pieces for demanding work",
        "tracks": [
            ("Productivity Boost", "Focus Music", 310000),
        ],
    },
    {
        "id": "fallback-chill-instrumentals",
        "title": "Chill Instrumentals",
        "artist": "StudyBeats",
        "description": "Easygoing instrumentals for lighter tasks",
        "tracks": [
            ("Quiet Hours", "Instrumental Study", 240000),
        ],
    },
)


def get_fallback_playlists(limit: int = len(FALLBACK_PLAYLISTS)) -> List[Playlist]:
    """Build fresh copies of the catalog, never empty."""
    entries = FALLBACK_PLAYLISTS[:max(limit, 1)]
    return [
        Playlist(
            id=entry["id"],
            title=entry["title"],
            artist=entry["artist"],
            image=None,
            description=entry["description"],
            tracks=[
                Track(
                    id=f"{entry['id']}-{index}",
                    title=title,
                    artist=artist,
                    duration_ms=duration_ms
                )
                for index, (title, artist, duration_ms) in enumerate(entry["tracks"], start=1)
            ],
            source="fallback"
        )
        for entry in entries
    ]
