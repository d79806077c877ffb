"""Builders for Spotify payloads and decoded models used across the tests."""
from typing import List, Optional

from studybeats.schemas.spotify import SpotifyAlbum, SpotifyPlaylist, SpotifyTrack


def track_payload(
    track_id: Optional[str] = "t1",
    name: str = "Track",
    artists=("Artist",),
    image: Optional[str] = "https://i.scdn.co/image/t1",
    duration_ms: int = 200000,
    preview_url: Optional[str] = None,
    type: str = "track"
) -> dict:
    return {
        "id": track_id,
        "name": name,
        "type": type,
        "uri": f"spotify:track:{track_id}" if track_id else None,
        "duration_ms": duration_ms,
        "preview_url": preview_url,
        "artists": [{"id": f"artist-{a}", "name": a} for a in artists],
        "album": {
            "id": "album-1",
            "name": "Album",
            "images": [{"url": image, "height": 640, "width": 640}] if image else [],
        },
    }


def make_track(track_id: Optional[str] = "t1", **kwargs) -> SpotifyTrack:
    return SpotifyTrack.model_validate(track_payload(track_id, **kwargs))


def make_tracks(count: int, prefix: str = "t") -> List[SpotifyTrack]:
    return [
        make_track(f"{prefix}{i}", name=f"Track {i}", artists=(f"Artist {i}",), image=f"https://img/{prefix}{i}")
        for i in range(1, count + 1)
    ]


def playlist_payload(
    playlist_id: str = "pl1",
    name: str = "Playlist",
    owner: Optional[str] = "Owner",
    image: Optional[str] = "https://i.scdn.co/image/pl1",
    description: Optional[str] = "A playlist"
) -> dict:
    return {
        "id": playlist_id,
        "name": name,
        "description": description,
        "uri": f"spotify:playlist:{playlist_id}",
        "images": [{"url": image}] if image else None,
        "owner": {"id": "owner-1", "display_name": owner},
        "tracks": {"href": f"https://api.spotify.com/v1/playlists/{playlist_id}/tracks", "total": 30},
    }


def make_playlist(playlist_id: str = "pl1", **kwargs) -> SpotifyPlaylist:
    return SpotifyPlaylist.model_validate(playlist_payload(playlist_id, **kwargs))


def album_payload(
    album_id: str = "al1",
    name: str = "Album",
    artists=("Band",),
    image: Optional[str] = "https://i.scdn.co/image/al1",
    tracks: Optional[list] = None,
    next_url: Optional[str] = None,
    total: Optional[int] = None
) -> dict:
    items = tracks if tracks is not None else []
    return {
        "id": album_id,
        "name": name,
        "uri": f"spotify:album:{album_id}",
        "images": [{"url": image}] if image else [],
        "artists": [{"id": f"artist-{a}", "name": a} for a in artists],
        "tracks": {
            "items": items,
            "next": next_url,
            "total": total if total is not None else len(items),
            "limit": 50,
            "offset": 0,
        },
    }


def make_album(album_id: str = "al1", **kwargs) -> SpotifyAlbum:
    return SpotifyAlbum.model_validate(album_payload(album_id, **kwargs))


def page_payload(items: list, next_url: Optional[str] = None, total: Optional[int] = None) -> dict:
    return {
        "items": items,
        "next": next_url,
        "total": total if total is not None else len(items),
        "limit": len(items),
        "offset": 0,
    }
