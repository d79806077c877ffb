"""
Mapping from Spotify schemas to the normalized Playlist/Track shape.

All functions are pure. Missing optional data becomes a default rather than an
error: no image is ``None``, no owner or artist is ``"Spotify"``, no
description is ``""``.
"""
import math
from typing import Iterable, List, Optional, Sequence

from studybeats.schemas.playlist import Playlist, Track
from studybeats.schemas.spotify import (
    SpotifyAlbum,
    SpotifyArtist,
    SpotifyImage,
    SpotifyPlaylist,
    SpotifyTrack,
)

DEFAULT_ARTIST = "Spotify"


def first_image(images: Sequence[SpotifyImage]) -> Optional[str]:
    """Spotify lists images widest first."""
    return images[0].url if images else None


def join_artists(artists: Iterable[SpotifyArtist]) -> str:
    names = [artist.name for artist in artists if artist.name]
    return ", ".join(names) if names else DEFAULT_ARTIST


def format_track(track: SpotifyTrack, fallback_image: Optional[str] = None) -> Track:
    """Album tracks carry no album of their own; they take the album cover."""
    image = first_image(track.album.images) if track.album else None
    return Track(
        id=track.id,
        title=track.name,
        artist=join_artists(track.artists),
        image=image or fallback_image,
        duration_ms=track.duration_ms,
        preview_url=track.preview_url,
        uri=track.uri
    )


def format_tracks(tracks: Iterable[SpotifyTrack], fallback_image: Optional[str] = None) -> List[Track]:
    return [format_track(track, fallback_image) for track in tracks]


def format_playlist(playlist: SpotifyPlaylist, tracks: Optional[Iterable[SpotifyTrack]] = None) -> Playlist:
    """
    Normalize a Spotify playlist.

    ``tracks`` overrides the embedded first page, which search results never
    carry.
    """
    if tracks is None:
        page = playlist.tracks.present_items() if playlist.tracks else []
        tracks = [item.track for item in page if item.track is not None and item.track.is_playable_track]

    owner = playlist.owner.display_name if playlist.owner else None
    return Playlist(
        id=playlist.id,
        title=playlist.name,
        artist=owner or DEFAULT_ARTIST,
        image=first_image(playlist.images),
        description=playlist.description or "",
        tracks=format_tracks(tracks),
        source="playlist"
    )


def format_album(album: SpotifyAlbum, tracks: Optional[Iterable[SpotifyTrack]] = None) -> Playlist:
    image = first_image(album.images)
    if tracks is None:
        tracks = album.tracks.present_items() if album.tracks else []
    return Playlist(
        id=album.id,
        title=album.name,
        artist=join_artists(album.artists),
        image=image,
        description="",
        tracks=format_tracks(tracks, fallback_image=image),
        source="album"
    )


def playlist_from_track(track: SpotifyTrack) -> Playlist:
    """Present a single track (e.g. a recently played one) as a one-track playlist."""
    formatted = format_track(track)
    return Playlist(
        id=track.id or track.uri or track.name,
        title=formatted.title,
        artist=formatted.artist,
        image=formatted.image,
        description="",
        tracks=[formatted],
        source="track"
    )


def build_virtual_playlists(
    tracks: Sequence[SpotifyTrack],
    limit: int,
    title: str,
    description: str = "",
    source: str = "search",
    id_prefix: str = "virtual"
) -> List[Playlist]:
    """
    Partition a flat track list into at most ``limit`` playlists of nearly equal
    size, keeping provider order. An empty list yields no playlists.
    """
    if not tracks or limit < 1:
        return []

    groups = min(limit, len(tracks))
    size = math.ceil(len(tracks) / groups)
    slug = "-".join(title.lower().split()) or "mix"

    playlists = []
    for index, start in enumerate(range(0, len(tracks), size), start=1):
        chunk = format_tracks(tracks[start:start + size])
        lead = chunk[0]
        playlists.append(Playlist(
            id=f"{id_prefix}-{slug}-{index}",
            title=f"{title} Mix {index}",
            artist=lead.artist,
            image=lead.image,
            description=description,
            tracks=chunk,
            source=source
        ))
    return playlists[:limit]
