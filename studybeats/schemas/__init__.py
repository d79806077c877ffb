"""Request, response and provider schemas."""
from .playlist import Playlist, Track, PlaylistTracksPage

__all__ = ['Playlist', 'Track', 'PlaylistTracksPage']
