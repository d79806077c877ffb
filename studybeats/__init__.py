"""StudyBeats backend: study-music recommendations on top of the Spotify Web API."""

__version__ = "0.1.0"
