"""
Selector tables for mood, workload and focus based recommendations.

Each selector key maps to one study profile: the seed genres and audio targets
handed to Spotify's recommendation endpoint, plus the search query used when
recommendations are unavailable. Unknown keys resolve to DEFAULT_PROFILE.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple, Type

from studybeats.utils.logging import setup_logger

logger = setup_logger(__name__)


class SelectorKind(str, Enum):
    MOOD = "mood"
    WORKLOAD = "workload"
    FOCUS = "focus"
    PERSONALIZED = "personalized"


class Mood(str, Enum):
    LOVE = "love"
    RAGE = "rage"
    OPTIMISM = "optimism"
    JOY = "joy"
    NOSTALGIA = "nostalgia"
    CONFIDENT = "confident"
    HYPER_CRAZE = "hyper craze"
    SAD = "sad"


class Workload(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


class FocusLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class StudyProfile:
    """Parameters derived from a selector."""
    kind: SelectorKind
    label: str
    seed_genres: Tuple[str, ...]
    target_energy: float
    target_valence: float
    search_query: str
    description: str = ""
    seed_tracks: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_personalized(self) -> bool:
        return self.kind == SelectorKind.PERSONALIZED


def _profile(kind, label, genres, energy, valence, query, description=""):
    return StudyProfile(
        kind=kind,
        label=label,
        seed_genres=tuple(genres),
        target_energy=energy,
        target_valence=valence,
        search_query=query,
        description=description
    )


STUDY_PROFILES: Dict[Enum, StudyProfile] = {
    # Moods
    Mood.LOVE: _profile(SelectorKind.MOOD, "Love", ["pop", "romance"], 0.4, 0.8, "romantic chill study"),
    Mood.RAGE: _profile(SelectorKind.MOOD, "Rage", ["rock", "metal"], 0.9, 0.3, "intense rock study"),
    Mood.OPTIMISM: _profile(SelectorKind.MOOD, "Optimism", ["pop", "indie-pop"], 0.7, 0.8, "upbeat study"),
    Mood.JOY: _profile(SelectorKind.MOOD, "Joy", ["dance", "pop"], 0.8, 0.9, "happy study"),
    Mood.NOSTALGIA: _profile(SelectorKind.MOOD, "Nostalgia", ["rock-n-roll", "soul"], 0.5, 0.6, "throwback study"),
    Mood.CONFIDENT: _profile(SelectorKind.MOOD, "Confident", ["hip-hop", "pop"], 0.8, 0.7, "confidence boost study"),
    Mood.HYPER_CRAZE: _profile(SelectorKind.MOOD, "Hyper Craze", ["edm", "electronic"], 0.9, 0.8, "energetic electronic study"),
    Mood.SAD: _profile(SelectorKind.MOOD, "Sad", ["acoustic", "indie"], 0.3, 0.2, "sad acoustic study"),

    # Workloads
    Workload.LIGHT: _profile(
        SelectorKind.WORKLOAD, "Light Workload", ["chill", "study"], 0.3, 0.7, "chill lounge study",
        "Easygoing tracks for lighter tasks"
    ),
    Workload.MODERATE: _profile(
        SelectorKind.WORKLOAD, "Moderate Workload", ["indie-pop", "alternative"], 0.5, 0.6, "indie focus study",
        "Steady energy for a normal study load"
    ),
    Workload.HEAVY: _profile(
        SelectorKind.WORKLOAD, "Heavy Workload", ["classical", "ambient"], 0.2, 0.5, "classical deep focus",
        "Calm, instrumental tracks for demanding work"
    ),

    # Focus levels
    FocusLevel.LOW: _profile(
        SelectorKind.FOCUS, "Low Focus", ["pop", "indie"], 0.7, 0.8, "upbeat background study",
        "Background music for light concentration"
    ),
    FocusLevel.MEDIUM: _profile(
        SelectorKind.FOCUS, "Medium Focus", ["indie", "alternative"], 0.5, 0.6, "focus study",
        "Balanced music for steady concentration"
    ),
    FocusLevel.HIGH: _profile(
        SelectorKind.FOCUS, "High Focus", ["classical", "ambient", "study"], 0.3, 0.5, "lofi deep focus",
        "Minimal distraction for deep concentration"
    ),
}

DEFAULT_PROFILE = _profile(
    SelectorKind.MOOD, "Study", ["study"], 0.5, 0.5, "study music", "Music to study to"
)

PERSONALIZED_PROFILE = _profile(
    SelectorKind.PERSONALIZED, "For You", [], 0.5, 0.5, "study focus",
    "Based on what you have been listening to"
)

_ENUMS: Dict[SelectorKind, Type[Enum]] = {
    SelectorKind.MOOD: Mood,
    SelectorKind.WORKLOAD: Workload,
    SelectorKind.FOCUS: FocusLevel,
}


def normalize_key(key: Optional[str]) -> str:
    """Canonical form of a selector key: lower case, '-'/'_' as single spaces."""
    if not key:
        return ""
    return " ".join(key.replace("-", " ").replace("_", " ").lower().split())


def resolve_profile(kind: SelectorKind, key: Optional[str]) -> StudyProfile:
    """
    Look up the study profile for a selector key.

    Unknown keys fall back to DEFAULT_PROFILE (keeping the requested kind)
    rather than failing the request.
    """
    if kind == SelectorKind.PERSONALIZED:
        return PERSONALIZED_PROFILE

    enum_cls = _ENUMS[kind]
    try:
        member = enum_cls(normalize_key(key))
    except ValueError:
        logger.info(f"Unknown {kind.value} selector {key!r}, using default study profile")
        return replace(DEFAULT_PROFILE, kind=kind)
    return STUDY_PROFILES[member]


def focus_profile(level: Optional[str], study_hours: float) -> StudyProfile:
    """Focus profile with the planned session length worked into the description."""
    profile = resolve_profile(SelectorKind.FOCUS, level)
    hours = f"{study_hours:g} hour" + ("" if study_hours == 1 else "s")
    description = f"{profile.description or profile.label} for a {hours} study session"
    return replace(profile, description=description)
