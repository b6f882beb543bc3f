"""Meditation player runtime state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PlaybackStatus(str, Enum):
    IDLE = "idle"
    PAUSED = "paused"
    PLAYING = "playing"


@dataclass(slots=True)
class PlaybackState:
    """Mutable state owned by the meditation player."""

    status: PlaybackStatus = PlaybackStatus.IDLE
    progress: float = 0.0
    volume: float = 0.8
    anchor_time: float = 0.0
    no_media: bool = False


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Read-only view of the player handed to UI listeners."""

    status: PlaybackStatus
    progress: float
    volume: float
    no_media: bool
    duration: float

    @property
    def is_playing(self) -> bool:
        return self.status is PlaybackStatus.PLAYING

    @property
    def position_seconds(self) -> float:
        return self.progress * self.duration
