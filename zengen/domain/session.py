"""Meditation session value types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..constants import DEFAULT_DURATION, DURATION_CHOICES
from .audio_buffer import AudioBuffer


class AppView(str, Enum):
    HOME = "HOME"
    GENERATING = "GENERATING"
    PLAYER = "PLAYER"


def normalize_duration(value: str | None) -> str:
    normalized = str(value or "").strip().capitalize()
    if normalized in DURATION_CHOICES:
        return normalized
    return DEFAULT_DURATION


@dataclass(frozen=True)
class GenerationParams:
    mood: str
    focus: str
    duration: str = DEFAULT_DURATION

    def __post_init__(self) -> None:
        object.__setattr__(self, "mood", str(self.mood or "").strip())
        object.__setattr__(self, "focus", str(self.focus or "").strip())
        object.__setattr__(self, "duration", normalize_duration(self.duration))

    def is_complete(self) -> bool:
        return bool(self.mood) and bool(self.focus)


@dataclass(frozen=True)
class MeditationSession:
    title: str
    script: str
    image_prompt: str
    image_url: str | None = None
    image_bytes: bytes | None = None
    image_mime: str | None = None
    audio: AudioBuffer | None = None

    @property
    def has_audio(self) -> bool:
        return self.audio is not None and self.audio.frames > 0

    def script_lines(self) -> list[str]:
        return [line.strip() for line in self.script.split("\n") if line.strip()]


@dataclass(frozen=True)
class ChatMessage:
    role: str
    text: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_user(self) -> bool:
        return self.role == "user"
