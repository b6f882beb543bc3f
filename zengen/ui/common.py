"""UI-neutral helpers shared by the desktop and web front ends."""
from __future__ import annotations

from typing import Any, Iterable

from ..domain.session import ChatMessage, GenerationParams

APP_TITLE = "ZenGen"
APP_TAGLINE = "Personal meditation sessions, generated on demand."

MOOD_PLACEHOLDER = "e.g. anxious, tired, restless"
FOCUS_PLACEHOLDER = "e.g. sleep, focus, letting go"
NO_MEDIA_TEXT = "Audio is unavailable for this session."
GUIDE_TYPING_TEXT = "Guide is typing..."


def format_timestamp(seconds: float) -> str:
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def playback_time_label(snapshot: Any) -> str:
    position = format_timestamp(snapshot.position_seconds)
    total = format_timestamp(snapshot.duration)
    return f"{position} / {total}"


def play_button_label(snapshot: Any) -> str:
    return "Pause" if snapshot.is_playing else "Play"


def can_generate(mood: str, focus: str) -> bool:
    return GenerationParams(mood=mood, focus=focus).is_complete()


def speaker_label(message: ChatMessage) -> str:
    return "You" if message.is_user else "Guide"


def format_chat_line(message: ChatMessage) -> str:
    return f"[{message.timestamp.strftime('%H:%M')}] {speaker_label(message)}: {message.text}"


def transcript_markdown(messages: Iterable[ChatMessage], *, typing: bool = False) -> str:
    lines = [
        f"**{speaker_label(message)}** _{message.timestamp.strftime('%H:%M')}_  \n{message.text}"
        for message in messages
    ]
    if typing:
        lines.append(f"_{GUIDE_TYPING_TEXT}_")
    return "\n\n".join(lines)
