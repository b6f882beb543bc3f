from datetime import datetime

from zengen.domain.session import ChatMessage
from zengen.ui.common import (
    GUIDE_TYPING_TEXT,
    can_generate,
    format_chat_line,
    format_timestamp,
    play_button_label,
    playback_time_label,
    speaker_label,
    transcript_markdown,
)
from zengen.ui.features.playback_state import PlaybackSnapshot, PlaybackStatus


def _snapshot(status=PlaybackStatus.PAUSED, progress=0.0, duration=0.0):
    return PlaybackSnapshot(
        status=status,
        progress=progress,
        volume=0.8,
        no_media=False,
        duration=duration,
    )


def test_format_timestamp_clamps_and_pads():
    assert format_timestamp(0) == "00:00"
    assert format_timestamp(65.9) == "01:05"
    assert format_timestamp(-3) == "00:00"
    assert format_timestamp(3600) == "60:00"


def test_playback_labels_follow_snapshot():
    paused = _snapshot(progress=0.25, duration=120.0)
    playing = _snapshot(status=PlaybackStatus.PLAYING, progress=0.5, duration=120.0)

    assert playback_time_label(paused) == "00:30 / 02:00"
    assert play_button_label(paused) == "Play"
    assert play_button_label(playing) == "Pause"


def test_can_generate_requires_both_fields():
    assert can_generate("calm", "breath")
    assert not can_generate(" ", "breath")
    assert not can_generate("calm", "")


def test_chat_formatting():
    stamp = datetime(2024, 1, 2, 9, 5)
    user = ChatMessage(role="user", text="hello", timestamp=stamp)
    guide = ChatMessage(role="model", text="welcome", timestamp=stamp)

    assert speaker_label(user) == "You"
    assert speaker_label(guide) == "Guide"
    assert format_chat_line(user) == "[09:05] You: hello"

    markdown = transcript_markdown([user, guide], typing=True)
    assert markdown.startswith("**You** _09:05_  \nhello")
    assert "**Guide** _09:05_  \nwelcome" in markdown
    assert markdown.endswith(f"_{GUIDE_TYPING_TEXT}_")
    assert GUIDE_TYPING_TEXT not in transcript_markdown([guide])
