"""User interface layer."""

from .common import (
    APP_TITLE,
    format_chat_line,
    format_timestamp,
    play_button_label,
    playback_time_label,
    transcript_markdown,
)
from .desktop_types import DesktopApp
from .tkinter_app import create_tkinter_app

__all__ = [
    "APP_TITLE",
    "DesktopApp",
    "create_tkinter_app",
    "format_chat_line",
    "format_timestamp",
    "play_button_label",
    "playback_time_label",
    "transcript_markdown",
]
