"""UI feature modules used by the Tkinter app."""

from .audio_backend import (
    BufferSourceNode,
    GainNode,
    OutputContext,
    OutputSuspended,
    PlaybackError,
)
from .guide_chat_feature import GuideChatFeature
from .meditation_player import MeditationPlayer, NoMediaAvailable, Scheduler
from .playback_state import PlaybackSnapshot, PlaybackState, PlaybackStatus
from .player_panel_feature import PlayerPanelFeature

__all__ = [
    "BufferSourceNode",
    "GainNode",
    "GuideChatFeature",
    "MeditationPlayer",
    "NoMediaAvailable",
    "OutputContext",
    "OutputSuspended",
    "PlaybackError",
    "PlaybackSnapshot",
    "PlaybackState",
    "PlaybackStatus",
    "PlayerPanelFeature",
    "Scheduler",
]
