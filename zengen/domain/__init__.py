"""Domain types for sessions, audio buffers, and prompts."""

from .audio_buffer import AudioBuffer, decode_pcm16
from .prompts import (
    DEFAULT_IMAGE_PROMPT,
    DEFAULT_TITLE,
    GUIDE_EMPTY_REPLY,
    GUIDE_ERROR_REPLY,
    GUIDE_GREETING,
    GUIDE_SYSTEM_INSTRUCTION,
    build_image_prompt,
    build_script_prompt,
)
from .session import (
    AppView,
    ChatMessage,
    GenerationParams,
    MeditationSession,
    normalize_duration,
)

__all__ = [
    "AppView",
    "AudioBuffer",
    "ChatMessage",
    "DEFAULT_IMAGE_PROMPT",
    "DEFAULT_TITLE",
    "GUIDE_EMPTY_REPLY",
    "GUIDE_ERROR_REPLY",
    "GUIDE_GREETING",
    "GUIDE_SYSTEM_INSTRUCTION",
    "GenerationParams",
    "MeditationSession",
    "build_image_prompt",
    "build_script_prompt",
    "decode_pcm16",
    "normalize_duration",
]
