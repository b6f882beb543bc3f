"""Integrations for external services."""

from .gemini import (
    ChatRequest,
    GeminiEndpoint,
    GeminiError,
    GeneratedImage,
    ImageRequest,
    ScriptRequest,
    SpeechRequest,
    generate_meditation_audio,
    generate_meditation_content,
    generate_meditation_image,
    send_chat_message,
)

__all__ = [
    "ChatRequest",
    "GeminiEndpoint",
    "GeminiError",
    "GeneratedImage",
    "ImageRequest",
    "ScriptRequest",
    "SpeechRequest",
    "generate_meditation_audio",
    "generate_meditation_content",
    "generate_meditation_image",
    "send_chat_message",
]
