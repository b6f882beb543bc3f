"""Application-level ports for the generative service."""

from __future__ import annotations

from typing import Protocol, Sequence

from ..domain.audio_buffer import AudioBuffer
from ..domain.session import ChatMessage, GenerationParams, MeditationSession
from ..integrations.gemini import GeneratedImage


class MeditationGeneratorPort(Protocol):
    """Port abstraction for script, image, and speech generation."""

    def write_script(self, params: GenerationParams) -> MeditationSession: ...

    def render_image(self, prompt: str) -> GeneratedImage: ...

    def synthesize_speech(self, text: str) -> AudioBuffer: ...


class GuideChatPort(Protocol):
    """Port abstraction for the guide persona chat."""

    def reply(self, message: str, history: Sequence[ChatMessage]) -> str: ...
