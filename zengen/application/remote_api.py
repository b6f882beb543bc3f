"""Gemini-backed implementation of the application ports."""

from __future__ import annotations

from typing import Sequence

from ..config import AppConfig
from ..domain.audio_buffer import AudioBuffer
from ..domain.session import ChatMessage, GenerationParams, MeditationSession
from ..integrations.gemini import (
    ChatRequest,
    GeminiEndpoint,
    GeneratedImage,
    ImageRequest,
    ScriptRequest,
    SpeechRequest,
    generate_meditation_audio,
    generate_meditation_content,
    generate_meditation_image,
    send_chat_message,
)


class GeminiMeditationApi:
    """Binds configured models and credentials to Gemini requests."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.endpoint = GeminiEndpoint(
            base_url=config.gemini_base_url,
            api_key=config.gemini_api_key,
            timeout_seconds=config.gemini_timeout_seconds,
        )

    def write_script(self, params: GenerationParams) -> MeditationSession:
        return generate_meditation_content(
            ScriptRequest(
                params=params,
                endpoint=self.endpoint,
                model=self.config.gemini_script_model,
            )
        )

    def render_image(self, prompt: str) -> GeneratedImage:
        return generate_meditation_image(
            ImageRequest(
                prompt=prompt,
                endpoint=self.endpoint,
                model=self.config.gemini_image_model,
                mime_type=self.config.gemini_image_mime,
            )
        )

    def synthesize_speech(self, text: str) -> AudioBuffer:
        return generate_meditation_audio(
            SpeechRequest(
                text=text,
                endpoint=self.endpoint,
                model=self.config.gemini_tts_model,
                voice=self.config.gemini_tts_voice,
            )
        )

    def reply(self, message: str, history: Sequence[ChatMessage]) -> str:
        turns: list[dict[str, object]] = [
            {"role": "user" if item.is_user else "model", "parts": [{"text": item.text}]}
            for item in history
        ]
        return send_chat_message(
            ChatRequest(
                message=message,
                endpoint=self.endpoint,
                model=self.config.gemini_chat_model,
                history=turns,
            )
        )
