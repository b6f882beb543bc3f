"""Meditation session generation pipeline."""

from __future__ import annotations

import dataclasses
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from ..constants import LOADING_STEP_MEDIA, LOADING_STEP_SCRIPT
from ..domain.audio_buffer import AudioBuffer
from ..domain.session import GenerationParams, MeditationSession
from .ports import MeditationGeneratorPort

StepCallback = Callable[[str], None]


class GenerationError(RuntimeError):
    """Raised when a session cannot be generated."""


class SessionGenerationService:
    """Writes the script, then renders image and speech concurrently.

    Image and speech failures degrade the session (fallback image URL, no audio)
    instead of failing it; a script failure fails the whole generation.
    """

    def __init__(
        self,
        api: MeditationGeneratorPort,
        logger,
        *,
        image_fallback_url: str,
    ) -> None:
        self.api = api
        self.logger = logger
        self.image_fallback_url = image_fallback_url

    def generate(
        self,
        params: GenerationParams,
        on_step: StepCallback | None = None,
    ) -> MeditationSession:
        if not params.is_complete():
            raise GenerationError("Mood and focus are required.")
        started_at = time.perf_counter()
        self.logger.info(
            "Generating session: mood=%r focus=%r duration=%s",
            params.mood,
            params.focus,
            params.duration,
        )
        self._report(on_step, LOADING_STEP_SCRIPT)
        try:
            content = self.api.write_script(params)
        except Exception as exc:
            self.logger.exception("Script generation failed")
            raise GenerationError(str(exc)) from exc
        self.logger.debug(
            "Script ready: title=%r chars=%s", content.title, len(content.script)
        )

        self._report(on_step, LOADING_STEP_MEDIA)
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="zengen-media") as pool:
            image_future = pool.submit(self._render_image, content.image_prompt)
            audio_future = pool.submit(self._synthesize_speech, content.script)
            image_url, image_bytes, image_mime = image_future.result()
            audio = audio_future.result()

        session = dataclasses.replace(
            content,
            image_url=image_url,
            image_bytes=image_bytes,
            image_mime=image_mime,
            audio=audio,
        )
        self.logger.info(
            "Session generated in %.2fs: title=%r audio=%s image=%s",
            time.perf_counter() - started_at,
            session.title,
            f"{audio.duration:.1f}s" if audio is not None else "none",
            "generated" if image_bytes else "fallback",
        )
        return session

    def _report(self, on_step: StepCallback | None, message: str) -> None:
        if on_step is None:
            return
        try:
            on_step(message)
        except Exception:
            self.logger.exception("Loading step callback failed")

    def _render_image(self, prompt: str) -> tuple[str, bytes | None, str | None]:
        try:
            image = self.api.render_image(prompt)
        except Exception:
            self.logger.exception("Image generation failed")
            return self.image_fallback_url, None, None
        return image.data_url, image.data, image.mime_type

    def _synthesize_speech(self, script: str) -> AudioBuffer | None:
        if not script.strip():
            self.logger.warning("Audio generation skipped: script is empty")
            return None
        try:
            return self.api.synthesize_speech(script)
        except Exception:
            self.logger.exception("Audio generation failed")
            return None
