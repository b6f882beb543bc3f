import threading

import numpy as np
import pytest

from zengen.application.generation_service import GenerationError, SessionGenerationService
from zengen.constants import LOADING_STEP_MEDIA, LOADING_STEP_SCRIPT
from zengen.domain.audio_buffer import AudioBuffer
from zengen.domain.session import GenerationParams, MeditationSession
from zengen.integrations.gemini import GeneratedImage

FALLBACK_URL = "https://fallback.test/image.png"


class FakeApi:
    def __init__(self, *, script="Breathe in.", image_error=None, audio_error=None, script_error=None):
        self.script = script
        self.image_error = image_error
        self.audio_error = audio_error
        self.script_error = script_error
        self.calls = []
        self.threads = set()

    def write_script(self, params):
        self.calls.append(("script", params))
        if self.script_error is not None:
            raise self.script_error
        return MeditationSession(title="Calm Lake", script=self.script, image_prompt="Lake at dawn")

    def render_image(self, prompt):
        self.calls.append(("image", prompt))
        self.threads.add(threading.current_thread().name)
        if self.image_error is not None:
            raise self.image_error
        return GeneratedImage(data=b"png-bytes", mime_type="image/png")

    def synthesize_speech(self, text):
        self.calls.append(("speech", text))
        self.threads.add(threading.current_thread().name)
        if self.audio_error is not None:
            raise self.audio_error
        return AudioBuffer(samples=np.zeros(240), sample_rate=24, channels=1)


def _service(api, logger):
    return SessionGenerationService(api, logger, image_fallback_url=FALLBACK_URL)


def test_generate_builds_complete_session_and_reports_steps(recording_logger):
    api = FakeApi()
    steps = []

    session = _service(api, recording_logger).generate(
        GenerationParams(mood="anxious", focus="sleep"), on_step=steps.append
    )

    assert steps == [LOADING_STEP_SCRIPT, LOADING_STEP_MEDIA]
    assert session.title == "Calm Lake"
    assert session.image_bytes == b"png-bytes"
    assert session.image_url.startswith("data:image/png;base64,")
    assert session.has_audio
    assert session.audio.duration == pytest.approx(10.0)
    assert ("image", "Lake at dawn") in api.calls
    assert ("speech", "Breathe in.") in api.calls
    assert all(name.startswith("zengen-media") for name in api.threads)
    assert any("Session generated" in line for line in recording_logger.records["info"])


def test_generate_rejects_incomplete_params(recording_logger):
    api = FakeApi()
    with pytest.raises(GenerationError, match="required"):
        _service(api, recording_logger).generate(GenerationParams(mood="", focus="sleep"))
    assert api.calls == []


def test_script_failure_fails_generation(recording_logger):
    api = FakeApi(script_error=RuntimeError("quota"))
    steps = []

    with pytest.raises(GenerationError, match="quota"):
        _service(api, recording_logger).generate(
            GenerationParams(mood="calm", focus="breath"), on_step=steps.append
        )

    assert steps == [LOADING_STEP_SCRIPT]
    assert "Script generation failed" in recording_logger.records["exception"]
    assert [call[0] for call in api.calls] == ["script"]


def test_media_failures_degrade_session(recording_logger):
    api = FakeApi(image_error=RuntimeError("no image"), audio_error=RuntimeError("no audio"))

    session = _service(api, recording_logger).generate(GenerationParams(mood="calm", focus="breath"))

    assert session.image_url == FALLBACK_URL
    assert session.image_bytes is None
    assert session.audio is None
    assert not session.has_audio
    assert "Image generation failed" in recording_logger.records["exception"]
    assert "Audio generation failed" in recording_logger.records["exception"]


def test_empty_script_skips_speech(recording_logger):
    api = FakeApi(script="   ")

    session = _service(api, recording_logger).generate(GenerationParams(mood="calm", focus="breath"))

    assert session.audio is None
    assert all(call[0] != "speech" for call in api.calls)
    assert "Audio generation skipped: script is empty" in recording_logger.records["warning"]


def test_step_callback_errors_are_logged(recording_logger):
    def broken(_message):
        raise RuntimeError("ui gone")

    session = _service(FakeApi(), recording_logger).generate(
        GenerationParams(mood="calm", focus="breath"), on_step=broken
    )

    assert session.title == "Calm Lake"
    assert recording_logger.records["exception"].count("Loading step callback failed") == 2
