"""Shared fixtures for the ZenGen test suite."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

os.environ.setdefault("ZENGEN_SKIP_APP_INIT", "1")

from zengen.config import AppConfig


def build_config(tmp_path: Path, **overrides) -> AppConfig:
    logs = tmp_path / "logs"
    outputs = tmp_path / "outputs"
    logs.mkdir(parents=True, exist_ok=True)
    outputs.mkdir(parents=True, exist_ok=True)
    values = {
        "log_level": "INFO",
        "file_log_level": "DEBUG",
        "log_dir": str(logs),
        "log_file": str(logs / "app.log"),
        "output_dir": str(outputs),
        "output_dir_abs": str(outputs.resolve()),
        "gemini_api_key": "test-key",
        "gemini_base_url": "https://gemini.test/v1beta",
        "gemini_script_model": "script-model",
        "gemini_image_model": "image-model",
        "gemini_image_mime": "image/png",
        "gemini_tts_model": "tts-model",
        "gemini_tts_voice": "Kore",
        "gemini_chat_model": "chat-model",
        "gemini_timeout_seconds": 30,
        "image_fallback_url": "https://fallback.test/image.png",
    }
    values.update(overrides)
    return AppConfig(**values)


@pytest.fixture
def app_config(tmp_path):
    return build_config(tmp_path)


@pytest.fixture
def config_factory(tmp_path):
    def _factory(**overrides):
        return build_config(tmp_path, **overrides)

    return _factory


class RecordingLogger:
    """Logger double that keeps formatted messages per level."""

    def __init__(self):
        self.records: dict[str, list[str]] = {
            "debug": [],
            "info": [],
            "warning": [],
            "error": [],
            "exception": [],
        }

    def _record(self, level, message, *args, **_kwargs):
        self.records[level].append(message % args if args else message)

    def debug(self, message, *args, **kwargs):
        self._record("debug", message, *args, **kwargs)

    def info(self, message, *args, **kwargs):
        self._record("info", message, *args, **kwargs)

    def warning(self, message, *args, **kwargs):
        self._record("warning", message, *args, **kwargs)

    def error(self, message, *args, **kwargs):
        self._record("error", message, *args, **kwargs)

    def exception(self, message, *args, **kwargs):
        self._record("exception", message, *args, **kwargs)


@pytest.fixture
def recording_logger():
    return RecordingLogger()
