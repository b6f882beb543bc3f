"""Export of meditation scripts and audio to the output directory."""
from __future__ import annotations

import os
import re
import uuid
from datetime import datetime

import soundfile as sf

from ..domain.session import MeditationSession


class SessionExporter:
    def __init__(self, output_dir: str, logger) -> None:
        self.output_dir = output_dir
        self.output_dir_abs = os.path.abspath(output_dir)
        self.logger = logger
        os.makedirs(self.output_dir, exist_ok=True)
        self.logger.info("Output dir: %s", self.output_dir)

    def _sanitize_title(self, title: str) -> str:
        safe = re.sub(r"[^A-Za-z0-9_-]+", "_", title or "").strip("_")
        return safe[:60] or "session"

    def _dated_sessions_dir(self) -> str:
        sessions_dir = os.path.join(
            self.output_dir, datetime.now().strftime("%Y-%m-%d"), "sessions"
        )
        os.makedirs(sessions_dir, exist_ok=True)
        return sessions_dir

    def build_output_path(self, title: str, extension: str) -> str:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        suffix = uuid.uuid4().hex[:8]
        name = f"{timestamp}_{self._sanitize_title(title)}_{suffix}.{extension.lstrip('.')}"
        return os.path.join(self._dated_sessions_dir(), name)

    def save_script(self, session: MeditationSession) -> str:
        path = self.build_output_path(session.title, "txt")
        body = f"{session.title}\n\n{session.script.strip()}\n"
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(body)
        self.logger.info("Saved script: %s", path)
        return path

    def save_audio(self, session: MeditationSession) -> str:
        if session.audio is None:
            raise ValueError("Session has no audio to save.")
        path = self.build_output_path(session.title, "wav")
        sf.write(
            path,
            session.audio.samples,
            session.audio.sample_rate,
            subtype="PCM_16",
        )
        self.logger.info(
            "Saved audio: %s (%.1fs)", path, session.audio.duration
        )
        return path
