"""Configuration loading from environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .utils import parse_float_env, parse_int_env, resolve_path


@dataclass(frozen=True)
class AppConfig:
    log_level: str
    file_log_level: str
    log_dir: str
    log_file: str
    output_dir: str
    output_dir_abs: str
    gemini_api_key: str
    gemini_base_url: str
    gemini_script_model: str
    gemini_image_model: str
    gemini_image_mime: str
    gemini_tts_model: str
    gemini_tts_voice: str
    gemini_chat_model: str
    gemini_timeout_seconds: int
    image_fallback_url: str
    player_default_volume: float = 0.8
    player_tick_ms: int = 50
    web_server_name: str = "127.0.0.1"
    web_server_port: int = 7860
    skip_app_init: bool = False


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_text(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


def load_config() -> AppConfig:
    base_dir = str(Path(__file__).resolve().parents[1])
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    file_log_level = os.getenv("FILE_LOG_LEVEL", "DEBUG").upper()
    log_dir = resolve_path(os.getenv("LOG_DIR", "logs"), base_dir)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(
        log_dir, f"app_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.log"
    )
    output_dir = resolve_path(os.getenv("OUTPUT_DIR", "outputs"), base_dir)
    output_dir_abs = os.path.abspath(output_dir)
    gemini_api_key = (
        os.getenv("GEMINI_API_KEY", "").strip() or os.getenv("API_KEY", "").strip()
    )
    gemini_base_url = _env_text(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    ).rstrip("/")
    gemini_timeout_seconds = parse_int_env(
        "GEMINI_TIMEOUT_SECONDS", 120, min_value=0, max_value=600
    )
    player_default_volume = parse_float_env(
        "PLAYER_DEFAULT_VOLUME", 0.8, min_value=0.0, max_value=1.0
    )
    player_tick_ms = parse_int_env("PLAYER_TICK_MS", 50, min_value=10, max_value=1000)
    web_server_port = parse_int_env(
        "WEB_SERVER_PORT", 7860, min_value=1, max_value=65535
    )
    return AppConfig(
        log_level=log_level,
        file_log_level=file_log_level,
        log_dir=log_dir,
        log_file=log_file,
        output_dir=output_dir,
        output_dir_abs=output_dir_abs,
        gemini_api_key=gemini_api_key,
        gemini_base_url=gemini_base_url,
        gemini_script_model=_env_text("GEMINI_SCRIPT_MODEL", "gemini-3-pro-preview"),
        gemini_image_model=_env_text("GEMINI_IMAGE_MODEL", "imagen-4.0-generate-001"),
        gemini_image_mime=_env_text("GEMINI_IMAGE_MIME", "image/png").lower(),
        gemini_tts_model=_env_text("GEMINI_TTS_MODEL", "gemini-2.5-flash-preview-tts"),
        gemini_tts_voice=_env_text("GEMINI_TTS_VOICE", "Kore"),
        gemini_chat_model=_env_text("GEMINI_CHAT_MODEL", "gemini-3-pro-preview"),
        gemini_timeout_seconds=gemini_timeout_seconds,
        image_fallback_url=_env_text(
            "IMAGE_FALLBACK_URL", "https://picsum.photos/800/1200"
        ),
        player_default_volume=player_default_volume,
        player_tick_ms=player_tick_ms,
        web_server_name=_env_text("WEB_SERVER_NAME", "127.0.0.1"),
        web_server_port=web_server_port,
        skip_app_init=_env_flag("ZENGEN_SKIP_APP_INIT"),
    )
