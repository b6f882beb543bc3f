"""Desktop and web entrypoint facade for ZenGen."""

from __future__ import annotations

import platform
import sys

from zengen.application.bootstrap import build_web_app, initialize_app_services
from zengen.application.context import AppContext
from zengen.config import load_config
from zengen.logging_config import setup_logging

CONFIG = load_config()
logger = setup_logging(CONFIG)
SKIP_APP_INIT = CONFIG.skip_app_init

logger.info("Starting app")
logger.info("Log file: %s", CONFIG.log_file)
logger.debug(
    "Log config: LOG_LEVEL=%s FILE_LOG_LEVEL=%s LOG_DIR=%s OUTPUT_DIR=%s "
    "GEMINI_BASE_URL=%s GEMINI_SCRIPT_MODEL=%s GEMINI_IMAGE_MODEL=%s GEMINI_TTS_MODEL=%s "
    "GEMINI_TTS_VOICE=%s GEMINI_CHAT_MODEL=%s GEMINI_TIMEOUT_SECONDS=%s "
    "PLAYER_DEFAULT_VOLUME=%s PLAYER_TICK_MS=%s",
    CONFIG.log_level,
    CONFIG.file_log_level,
    CONFIG.log_dir,
    CONFIG.output_dir,
    CONFIG.gemini_base_url,
    CONFIG.gemini_script_model,
    CONFIG.gemini_image_model,
    CONFIG.gemini_tts_model,
    CONFIG.gemini_tts_voice,
    CONFIG.gemini_chat_model,
    CONFIG.gemini_timeout_seconds,
    CONFIG.player_default_volume,
    CONFIG.player_tick_ms,
)
if CONFIG.gemini_api_key:
    logger.debug("GEMINI_API_KEY is set")
else:
    logger.debug("GEMINI_API_KEY is not set")
logger.debug("Python version: %s", sys.version.replace("\n", " "))
logger.debug("Platform: %s", platform.platform())

APP_CONTEXT = AppContext(
    config=CONFIG,
    logger=logger,
    skip_app_init=SKIP_APP_INIT,
)

if not SKIP_APP_INIT:
    services = initialize_app_services(config=CONFIG, logger=logger)
    APP_CONTEXT.bind_services(services)
else:
    logger.info("ZENGEN_SKIP_APP_INIT enabled; skipping service and UI initialization")


def _current_web_app():
    if APP_CONTEXT.web_app is None and APP_CONTEXT.generation_service is not None:
        APP_CONTEXT.web_app = build_web_app(
            config=CONFIG,
            logger=logger,
            generation_service=APP_CONTEXT.generation_service,
            chat_api=APP_CONTEXT.api,
        )
    return APP_CONTEXT.web_app


def launch() -> None:
    if SKIP_APP_INIT:
        logger.info("ZENGEN_SKIP_APP_INIT enabled; launch skipped")
        return
    desktop_app = APP_CONTEXT.desktop_app
    if desktop_app is None:
        raise RuntimeError("Desktop app is not initialized.")
    logger.info("Launching desktop app")
    desktop_app.launch()


def launch_web() -> None:
    if SKIP_APP_INIT:
        logger.info("ZENGEN_SKIP_APP_INIT enabled; web launch skipped")
        return
    web_app = _current_web_app()
    if web_app is None:
        raise RuntimeError("Web app is not initialized.")
    logger.info(
        "Launching web app on %s:%s", CONFIG.web_server_name, CONFIG.web_server_port
    )
    web_app.queue().launch(
        server_name=CONFIG.web_server_name,
        server_port=CONFIG.web_server_port,
    )


if __name__ == "__main__":
    launch()
