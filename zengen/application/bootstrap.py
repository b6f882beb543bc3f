"""Application bootstrap assembly for remote API, storage, and UI services."""
from __future__ import annotations

from dataclasses import dataclass

import gradio as gr

from ..config import AppConfig
from ..storage.session_exporter import SessionExporter
from ..ui.desktop_types import DesktopApp
from ..ui.gradio_app import create_gradio_app
from ..ui.tkinter_app import create_tkinter_app
from .generation_service import SessionGenerationService
from .guide_chat import GuideChatService
from .ports import GuideChatPort, MeditationGeneratorPort
from .remote_api import GeminiMeditationApi


@dataclass(frozen=True)
class AppServices:
    api: MeditationGeneratorPort
    generation_service: SessionGenerationService
    guide_chat: GuideChatService
    exporter: SessionExporter
    desktop_app: DesktopApp
    web_app: gr.Blocks | None = None


def initialize_app_services(
    *,
    config: AppConfig,
    logger,
    api: MeditationGeneratorPort | None = None,
    build_web: bool = False,
) -> AppServices:
    """Construct all runtime services and return a typed service bundle."""
    if api is None:
        api = GeminiMeditationApi(config)
    if not config.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; generation and chat requests will fail.")
    chat_api: GuideChatPort = api  # type: ignore[assignment]

    generation_service = SessionGenerationService(
        api,
        logger,
        image_fallback_url=config.image_fallback_url,
    )
    guide_chat = GuideChatService(chat_api, logger)
    exporter = SessionExporter(config.output_dir, logger)

    desktop_app = create_tkinter_app(
        config=config,
        logger=logger,
        generation_service=generation_service,
        guide_chat=guide_chat,
        exporter=exporter,
    )

    web_app = None
    if build_web:
        web_app = build_web_app(
            config=config,
            logger=logger,
            generation_service=generation_service,
            chat_api=chat_api,
        )

    return AppServices(
        api=api,
        generation_service=generation_service,
        guide_chat=guide_chat,
        exporter=exporter,
        desktop_app=desktop_app,
        web_app=web_app,
    )


def build_web_app(
    *,
    config: AppConfig,
    logger,
    generation_service: SessionGenerationService,
    chat_api: GuideChatPort,
) -> gr.Blocks:
    """Create the gradio UI; each browser session gets its own guide chat."""
    return create_gradio_app(
        config=config,
        logger=logger,
        generation_service=generation_service,
        guide_chat_factory=lambda: GuideChatService(chat_api, logger),
    )
