"""Runtime dependency container for the application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..config import AppConfig
    from .bootstrap import AppServices


@dataclass
class AppContext:
    """Holds runtime dependencies assembled at startup."""

    config: "AppConfig"
    logger: Any
    skip_app_init: bool
    api: Any = None
    generation_service: Any = None
    guide_chat: Any = None
    exporter: Any = None
    desktop_app: Any = None
    web_app: Any = None

    def bind_services(self, services: "AppServices") -> None:
        self.api = services.api
        self.generation_service = services.generation_service
        self.guide_chat = services.guide_chat
        self.exporter = services.exporter
        self.desktop_app = services.desktop_app
        self.web_app = services.web_app
