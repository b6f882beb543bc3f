"""Application layer orchestration."""

from .bootstrap import AppServices, initialize_app_services
from .context import AppContext
from .generation_service import GenerationError, SessionGenerationService
from .guide_chat import GuideChatService
from .ports import GuideChatPort, MeditationGeneratorPort
from .remote_api import GeminiMeditationApi

__all__ = [
    "AppContext",
    "AppServices",
    "GeminiMeditationApi",
    "GenerationError",
    "GuideChatPort",
    "GuideChatService",
    "MeditationGeneratorPort",
    "SessionGenerationService",
    "initialize_app_services",
]
