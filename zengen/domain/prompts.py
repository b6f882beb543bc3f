"""Prompt text and fallbacks for the generative service."""

from __future__ import annotations

from ..constants import DURATION_WORD_TARGETS
from .session import GenerationParams

DEFAULT_TITLE = "Meditation Session"
DEFAULT_IMAGE_PROMPT = "A peaceful abstract landscape with soft colors"
IMAGE_PROMPT_SUFFIX = ", photorealistic, 8k, serene, cinematic lighting, peaceful atmosphere"

GUIDE_SYSTEM_INSTRUCTION = (
    "You are a wise, empathetic, and calming meditation teacher. "
    "Keep answers concise and soothing."
)
GUIDE_GREETING = "Namaste. How can I support your journey today?"
GUIDE_EMPTY_REPLY = "I am here with you. Take a deep breath."
GUIDE_ERROR_REPLY = (
    "I'm having trouble connecting to the universal energy (API error). Please try again."
)

SCRIPT_RESPONSE_SCHEMA: dict[str, object] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "script": {"type": "STRING"},
        "imagePrompt": {"type": "STRING"},
    },
    "required": ["title", "script", "imagePrompt"],
}


def duration_hint() -> str:
    return ", ".join(
        f"{name} = {words} words" for name, words in DURATION_WORD_TARGETS.items()
    )


def build_script_prompt(params: GenerationParams) -> str:
    return (
        "Create a guided meditation script for a user who is feeling "
        f"\"{params.mood}\" and wants to focus on \"{params.focus}\".\n"
        f"The duration should be roughly {params.duration} ({duration_hint()}).\n\n"
        "Return a JSON object with:\n"
        "1. \"title\": A calming title for the session.\n"
        "2. \"script\": The spoken text for the meditation guide. "
        "It should be soothing, spaced out, and direct.\n"
        "3. \"imagePrompt\": A detailed, artistic prompt to generate a serene background "
        "image using an AI image generator. Describe a scene that matches the mood "
        "(e.g., \"A misty forest at dawn with soft golden light\")."
    )


def build_image_prompt(image_prompt: str) -> str:
    base = str(image_prompt or "").strip() or DEFAULT_IMAGE_PROMPT
    return f"{base}{IMAGE_PROMPT_SUFFIX}"
