"""Shared constants."""
from __future__ import annotations

APP_NAME = "ZenGen"

TTS_SAMPLE_RATE = 24000
TTS_CHANNELS = 1

DURATION_CHOICES = ("Short", "Medium", "Long")
DEFAULT_DURATION = "Short"
DURATION_WORD_TARGETS = {
    "Short": 100,
    "Medium": 200,
    "Long": 300,
}

IMAGE_ASPECT_RATIO = "3:4"

LOADING_STEP_SCRIPT = "Connecting to cosmic energy (Writing script)..."
LOADING_STEP_MEDIA = "Visualizing serenity & synthesizing voice..."
LOADING_STEP_ERROR = "Error connecting. Please try again."
