"""Gemini integration via the Generative Language REST API."""
from __future__ import annotations

import base64
import binascii
import json
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Any

from ..constants import IMAGE_ASPECT_RATIO, TTS_CHANNELS, TTS_SAMPLE_RATE
from ..domain.audio_buffer import AudioBuffer
from ..domain.prompts import (
    DEFAULT_IMAGE_PROMPT,
    DEFAULT_TITLE,
    GUIDE_SYSTEM_INSTRUCTION,
    SCRIPT_RESPONSE_SCHEMA,
    build_image_prompt,
    build_script_prompt,
)
from ..domain.session import GenerationParams, MeditationSession


class GeminiError(RuntimeError):
    """Raised when a Gemini request fails or returns an invalid payload."""


@dataclass(frozen=True)
class GeminiEndpoint:
    base_url: str
    api_key: str
    timeout_seconds: int


@dataclass(frozen=True)
class ScriptRequest:
    params: GenerationParams
    endpoint: GeminiEndpoint
    model: str


@dataclass(frozen=True)
class ImageRequest:
    prompt: str
    endpoint: GeminiEndpoint
    model: str
    mime_type: str = "image/png"
    aspect_ratio: str = IMAGE_ASPECT_RATIO


@dataclass(frozen=True)
class SpeechRequest:
    text: str
    endpoint: GeminiEndpoint
    model: str
    voice: str = "Kore"
    sample_rate: int = TTS_SAMPLE_RATE
    channels: int = TTS_CHANNELS


@dataclass(frozen=True)
class ChatRequest:
    message: str
    endpoint: GeminiEndpoint
    model: str
    history: list[dict[str, object]] = field(default_factory=list)
    system_instruction: str = GUIDE_SYSTEM_INSTRUCTION


@dataclass(frozen=True)
class GeneratedImage:
    data: bytes
    mime_type: str

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def _normalize_base_url(base_url: str) -> str:
    normalized = (base_url or "").strip().rstrip("/")
    if not normalized:
        raise GeminiError("Gemini base URL is empty.")
    return normalized


def _model_endpoint(base_url: str, model: str, method: str) -> str:
    model_id = (model or "").strip()
    if not model_id:
        raise GeminiError("Gemini model name is empty.")
    quoted = urllib.parse.quote(model_id, safe="-._")
    return f"{_normalize_base_url(base_url)}/models/{quoted}:{method}"


def _post_json(
    *,
    endpoint: GeminiEndpoint,
    url: str,
    payload: dict[str, object],
) -> dict[str, Any]:
    api_key = (endpoint.api_key or "").strip()
    if not api_key:
        raise GeminiError("Gemini API key is empty. Set GEMINI_API_KEY.")
    body = json.dumps(payload).encode("utf-8")
    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": api_key,
    }
    http_request = urllib.request.Request(url, data=body, headers=headers, method="POST")
    request_timeout: float | None
    try:
        request_timeout = float(endpoint.timeout_seconds)
    except (TypeError, ValueError):
        request_timeout = None
    if request_timeout is not None and request_timeout <= 0:
        request_timeout = None
    try:
        if request_timeout is None:
            response_ctx = urllib.request.urlopen(http_request)
        else:
            response_ctx = urllib.request.urlopen(http_request, timeout=request_timeout)
        with response_ctx as response:
            raw_response = response.read().decode("utf-8")
    except urllib.error.HTTPError as exc:
        error_payload = exc.read().decode("utf-8", errors="replace").strip()
        snippet = error_payload[:500] if error_payload else "No body"
        raise GeminiError(f"Gemini HTTP {exc.code}: {snippet}") from exc
    except urllib.error.URLError as exc:
        raise GeminiError(f"Failed to reach Gemini endpoint: {url}") from exc
    except TimeoutError as exc:
        raise GeminiError("Gemini request timed out.") from exc
    except OSError as exc:
        raise GeminiError(f"Gemini connection error: {exc}") from exc

    try:
        parsed = json.loads(raw_response)
    except json.JSONDecodeError as exc:
        raise GeminiError("Gemini returned invalid JSON.") from exc
    if not isinstance(parsed, dict):
        raise GeminiError("Gemini response must be a JSON object.")
    return parsed


def _first_candidate_parts(data: dict[str, Any]) -> list[dict[str, Any]]:
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise GeminiError("Gemini response has no candidates.")
    first = candidates[0]
    if not isinstance(first, dict):
        raise GeminiError("Gemini response has invalid candidate format.")
    content = first.get("content")
    if not isinstance(content, dict):
        raise GeminiError("Gemini response has no content in the first candidate.")
    parts = content.get("parts")
    if not isinstance(parts, list):
        return []
    return [part for part in parts if isinstance(part, dict)]


def _extract_text(data: dict[str, Any]) -> str:
    chunks = [
        part["text"]
        for part in _first_candidate_parts(data)
        if isinstance(part.get("text"), str) and not part.get("thought")
    ]
    return "".join(chunks).strip()


def _extract_first_json_object(raw: str) -> dict[str, Any]:
    text = (raw or "").strip()
    if not text:
        return {}
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        decoder = json.JSONDecoder()
        for index, char in enumerate(text):
            if char != "{":
                continue
            try:
                payload, _ = decoder.raw_decode(text[index:])
                break
            except json.JSONDecodeError:
                continue
        else:
            raise GeminiError("Gemini script response is not valid JSON.")
    if not isinstance(payload, dict):
        raise GeminiError("Gemini script response must be a JSON object.")
    return payload


def _string_field(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if isinstance(value, str):
        return value.strip()
    return ""


def _history_turn(role: str, text: str) -> dict[str, object]:
    return {"role": role, "parts": [{"text": text}]}


def generate_meditation_content(request: ScriptRequest) -> MeditationSession:
    """Write the meditation script, title, and background image prompt."""
    if not request.params.is_complete():
        raise GeminiError("Mood and focus are required.")
    payload = {
        "contents": [_history_turn("user", build_script_prompt(request.params))],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": SCRIPT_RESPONSE_SCHEMA,
        },
    }
    response = _post_json(
        endpoint=request.endpoint,
        url=_model_endpoint(request.endpoint.base_url, request.model, "generateContent"),
        payload=payload,
    )
    parsed = _extract_first_json_object(_extract_text(response))
    return MeditationSession(
        title=_string_field(parsed, "title") or DEFAULT_TITLE,
        script=_string_field(parsed, "script"),
        image_prompt=_string_field(parsed, "imagePrompt") or DEFAULT_IMAGE_PROMPT,
    )


def generate_meditation_image(request: ImageRequest) -> GeneratedImage:
    """Render one background image for the session."""
    payload = {
        "instances": [{"prompt": build_image_prompt(request.prompt)}],
        "parameters": {
            "sampleCount": 1,
            "aspectRatio": request.aspect_ratio,
            "outputOptions": {"mimeType": request.mime_type},
        },
    }
    response = _post_json(
        endpoint=request.endpoint,
        url=_model_endpoint(request.endpoint.base_url, request.model, "predict"),
        payload=payload,
    )
    predictions = response.get("predictions")
    if not isinstance(predictions, list) or not predictions:
        raise GeminiError("Gemini image response has no predictions.")
    first = predictions[0]
    encoded = first.get("bytesBase64Encoded") if isinstance(first, dict) else None
    if not isinstance(encoded, str) or not encoded:
        raise GeminiError("Gemini image response has no image bytes.")
    try:
        data = base64.b64decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise GeminiError("Gemini image bytes are not valid base64.") from exc
    mime_type = str(first.get("mimeType") or request.mime_type)
    return GeneratedImage(data=data, mime_type=mime_type)


def generate_meditation_audio(request: SpeechRequest) -> AudioBuffer:
    """Synthesize the script as speech and decode it to an AudioBuffer."""
    text = (request.text or "").strip()
    if not text:
        raise GeminiError("Speech text is empty.")
    payload = {
        "contents": [{"parts": [{"text": text}]}],
        "generationConfig": {
            "responseModalities": ["AUDIO"],
            "speechConfig": {
                "voiceConfig": {
                    "prebuiltVoiceConfig": {"voiceName": request.voice},
                },
            },
        },
    }
    response = _post_json(
        endpoint=request.endpoint,
        url=_model_endpoint(request.endpoint.base_url, request.model, "generateContent"),
        payload=payload,
    )
    encoded = ""
    for part in _first_candidate_parts(response):
        inline = part.get("inlineData")
        if isinstance(inline, dict) and isinstance(inline.get("data"), str):
            encoded = inline["data"]
            break
    if not encoded:
        raise GeminiError("No audio data returned.")
    try:
        return AudioBuffer.from_base64(
            encoded,
            sample_rate=request.sample_rate,
            channels=request.channels,
        )
    except ValueError as exc:
        raise GeminiError(f"Audio decoding failed: {exc}") from exc


def send_chat_message(request: ChatRequest) -> str:
    """Send one user turn with prior history and return the guide's reply."""
    message = (request.message or "").strip()
    if not message:
        raise GeminiError("Chat message is empty.")
    contents = list(request.history) + [_history_turn("user", message)]
    payload = {
        "systemInstruction": {"parts": [{"text": request.system_instruction}]},
        "contents": contents,
    }
    response = _post_json(
        endpoint=request.endpoint,
        url=_model_endpoint(request.endpoint.base_url, request.model, "generateContent"),
        payload=payload,
    )
    return _extract_text(response)
