import base64
import io
import json
import urllib.error

import numpy as np
import pytest

from zengen.domain.session import GenerationParams
from zengen.integrations import gemini


def _endpoint(**overrides):
    values = {
        "base_url": "https://gemini.test/v1beta/",
        "api_key": "secret",
        "timeout_seconds": 30,
    }
    values.update(overrides)
    return gemini.GeminiEndpoint(**values)


def _text_response(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class _Response:
    def __init__(self, payload):
        self._payload = payload

    def read(self):
        return self._payload

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        return False


def test_generate_meditation_content_parses_schema_response(monkeypatch):
    captured = {}

    def fake_post(**kwargs):
        captured.update(kwargs)
        return _text_response(
            json.dumps(
                {
                    "title": " Evening Calm ",
                    "script": "Breathe in.\nBreathe out.",
                    "imagePrompt": "Misty lake",
                }
            )
        )

    monkeypatch.setattr(gemini, "_post_json", fake_post)
    session = gemini.generate_meditation_content(
        gemini.ScriptRequest(
            params=GenerationParams(mood="tired", focus="sleep", duration="Long"),
            endpoint=_endpoint(),
            model="script-model",
        )
    )

    assert session.title == "Evening Calm"
    assert session.script == "Breathe in.\nBreathe out."
    assert session.image_prompt == "Misty lake"
    assert captured["url"] == "https://gemini.test/v1beta/models/script-model:generateContent"
    config = captured["payload"]["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert config["responseSchema"]["required"] == ["title", "script", "imagePrompt"]
    assert '"tired"' in captured["payload"]["contents"][0]["parts"][0]["text"]


def test_generate_meditation_content_applies_defaults(monkeypatch):
    monkeypatch.setattr(
        gemini,
        "_post_json",
        lambda **_: _text_response('Sure! {"script": "Relax."} Enjoy.'),
    )
    session = gemini.generate_meditation_content(
        gemini.ScriptRequest(
            params=GenerationParams(mood="calm", focus="breath"),
            endpoint=_endpoint(),
            model="m",
        )
    )
    assert session.title == "Meditation Session"
    assert session.script == "Relax."
    assert session.image_prompt == "A peaceful abstract landscape with soft colors"

    monkeypatch.setattr(gemini, "_post_json", lambda **_: _text_response(""))
    empty = gemini.generate_meditation_content(
        gemini.ScriptRequest(
            params=GenerationParams(mood="calm", focus="breath"),
            endpoint=_endpoint(),
            model="m",
        )
    )
    assert empty.script == ""


def test_generate_meditation_content_rejects_invalid_json(monkeypatch):
    monkeypatch.setattr(gemini, "_post_json", lambda **_: _text_response("not-json"))
    with pytest.raises(gemini.GeminiError, match="not valid JSON"):
        gemini.generate_meditation_content(
            gemini.ScriptRequest(
                params=GenerationParams(mood="calm", focus="breath"),
                endpoint=_endpoint(),
                model="m",
            )
        )


def test_generate_meditation_image_decodes_prediction(monkeypatch):
    captured = {}
    png = b"\x89PNG\r\n\x1a\nfake"

    def fake_post(**kwargs):
        captured.update(kwargs)
        return {
            "predictions": [
                {"bytesBase64Encoded": base64.b64encode(png).decode("ascii"), "mimeType": "image/png"}
            ]
        }

    monkeypatch.setattr(gemini, "_post_json", fake_post)
    image = gemini.generate_meditation_image(
        gemini.ImageRequest(prompt="Misty lake", endpoint=_endpoint(), model="imagen")
    )

    assert image.data == png
    assert image.data_url.startswith("data:image/png;base64,")
    assert captured["url"].endswith("/models/imagen:predict")
    parameters = captured["payload"]["parameters"]
    assert parameters == {
        "sampleCount": 1,
        "aspectRatio": "3:4",
        "outputOptions": {"mimeType": "image/png"},
    }
    assert captured["payload"]["instances"][0]["prompt"].startswith("Misty lake, photorealistic")


def test_generate_meditation_image_requires_bytes(monkeypatch):
    monkeypatch.setattr(gemini, "_post_json", lambda **_: {"predictions": [{}]})
    with pytest.raises(gemini.GeminiError, match="no image bytes"):
        gemini.generate_meditation_image(
            gemini.ImageRequest(prompt="x", endpoint=_endpoint(), model="imagen")
        )


def test_generate_meditation_audio_decodes_inline_pcm(monkeypatch):
    captured = {}
    pcm = np.array([0, 16384, -16384, 0], dtype="<i2").tobytes()

    def fake_post(**kwargs):
        captured.update(kwargs)
        return {
            "candidates": [
                {
                    "content": {
                        "parts": [
                            {"inlineData": {"mimeType": "audio/L16;rate=24000", "data": base64.b64encode(pcm).decode()}}
                        ]
                    }
                }
            ]
        }

    monkeypatch.setattr(gemini, "_post_json", fake_post)
    buffer = gemini.generate_meditation_audio(
        gemini.SpeechRequest(text="Breathe.", endpoint=_endpoint(), model="tts")
    )

    assert buffer.sample_rate == 24000
    assert buffer.frames == 4
    assert buffer.samples[1, 0] == pytest.approx(0.5)
    config = captured["payload"]["generationConfig"]
    assert config["responseModalities"] == ["AUDIO"]
    voice = config["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]["voiceName"]
    assert voice == "Kore"


def test_generate_meditation_audio_errors(monkeypatch):
    monkeypatch.setattr(gemini, "_post_json", lambda **_: _text_response("no audio"))
    with pytest.raises(gemini.GeminiError, match="No audio data"):
        gemini.generate_meditation_audio(
            gemini.SpeechRequest(text="Breathe.", endpoint=_endpoint(), model="tts")
        )

    with pytest.raises(gemini.GeminiError, match="empty"):
        gemini.generate_meditation_audio(
            gemini.SpeechRequest(text="  ", endpoint=_endpoint(), model="tts")
        )


def test_send_chat_message_sends_history_and_system_instruction(monkeypatch):
    captured = {}

    def fake_post(**kwargs):
        captured.update(kwargs)
        return {
            "candidates": [
                {
                    "content": {
                        "parts": [
                            {"text": "thinking...", "thought": True},
                            {"text": " Let your shoulders soften. "},
                        ]
                    }
                }
            ]
        }

    monkeypatch.setattr(gemini, "_post_json", fake_post)
    history = [
        {"role": "user", "parts": [{"text": "Hi"}]},
        {"role": "model", "parts": [{"text": "Hello"}]},
    ]
    reply = gemini.send_chat_message(
        gemini.ChatRequest(message="I feel tense", endpoint=_endpoint(), model="chat", history=history)
    )

    assert reply == "Let your shoulders soften."
    contents = captured["payload"]["contents"]
    assert contents[:2] == history
    assert contents[-1] == {"role": "user", "parts": [{"text": "I feel tense"}]}
    system = captured["payload"]["systemInstruction"]["parts"][0]["text"]
    assert "meditation teacher" in system


def test_send_chat_message_returns_empty_text_when_reply_has_none(monkeypatch):
    monkeypatch.setattr(
        gemini,
        "_post_json",
        lambda **_: {"candidates": [{"content": {"parts": []}}]},
    )
    reply = gemini.send_chat_message(
        gemini.ChatRequest(message="hello", endpoint=_endpoint(), model="chat")
    )
    assert reply == ""


def test_post_json_sends_api_key_header(monkeypatch):
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["request"] = request
        captured["timeout"] = timeout
        return _Response(b'{"ok": true}')

    monkeypatch.setattr(gemini.urllib.request, "urlopen", fake_urlopen)
    result = gemini._post_json(
        endpoint=_endpoint(timeout_seconds=12),
        url="https://gemini.test/v1beta/models/m:generateContent",
        payload={"contents": []},
    )

    assert result == {"ok": True}
    request = captured["request"]
    assert request.get_header("X-goog-api-key") == "secret"
    assert request.get_method() == "POST"
    assert json.loads(request.data.decode("utf-8")) == {"contents": []}
    assert captured["timeout"] == 12.0


def test_post_json_without_timeout_omits_argument(monkeypatch):
    calls = []

    def fake_urlopen(request, **kwargs):
        calls.append(kwargs)
        return _Response(b"{}")

    monkeypatch.setattr(gemini.urllib.request, "urlopen", fake_urlopen)
    gemini._post_json(endpoint=_endpoint(timeout_seconds=0), url="https://x", payload={})
    assert calls == [{}]


def test_post_json_maps_transport_errors(monkeypatch):
    with pytest.raises(gemini.GeminiError, match="API key is empty"):
        gemini._post_json(endpoint=_endpoint(api_key=" "), url="https://x", payload={})

    def http_error(request, timeout=None):
        raise urllib.error.HTTPError(
            request.full_url, 429, "Too Many Requests", {}, io.BytesIO(b"quota exceeded")
        )

    monkeypatch.setattr(gemini.urllib.request, "urlopen", http_error)
    with pytest.raises(gemini.GeminiError, match="HTTP 429: quota exceeded"):
        gemini._post_json(endpoint=_endpoint(), url="https://x", payload={})

    def url_error(request, timeout=None):
        raise urllib.error.URLError("refused")

    monkeypatch.setattr(gemini.urllib.request, "urlopen", url_error)
    with pytest.raises(gemini.GeminiError, match="Failed to reach"):
        gemini._post_json(endpoint=_endpoint(), url="https://x", payload={})

    monkeypatch.setattr(gemini.urllib.request, "urlopen", lambda request, timeout=None: _Response(b"[1]"))
    with pytest.raises(gemini.GeminiError, match="JSON object"):
        gemini._post_json(endpoint=_endpoint(), url="https://x", payload={})


def test_model_endpoint_validates_inputs():
    assert (
        gemini._model_endpoint("https://h/v1beta/", "gemini-2.5-flash", "generateContent")
        == "https://h/v1beta/models/gemini-2.5-flash:generateContent"
    )
    with pytest.raises(gemini.GeminiError, match="model name"):
        gemini._model_endpoint("https://h", " ", "predict")
    with pytest.raises(gemini.GeminiError, match="base URL"):
        gemini._model_endpoint("", "m", "predict")
