"""Decoded audio sample buffers."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

import numpy as np

from ..constants import TTS_CHANNELS, TTS_SAMPLE_RATE


@dataclass(frozen=True, eq=False)
class AudioBuffer:
    """Immutable decoded audio, float32 samples shaped (frames, channels)."""

    samples: np.ndarray
    sample_rate: int
    channels: int

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError("Sample rate must be positive.")
        data = np.array(self.samples, dtype=np.float32, copy=True)
        if data.ndim == 1:
            data = data.reshape(-1, 1)
        if data.ndim != 2:
            raise ValueError("Unsupported audio shape.")
        if data.shape[1] != self.channels:
            raise ValueError(
                f"Sample data has {data.shape[1]} channel(s), expected {self.channels}."
            )
        data.setflags(write=False)
        object.__setattr__(self, "samples", data)

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        return self.frames / float(self.sample_rate)

    @classmethod
    def from_base64(
        cls,
        encoded: str,
        *,
        sample_rate: int = TTS_SAMPLE_RATE,
        channels: int = TTS_CHANNELS,
    ) -> "AudioBuffer":
        try:
            raw = base64.b64decode(encoded, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Audio payload is not valid base64.") from exc
        return decode_pcm16(raw, sample_rate=sample_rate, channels=channels)


def decode_pcm16(
    data: bytes,
    *,
    sample_rate: int = TTS_SAMPLE_RATE,
    channels: int = TTS_CHANNELS,
) -> AudioBuffer:
    """Decode little-endian signed 16-bit interleaved PCM into an AudioBuffer.

    A trailing partial frame is dropped. Samples are scaled to [-1.0, 1.0).
    """
    if channels <= 0:
        raise ValueError("Channel count must be positive.")
    frame_bytes = 2 * channels
    usable = len(data) - (len(data) % frame_bytes)
    if usable <= 0:
        raise ValueError("Audio payload is empty.")
    pcm = np.frombuffer(data[:usable], dtype="<i2")
    samples = pcm.astype(np.float32) / 32768.0
    return AudioBuffer(
        samples=samples.reshape(-1, channels),
        sample_rate=int(sample_rate),
        channels=int(channels),
    )
