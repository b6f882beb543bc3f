import base64

import numpy as np
import pytest

from zengen.domain.audio_buffer import AudioBuffer, decode_pcm16


def test_decode_pcm16_scales_little_endian_samples():
    raw = np.array([0, 16384, -32768, 32767], dtype="<i2").tobytes()

    buffer = decode_pcm16(raw, sample_rate=24000, channels=1)

    assert buffer.frames == 4
    assert buffer.channels == 1
    np.testing.assert_allclose(
        buffer.samples[:, 0], [0.0, 0.5, -1.0, 32767 / 32768.0]
    )
    assert buffer.duration == pytest.approx(4 / 24000)


def test_decode_pcm16_interleaves_channels_and_drops_partial_frame():
    raw = np.array([1000, -1000, 2000, -2000, 3000], dtype="<i2").tobytes()

    buffer = decode_pcm16(raw, sample_rate=8000, channels=2)

    assert buffer.samples.shape == (2, 2)
    assert buffer.samples[1, 0] == pytest.approx(2000 / 32768.0)
    assert buffer.samples[1, 1] == pytest.approx(-2000 / 32768.0)


def test_decode_pcm16_rejects_empty_payload():
    with pytest.raises(ValueError, match="empty"):
        decode_pcm16(b"\x01", channels=1)
    with pytest.raises(ValueError, match="Channel count"):
        decode_pcm16(b"\x00\x00", channels=0)


def test_from_base64_uses_tts_defaults():
    pcm = np.full(48000, 8192, dtype="<i2").tobytes()
    encoded = base64.b64encode(pcm).decode("ascii")

    buffer = AudioBuffer.from_base64(encoded)

    assert buffer.sample_rate == 24000
    assert buffer.channels == 1
    assert buffer.duration == pytest.approx(2.0)
    assert float(buffer.samples[0, 0]) == pytest.approx(0.25)


def test_buffer_is_read_only_and_validates_shape():
    source = np.zeros(10, dtype=np.float64)
    buffer = AudioBuffer(samples=source, sample_rate=10, channels=1)

    assert buffer.samples.dtype == np.float32
    assert buffer.samples.shape == (10, 1)
    with pytest.raises(ValueError):
        buffer.samples[0, 0] = 1.0
    source[0] = 5.0
    assert buffer.samples[0, 0] == 0.0

    with pytest.raises(ValueError, match="expected 2"):
        AudioBuffer(samples=np.zeros((4, 1)), sample_rate=10, channels=2)
    with pytest.raises(ValueError, match="Sample rate"):
        AudioBuffer(samples=np.zeros(4), sample_rate=0, channels=1)
