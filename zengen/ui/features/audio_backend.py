"""Audio output graph used by the meditation player.

A ``BufferSourceNode`` plays one pass over a decoded buffer through a
sounddevice callback stream; its samples are scaled by a ``GainNode`` on every
audio block, so volume changes are heard without restarting playback.
"""

from __future__ import annotations

import time
from typing import Any, Callable

from ...domain.audio_buffer import AudioBuffer

try:
    import sounddevice as _sd
except Exception:  # pragma: no cover - PortAudio may be missing at import time
    _sd = None

CONTEXT_SUSPENDED = "suspended"
CONTEXT_RUNNING = "running"
CONTEXT_CLOSED = "closed"


class PlaybackError(RuntimeError):
    """Base error for audio output failures."""


class OutputSuspended(PlaybackError):
    """Raised when output is started while the context is not running."""


class GainNode:
    """Volume stage between a source node and the output device."""

    def __init__(self, value: float = 1.0) -> None:
        self.value = float(value)


class BufferSourceNode:
    """One playback instance of an immutable buffer. Single use."""

    def __init__(self, context: "OutputContext", buffer: AudioBuffer) -> None:
        self._context = context
        self.buffer = buffer
        self.gain: GainNode | None = None
        self.started = False
        self.finished = False
        self._stream = None
        self._cursor = 0

    def connect(self, gain: GainNode) -> GainNode:
        self.gain = gain
        return gain

    @property
    def active(self) -> bool:
        return self._stream is not None and not self.finished

    def start(self, offset: float = 0.0) -> None:
        if self.started:
            raise PlaybackError("Buffer source can only be started once.")
        if self._context.state != CONTEXT_RUNNING:
            raise OutputSuspended(f"Output context is {self._context.state}.")
        frame = int(round(max(0.0, float(offset)) * self.buffer.sample_rate))
        self._cursor = min(frame, self.buffer.frames)
        stream = self._context.open_stream(
            sample_rate=self.buffer.sample_rate,
            channels=self.buffer.channels,
            callback=self._callback,
            finished_callback=self._on_finished,
        )
        stream.start()
        self._stream = stream
        self.started = True

    def _callback(self, outdata, frames, _time_info, _status) -> None:
        start = self._cursor
        chunk = self.buffer.samples[start : start + frames]
        count = int(chunk.shape[0])
        gain = self.gain.value if self.gain is not None else 1.0
        if count:
            if gain == 1.0:
                outdata[:count] = chunk
            else:
                outdata[:count] = chunk * gain
        if count < frames:
            outdata[count:].fill(0)
        self._cursor = start + count
        if count < frames:
            raise self._context.callback_stop

    def _on_finished(self) -> None:
        self.finished = True

    def stop(self) -> None:
        """Stop and close the stream. Safe to call any number of times."""
        stream = self._stream
        self._stream = None
        if stream is None:
            return
        try:
            stream.stop()
        except Exception:
            pass
        try:
            stream.close()
        except Exception:
            pass

    def release(self) -> bool:
        """Close a stream that has played to its end.

        Returns False and keeps the stream open while the device is still
        draining queued blocks; call ``release`` again later or ``stop``.
        """
        stream = self._stream
        if stream is None:
            return True
        if not self.finished and getattr(stream, "active", False):
            return False
        self._stream = None
        try:
            stream.close()
        except Exception:
            pass
        return True


class OutputContext:
    """Device clock and factory for output nodes.

    Starts suspended; ``resume`` checks that an output device exists.
    """

    def __init__(
        self,
        *,
        sd_module=None,
        clock: Callable[[], float] = time.monotonic,
        device: Any = None,
    ) -> None:
        self._sd = sd_module if sd_module is not None else _sd
        if self._sd is None:
            raise RuntimeError("sounddevice is not available")
        self._clock = clock
        self.device = device
        self.state = CONTEXT_SUSPENDED

    @property
    def current_time(self) -> float:
        return float(self._clock())

    @property
    def callback_stop(self) -> type[Exception]:
        return self._sd.CallbackStop

    def resume(self) -> None:
        if self.state == CONTEXT_CLOSED:
            raise PlaybackError("Output context is closed.")
        if self.state == CONTEXT_RUNNING:
            return
        try:
            self._sd.query_devices(self.device, kind="output")
        except Exception as exc:
            raise OutputSuspended("No audio output device is available.") from exc
        self.state = CONTEXT_RUNNING

    def suspend(self) -> None:
        if self.state == CONTEXT_RUNNING:
            self.state = CONTEXT_SUSPENDED

    def close(self) -> None:
        self.state = CONTEXT_CLOSED

    def create_buffer_source(self, buffer: AudioBuffer) -> BufferSourceNode:
        return BufferSourceNode(self, buffer)

    def create_gain(self, value: float = 1.0) -> GainNode:
        return GainNode(value)

    def open_stream(self, *, sample_rate: int, channels: int, callback, finished_callback):
        return self._sd.OutputStream(
            samplerate=int(sample_rate),
            channels=int(channels),
            dtype="float32",
            device=self.device,
            callback=callback,
            finished_callback=finished_callback,
        )
