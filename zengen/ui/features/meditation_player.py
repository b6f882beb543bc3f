"""Transport control and progress tracking for a decoded meditation track.

Playback position is never read back from the output device. Each play call
records an anchor on the device clock (``now - offset``); elapsed time is
``now - anchor``, so pausing and resuming any number of times does not drift.
All methods run on the UI thread. The progress tick reschedules itself through
the injected scheduler (``after``/``after_cancel``, as on a Tk root).
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

from ...domain.audio_buffer import AudioBuffer
from ...utils import coerce_float
from .audio_backend import (
    CONTEXT_RUNNING,
    BufferSourceNode,
    GainNode,
    OutputContext,
    OutputSuspended,
    PlaybackError,
)
from .playback_state import PlaybackSnapshot, PlaybackState, PlaybackStatus

Listener = Callable[[PlaybackSnapshot], None]


class Scheduler(Protocol):
    def after(self, ms: int, func: Callable[[], None]) -> Any: ...

    def after_cancel(self, id: Any) -> None: ...


class NoMediaAvailable(PlaybackError):
    """Raised internally when play is requested without a decoded buffer."""


class MeditationPlayer:
    """Play/pause/restart/volume over one pre-decoded buffer."""

    def __init__(
        self,
        *,
        output_context: OutputContext,
        scheduler: Scheduler,
        logger,
        volume: float = 0.8,
        tick_ms: int = 50,
        on_change: Listener | None = None,
    ) -> None:
        self.output_context = output_context
        self.scheduler = scheduler
        self.logger = logger
        self.tick_ms = max(1, int(tick_ms))
        self.state = PlaybackState(
            volume=coerce_float(volume, default=0.8, min_value=0.0, max_value=1.0)
        )
        self._buffer: AudioBuffer | None = None
        self._source: BufferSourceNode | None = None
        self._draining: BufferSourceNode | None = None
        self._gain: GainNode | None = None
        self._tick_job: Any = None
        self._disposed = False
        self._listeners: list[Listener] = []
        if on_change is not None:
            self._listeners.append(on_change)

    @property
    def buffer(self) -> AudioBuffer | None:
        return self._buffer

    @property
    def status(self) -> PlaybackStatus:
        return self.state.status

    @property
    def is_playing(self) -> bool:
        return self.state.status is PlaybackStatus.PLAYING

    @property
    def progress(self) -> float:
        return self.state.progress

    @property
    def volume(self) -> float:
        return self.state.volume

    @property
    def duration(self) -> float:
        return self._buffer.duration if self._buffer is not None else 0.0

    @property
    def no_media(self) -> bool:
        return self.state.no_media

    @property
    def has_active_output(self) -> bool:
        return self._source is not None

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            status=self.state.status,
            progress=self.state.progress,
            volume=self.state.volume,
            no_media=self.state.no_media,
            duration=self.duration,
        )

    def load(self, buffer: AudioBuffer | None) -> None:
        """Attach the session's buffer. ``None`` keeps the player idle."""
        self._stop_output()
        self.state.progress = 0.0
        self.state.anchor_time = 0.0
        if buffer is None or buffer.frames <= 0:
            self._buffer = None
            self.state.status = PlaybackStatus.IDLE
            self.state.no_media = True
            self.logger.warning("Meditation player has no media available")
        else:
            self._buffer = buffer
            self.state.status = PlaybackStatus.PAUSED
            self.state.no_media = False
            self.logger.debug(
                "Meditation player loaded %.2fs (%s ch @ %s Hz)",
                buffer.duration,
                buffer.channels,
                buffer.sample_rate,
            )
        self._notify()

    def play(self) -> bool:
        if self._disposed:
            self.logger.debug("Play ignored: player is disposed")
            return False
        try:
            buffer = self._require_buffer()
        except NoMediaAvailable:
            self.state.no_media = True
            self.logger.warning("Play requested with no media available")
            self._notify()
            return False
        if self.is_playing:
            self.logger.debug("Play ignored: already playing")
            return True
        if self.state.progress >= 1.0:
            self.state.progress = 0.0

        self._close_draining()
        offset = self.state.progress * buffer.duration
        source = self.output_context.create_buffer_source(buffer)
        if self._gain is None:
            self._gain = self.output_context.create_gain(self.state.volume)
        self._gain.value = self.state.volume
        source.connect(self._gain)
        try:
            self._start_source(source, offset)
        except Exception:
            self.logger.exception("Playback failed to start at %.2fs", offset)
            source.stop()
            self._notify()
            return False

        self._source = source
        self.state.anchor_time = self.output_context.current_time - offset
        self.state.status = PlaybackStatus.PLAYING
        self.logger.info("Playback started at %.2fs / %.2fs", offset, buffer.duration)
        self._schedule_tick()
        self._notify()
        return True

    def pause(self) -> None:
        if not self.is_playing:
            self.logger.debug("Pause ignored: not playing")
            return
        self._sync_progress()
        self._stop_output()
        self.state.status = PlaybackStatus.PAUSED
        self.logger.info(
            "Playback paused at %.2fs", self.state.progress * self.duration
        )
        self._notify()

    def toggle(self) -> bool:
        if self.is_playing:
            self.pause()
            return False
        return self.play()

    def restart(self) -> None:
        """Rewind to the beginning without starting playback."""
        self._stop_output()
        self.state.progress = 0.0
        self.state.anchor_time = self.output_context.current_time
        self.state.status = (
            PlaybackStatus.PAUSED if self._buffer is not None else PlaybackStatus.IDLE
        )
        self.logger.debug("Playback restarted")
        self._notify()

    def set_volume(self, level: Any) -> float:
        """Set the gain in [0, 1]. Out-of-range values are clamped."""
        volume = coerce_float(
            level, default=self.state.volume, min_value=0.0, max_value=1.0
        )
        try:
            requested = float(level)
        except (TypeError, ValueError):
            requested = None
        if requested is None or requested != volume:
            self.logger.warning("Invalid volume %r; using %.2f", level, volume)
        self.state.volume = volume
        if self._gain is not None:
            self._gain.value = volume
        self._notify()
        return volume

    def dispose(self) -> None:
        """Stop output and cancel the pending tick before the player is dropped."""
        self._stop_output()
        if self.state.status is PlaybackStatus.PLAYING:
            self.state.status = PlaybackStatus.PAUSED
        self._disposed = True
        self._listeners.clear()
        self.logger.debug("Meditation player disposed")

    def _require_buffer(self) -> AudioBuffer:
        if self._buffer is None:
            raise NoMediaAvailable("No decoded audio is available.")
        return self._buffer

    def _start_source(self, source: BufferSourceNode, offset: float) -> None:
        if self.output_context.state != CONTEXT_RUNNING:
            self.output_context.resume()
        try:
            source.start(offset)
        except OutputSuspended:
            self.logger.info("Audio output suspended; resuming before retry")
            self.output_context.resume()
            source.start(offset)

    def _stop_output(self) -> None:
        source = self._source
        self._source = None
        if source is not None:
            source.stop()
        self._close_draining()
        self._cancel_tick()

    def _release_finished_source(self) -> None:
        source = self._source
        self._source = None
        if source is not None and not source.release():
            # Device still plays its queued blocks; closed on the next stop.
            self._draining = source
        self._cancel_tick()

    def _close_draining(self) -> None:
        draining = self._draining
        self._draining = None
        if draining is not None and not draining.release():
            draining.stop()

    def _sync_progress(self) -> None:
        duration = self.duration
        if duration <= 0:
            return
        elapsed = self.output_context.current_time - self.state.anchor_time
        progress = min(max(elapsed / duration, 0.0), 1.0)
        self.state.progress = max(self.state.progress, progress)

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        self._tick_job = self.scheduler.after(self.tick_ms, self._on_tick)

    def _cancel_tick(self) -> None:
        job = self._tick_job
        self._tick_job = None
        if job is None:
            return
        try:
            self.scheduler.after_cancel(job)
        except Exception:
            self.logger.debug("Failed to cancel progress tick", exc_info=True)

    def _on_tick(self) -> None:
        self._tick_job = None
        if self._disposed or not self.is_playing:
            return
        self._sync_progress()
        if self.state.progress >= 1.0:
            self.state.progress = 1.0
            self.state.status = PlaybackStatus.PAUSED
            self._release_finished_source()
            self.logger.info("Playback complete")
            self._notify()
            return
        self._notify()
        self._schedule_tick()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                self.logger.exception("Player listener failed")
