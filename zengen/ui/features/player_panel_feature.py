"""Player view wiring for the Tkinter app."""

from __future__ import annotations

import base64
import tkinter as tk
from tkinter import ttk
from typing import Any

from ...domain.session import AppView, MeditationSession
from ..common import NO_MEDIA_TEXT, play_button_label, playback_time_label
from .audio_backend import OutputContext
from .meditation_player import MeditationPlayer
from .playback_state import PlaybackSnapshot

_IMAGE_MAX_HEIGHT = 420


class PlayerPanelFeature:
    """Build the player view and bind it to a MeditationPlayer."""

    def __init__(self, host) -> None:
        self.host = host
        self.player: MeditationPlayer | None = None
        self.output_context: OutputContext | None = None
        self.photo: tk.PhotoImage | None = None

    def build_view(self, parent: ttk.Frame) -> ttk.Frame:
        ui = self.host
        frame = ttk.Frame(parent, padding=16, style="Card.TFrame")

        ui.player_image_label = ttk.Label(frame, anchor="center", style="Card.TLabel")
        ui.player_image_label.pack(fill="x", pady=(0, 12))
        ttk.Label(frame, textvariable=ui.title_var, style="Title.TLabel").pack(anchor="center")

        progress_row = ttk.Frame(frame, style="Card.TFrame")
        progress_row.pack(fill="x", pady=(12, 4))
        ttk.Progressbar(
            progress_row,
            orient="horizontal",
            mode="determinate",
            maximum=1.0,
            variable=ui.progress_var,
        ).pack(side="left", fill="x", expand=True)
        ttk.Label(progress_row, textvariable=ui.time_var, width=14, style="Card.TLabel").pack(
            side="left", padx=(12, 0)
        )

        controls = ttk.Frame(frame, style="Card.TFrame")
        controls.pack(fill="x", pady=(8, 4))
        ui.restart_btn = ttk.Button(controls, text="Restart", command=self.on_restart)
        ui.restart_btn.pack(side="left")
        ui.play_btn = ttk.Button(
            controls, text="Play", style="Primary.TButton", command=self.on_play_pause
        )
        ui.play_btn.pack(side="left", padx=(8, 0))
        ttk.Label(controls, text="Volume", style="Card.TLabel").pack(side="left", padx=(16, 6))
        ui.volume_scale = ttk.Scale(
            controls,
            from_=0.0,
            to=1.0,
            variable=ui.volume_var,
            command=self.on_volume,
        )
        ui.volume_scale.pack(side="left", fill="x", expand=True)
        ttk.Label(frame, textvariable=ui.player_status_var, style="Muted.TLabel").pack(anchor="w")

        script_box = tk.Text(frame, height=12, wrap="word", relief="flat")
        script_box.pack(fill="both", expand=True, pady=(8, 8))
        script_box.configure(state="disabled")
        ui.script_text = script_box

        actions = ttk.Frame(frame, style="Card.TFrame")
        actions.pack(fill="x")
        ttk.Button(actions, text="New Session", command=ui._on_new_session).pack(side="left")
        ttk.Button(actions, text="Save Script", command=ui._on_save_script).pack(
            side="left", padx=(8, 0)
        )
        ui.save_audio_btn = ttk.Button(actions, text="Save Audio", command=ui._on_save_audio)
        ui.save_audio_btn.pack(side="left", padx=(8, 0))
        ttk.Button(actions, text="Zen Guide", command=ui.chat_panel.toggle).pack(side="right")
        return frame

    def _ensure_output_context(self) -> OutputContext | None:
        if self.output_context is not None:
            return self.output_context
        factory = self.host.output_context_factory
        try:
            self.output_context = factory()
        except Exception:
            self.host.logger.exception("Audio output is unavailable")
            return None
        return self.output_context

    def open_session(self, session: MeditationSession) -> None:
        ui = self.host
        self.close()
        ui.title_var.set(session.title)
        ui._write_text(ui.script_text, "\n\n".join(session.script_lines()))
        self._show_image(session)

        context = self._ensure_output_context()
        if context is None:
            ui.player_status_var.set("Audio output device is unavailable.")
            ui.play_btn.state(["disabled"])
            ui.restart_btn.state(["disabled"])
            ui.save_audio_btn.state(["!disabled"] if session.has_audio else ["disabled"])
            return
        assert ui.root is not None
        player = MeditationPlayer(
            output_context=context,
            scheduler=ui.root,
            logger=ui.logger,
            volume=ui.config.player_default_volume,
            tick_ms=ui.config.player_tick_ms,
            on_change=self.render,
        )
        ui.volume_var.set(player.volume)
        self.player = player
        player.load(session.audio if session.has_audio else None)
        ui.save_audio_btn.state(["!disabled"] if session.has_audio else ["disabled"])

    def _show_image(self, session: MeditationSession) -> None:
        ui = self.host
        self.photo = None
        ui.player_image_label.configure(image="", text="")
        if not session.image_bytes:
            ui.player_image_label.configure(text=session.image_prompt)
            return
        try:
            photo = tk.PhotoImage(data=base64.b64encode(session.image_bytes).decode("ascii"))
        except tk.TclError:
            ui.logger.warning("Session image format is not supported by Tk: %s", session.image_mime)
            ui.player_image_label.configure(text=session.image_prompt)
            return
        factor = max(1, -(-int(photo.height()) // _IMAGE_MAX_HEIGHT))
        if factor > 1:
            photo = photo.subsample(factor, factor)
        self.photo = photo
        ui.player_image_label.configure(image=photo)

    def render(self, snapshot: PlaybackSnapshot) -> None:
        ui = self.host
        ui.progress_var.set(snapshot.progress)
        ui.time_var.set(playback_time_label(snapshot))
        ui.play_btn.configure(text=play_button_label(snapshot))
        if snapshot.no_media:
            ui.play_btn.state(["disabled"])
            ui.restart_btn.state(["disabled"])
            ui.player_status_var.set(NO_MEDIA_TEXT)
            return
        ui.play_btn.state(["!disabled"])
        ui.restart_btn.state(["!disabled"])
        if snapshot.is_playing:
            ui.player_status_var.set("Breathe in...")
        elif snapshot.progress >= 1.0:
            ui.player_status_var.set("Session complete.")
        else:
            ui.player_status_var.set("")

    def on_play_pause(self) -> None:
        if self.player is not None:
            self.player.toggle()

    def on_restart(self) -> None:
        if self.player is not None:
            self.player.restart()

    def on_volume(self, value: Any) -> None:
        if self.player is not None:
            self.player.set_volume(value)

    def on_shortcut_play_pause(self, event: tk.Event[Any]) -> str | None:
        if self.player is None or self.host.view is not AppView.PLAYER:
            return None
        widget = getattr(event, "widget", None)
        # Inputs and buttons handle space themselves.
        if isinstance(widget, (tk.Entry, ttk.Entry, tk.Text, tk.Button, ttk.Button)):
            return None
        self.player.toggle()
        return "break"

    def close(self) -> None:
        """Dispose the current player; no callback fires afterwards."""
        player = self.player
        self.player = None
        if player is not None:
            player.dispose()

    def shutdown(self) -> None:
        self.close()
        context = self.output_context
        self.output_context = None
        if context is not None:
            context.close()
