"""Tkinter desktop UI for ZenGen."""
from __future__ import annotations

import os
import threading
import time
import tkinter as tk
from tkinter import ttk
from typing import Any, Callable

from ..config import AppConfig
from ..constants import DEFAULT_DURATION, DURATION_CHOICES, LOADING_STEP_ERROR
from ..domain.session import AppView, GenerationParams, MeditationSession
from .common import (
    APP_TAGLINE,
    APP_TITLE,
    FOCUS_PLACEHOLDER,
    MOOD_PLACEHOLDER,
    can_generate,
)
from .desktop_types import DesktopApp
from .features.audio_backend import OutputContext
from .features.guide_chat_feature import GuideChatFeature
from .features.player_panel_feature import PlayerPanelFeature

ERROR_RETURN_DELAY_MS = 2000


class TkinterDesktopApp(DesktopApp):
    """Tkinter implementation of the ZenGen desktop UI."""

    def __init__(
        self,
        *,
        config: AppConfig,
        logger,
        generation_service,
        guide_chat,
        exporter=None,
        output_context_factory: Callable[[], OutputContext] | None = None,
    ) -> None:
        self.title = APP_TITLE
        self.config = config
        self.logger = logger
        self.generation_service = generation_service
        self.guide_chat = guide_chat
        self.exporter = exporter
        self.output_context_factory = output_context_factory or OutputContext

        self.root: tk.Tk | None = None
        self.view = AppView.HOME
        self.session: MeditationSession | None = None
        self.generate_in_progress = False
        self.generate_started_at = 0.0
        self.generate_timer_job: Any = None

        self.mood_var: tk.StringVar | None = None
        self.focus_var: tk.StringVar | None = None
        self.duration_var: tk.StringVar | None = None
        self.loading_step_var: tk.StringVar | None = None
        self.loading_timer_var: tk.StringVar | None = None
        self.home_status_var: tk.StringVar | None = None
        self.title_var: tk.StringVar | None = None
        self.time_var: tk.StringVar | None = None
        self.progress_var: tk.DoubleVar | None = None
        self.volume_var: tk.DoubleVar | None = None
        self.player_status_var: tk.StringVar | None = None
        self.chat_input_var: tk.StringVar | None = None
        self.chat_typing_var: tk.StringVar | None = None

        self.views: dict[AppView, ttk.Frame] = {}
        self.generate_btn: ttk.Button | None = None
        self.play_btn: ttk.Button | None = None
        self.restart_btn: ttk.Button | None = None
        self.save_audio_btn: ttk.Button | None = None
        self.volume_scale: ttk.Scale | None = None
        self.player_image_label: ttk.Label | None = None
        self.script_text: tk.Text | None = None
        self.chat_transcript: tk.Text | None = None
        self.chat_send_btn: ttk.Button | None = None

        self.player_panel = PlayerPanelFeature(self)
        self.chat_panel = GuideChatFeature(self)

    @property
    def player(self):
        return self.player_panel.player

    def launch(self) -> None:
        self._ensure_root()
        assert self.root is not None
        self.root.mainloop()

    def build_for_test(self) -> tk.Tk:
        """Build root/widgets without entering mainloop (for tests)."""
        self._ensure_root()
        assert self.root is not None
        return self.root

    def _ensure_root(self) -> None:
        if self.root is not None:
            return
        root = tk.Tk()
        self._configure_high_dpi(root)
        root.title(APP_TITLE)
        root.geometry("1100x820")
        root.minsize(760, 620)
        self.root = root
        self._configure_theme()
        self._init_tk_variables()
        self._build_layout()
        root.bind_all("<space>", self.player_panel.on_shortcut_play_pause, add="+")
        root.protocol("WM_DELETE_WINDOW", self._on_close)
        self._show_view(AppView.HOME)
        self.logger.debug("Tkinter UI wiring complete")

    def _configure_high_dpi(self, root: tk.Tk) -> None:
        if os.name != "nt":
            return
        try:
            import ctypes

            try:
                ctypes.windll.shcore.SetProcessDpiAwareness(1)
            except Exception:
                ctypes.windll.user32.SetProcessDPIAware()
        except Exception:
            pass
        try:
            pixels_per_inch = float(root.winfo_fpixels("1i"))
            scaling = max(1.0, min(2.5, pixels_per_inch / 72.0))
            root.tk.call("tk", "scaling", scaling)
        except Exception:
            pass

    def _configure_theme(self) -> None:
        assert self.root is not None
        style = ttk.Style(self.root)
        available = set(style.theme_names())
        for theme_name in ("clam", "alt", "default", "vista", "classic"):
            if theme_name in available:
                style.theme_use(theme_name)
                break

        bg = "#0f172a"
        card_bg = "#1e293b"
        text_primary = "#e2e8f0"
        text_muted = "#94a3b8"
        heading = "#f8fafc"
        accent = "#14b8a6"
        accent_hover = "#2dd4bf"
        button_bg = "#334155"
        button_hover = "#475569"
        disabled = "#64748b"
        self.root.configure(background=bg)
        style.configure(".", background=bg, foreground=text_primary, font=("Segoe UI", 10))
        style.configure("AppBg.TFrame", background=bg)
        style.configure("Card.TFrame", background=card_bg)
        style.configure("TLabel", background=bg, foreground=text_primary)
        style.configure("Card.TLabel", background=card_bg, foreground=text_primary)
        style.configure("Muted.TLabel", background=card_bg, foreground=text_muted, font=("Segoe UI", 9))
        style.configure("Hero.TLabel", background=bg, foreground=heading, font=("Segoe UI", 28, "bold"))
        style.configure("Title.TLabel", background=card_bg, foreground=heading, font=("Segoe UI", 16, "bold"))
        style.configure("TButton", padding=(10, 6), background=button_bg, foreground=text_primary)
        style.map(
            "TButton",
            background=[("disabled", card_bg), ("active", button_hover)],
            foreground=[("disabled", disabled)],
        )
        style.configure("Primary.TButton", background=accent, foreground=bg, font=("Segoe UI", 10, "bold"))
        style.map(
            "Primary.TButton",
            background=[("disabled", button_bg), ("active", accent_hover)],
            foreground=[("disabled", disabled)],
        )
        style.configure("Toolbutton", padding=(14, 6), background=button_bg, foreground=text_primary)
        style.map("Toolbutton", background=[("selected", accent), ("active", button_hover)])
        style.configure("Horizontal.TProgressbar", background=accent, troughcolor=button_bg)

    def _init_tk_variables(self) -> None:
        self.mood_var = tk.StringVar(value="")
        self.focus_var = tk.StringVar(value="")
        self.duration_var = tk.StringVar(value=DEFAULT_DURATION)
        self.loading_step_var = tk.StringVar(value="")
        self.loading_timer_var = tk.StringVar(value="")
        self.home_status_var = tk.StringVar(value="")
        self.title_var = tk.StringVar(value="")
        self.time_var = tk.StringVar(value="00:00 / 00:00")
        self.progress_var = tk.DoubleVar(value=0.0)
        self.volume_var = tk.DoubleVar(value=self.config.player_default_volume)
        self.player_status_var = tk.StringVar(value="")
        self.chat_input_var = tk.StringVar(value="")
        self.chat_typing_var = tk.StringVar(value="")
        self.mood_var.trace_add("write", lambda *_args: self._on_form_change())
        self.focus_var.trace_add("write", lambda *_args: self._on_form_change())

    def _build_layout(self) -> None:
        assert self.root is not None
        container = ttk.Frame(self.root, padding=20, style="AppBg.TFrame")
        container.pack(fill="both", expand=True)
        ttk.Label(container, text=APP_TITLE, style="Hero.TLabel").pack(anchor="center")
        ttk.Label(container, text=APP_TAGLINE).pack(anchor="center", pady=(0, 16))

        body = ttk.Frame(container, style="AppBg.TFrame")
        body.pack(fill="both", expand=True)
        self.views[AppView.HOME] = self._build_home_view(body)
        self.views[AppView.GENERATING] = self._build_generating_view(body)

        player_shell = ttk.Frame(body, style="AppBg.TFrame")
        self.chat_panel.build_panel(player_shell)
        self.player_panel.build_view(player_shell).pack(side="left", fill="both", expand=True)
        self.views[AppView.PLAYER] = player_shell

    def _build_home_view(self, parent: ttk.Frame) -> ttk.Frame:
        assert self.mood_var is not None and self.focus_var is not None
        frame = ttk.Frame(parent, padding=24, style="Card.TFrame")
        ttk.Label(frame, text="How are you feeling?", style="Card.TLabel").pack(anchor="w")
        ttk.Entry(frame, textvariable=self.mood_var).pack(fill="x", pady=(4, 0))
        ttk.Label(frame, text=MOOD_PLACEHOLDER, style="Muted.TLabel").pack(anchor="w", pady=(0, 12))
        ttk.Label(frame, text="What would you like to focus on?", style="Card.TLabel").pack(anchor="w")
        ttk.Entry(frame, textvariable=self.focus_var).pack(fill="x", pady=(4, 0))
        ttk.Label(frame, text=FOCUS_PLACEHOLDER, style="Muted.TLabel").pack(anchor="w", pady=(0, 12))

        ttk.Label(frame, text="Duration", style="Card.TLabel").pack(anchor="w")
        duration_row = ttk.Frame(frame, style="Card.TFrame")
        duration_row.pack(fill="x", pady=(4, 16))
        for choice in DURATION_CHOICES:
            ttk.Radiobutton(
                duration_row,
                text=choice,
                value=choice,
                variable=self.duration_var,
                style="Toolbutton",
            ).pack(side="left", padx=(0, 6))

        self.generate_btn = ttk.Button(
            frame, text="Generate Session", style="Primary.TButton", command=self._on_generate
        )
        self.generate_btn.pack(fill="x")
        self.generate_btn.state(["disabled"])
        ttk.Label(frame, textvariable=self.home_status_var, style="Muted.TLabel").pack(
            anchor="w", pady=(8, 0)
        )
        return frame

    def _build_generating_view(self, parent: ttk.Frame) -> ttk.Frame:
        frame = ttk.Frame(parent, padding=48, style="Card.TFrame")
        ttk.Progressbar(frame, mode="indeterminate", length=320).pack(pady=(0, 16))
        ttk.Label(frame, textvariable=self.loading_step_var, style="Title.TLabel").pack()
        ttk.Label(frame, textvariable=self.loading_timer_var, style="Muted.TLabel").pack(pady=(8, 0))
        return frame

    def _show_view(self, view: AppView) -> None:
        if self.view is AppView.PLAYER and view is not AppView.PLAYER:
            self.player_panel.close()
            self.chat_panel.hide()
        for key, frame in self.views.items():
            if key is view:
                frame.pack(fill="both", expand=True)
            else:
                frame.pack_forget()
        progress = self.views.get(AppView.GENERATING)
        if progress is not None:
            for child in progress.winfo_children():
                if isinstance(child, ttk.Progressbar):
                    if view is AppView.GENERATING:
                        child.start(15)
                    else:
                        child.stop()
        self.view = view
        self.logger.debug("View changed: %s", view.value)

    def _on_form_change(self) -> None:
        if self.generate_btn is None or self.mood_var is None or self.focus_var is None:
            return
        ready = can_generate(self.mood_var.get(), self.focus_var.get())
        self.generate_btn.state(["!disabled"] if ready and not self.generate_in_progress else ["disabled"])

    def _threaded(self, work: Callable[[], Any], on_success: Callable[[Any], None] | None = None) -> None:
        def _runner() -> None:
            try:
                result = work()
            except Exception as exc:  # pragma: no cover
                self.logger.exception("Tkinter UI action failed")
                message = str(exc)
                self._run_on_ui(lambda message=message: self._set_error_status(message))
                return
            if on_success is not None:
                self._run_on_ui(lambda: on_success(result))

        thread = threading.Thread(target=_runner, daemon=True)
        thread.start()

    def _run_on_ui(self, callback: Callable[[], None]) -> None:
        if self.root is None:
            return
        self.root.after(0, callback)

    def _set_error_status(self, message: str) -> None:
        if self.generate_in_progress:
            self._on_generation_failed()
            return
        target = self.player_status_var if self.view is AppView.PLAYER else self.home_status_var
        if target is not None:
            target.set(f"Error: {message}")

    def _on_generation_failed(self) -> None:
        self._finish_generation()
        if self.loading_step_var is not None:
            self.loading_step_var.set(LOADING_STEP_ERROR)
        if self.root is not None:
            self.root.after(ERROR_RETURN_DELAY_MS, self._return_home_after_error)

    def _return_home_after_error(self) -> None:
        if self.view is AppView.GENERATING:
            self._show_view(AppView.HOME)

    def _start_generate_timer(self) -> None:
        self._stop_generate_timer()
        if self.root is None:
            return
        self.generate_started_at = time.perf_counter()
        self._update_generate_timer()

    def _stop_generate_timer(self) -> None:
        if self.root is not None and self.generate_timer_job:
            try:
                self.root.after_cancel(self.generate_timer_job)
            except Exception:
                pass
        self.generate_timer_job = None
        self.generate_started_at = 0.0

    def _update_generate_timer(self) -> None:
        if self.root is None or self.loading_timer_var is None or not self.generate_in_progress:
            self.generate_timer_job = None
            return
        elapsed = max(0.0, time.perf_counter() - self.generate_started_at)
        self.loading_timer_var.set(f"{elapsed:.1f} s")
        self.generate_timer_job = self.root.after(100, self._update_generate_timer)

    def _write_text(self, widget: tk.Text | None, text: str) -> None:
        if widget is None:
            return
        widget.configure(state="normal")
        widget.delete("1.0", tk.END)
        widget.insert("1.0", text)
        widget.configure(state="disabled")

    def _on_generate(self) -> None:
        assert self.mood_var is not None and self.focus_var is not None and self.duration_var is not None
        if self.generate_in_progress:
            return
        params = GenerationParams(
            mood=self.mood_var.get(),
            focus=self.focus_var.get(),
            duration=self.duration_var.get(),
        )
        if not params.is_complete():
            return
        self.generate_in_progress = True
        if self.home_status_var is not None:
            self.home_status_var.set("")
        self._show_view(AppView.GENERATING)
        self._start_generate_timer()

        def on_step(message: str) -> None:
            self._run_on_ui(lambda: self.loading_step_var.set(message))

        def work() -> MeditationSession:
            return self.generation_service.generate(params, on_step=on_step)

        self._threaded(work, self._on_generation_done)

    def _finish_generation(self) -> None:
        self.generate_in_progress = False
        self._stop_generate_timer()
        self._on_form_change()

    def _on_generation_done(self, session: MeditationSession) -> None:
        self._finish_generation()
        self.session = session
        self.chat_panel.reset()
        self._show_view(AppView.PLAYER)
        self.player_panel.open_session(session)

    def _on_new_session(self) -> None:
        self.session = None
        self._show_view(AppView.HOME)

    def _on_save_script(self) -> None:
        session = self.session
        if session is None or self.exporter is None:
            return

        def on_success(path: str) -> None:
            self.player_status_var.set(f"Script saved: {path}")

        self._threaded(lambda: self.exporter.save_script(session), on_success)

    def _on_save_audio(self) -> None:
        session = self.session
        if session is None or self.exporter is None or not session.has_audio:
            return

        def on_success(path: str) -> None:
            self.player_status_var.set(f"Audio saved: {path}")

        self._threaded(lambda: self.exporter.save_audio(session), on_success)

    def _on_close(self) -> None:
        self.close()

    def close(self) -> None:
        self._stop_generate_timer()
        self.player_panel.shutdown()
        if self.root is not None:
            try:
                self.root.destroy()
            except tk.TclError:
                self.logger.debug("Tk root already destroyed")
            self.root = None


def create_tkinter_app(
    *,
    config: AppConfig,
    logger,
    generation_service,
    guide_chat,
    exporter=None,
    output_context_factory: Callable[[], OutputContext] | None = None,
) -> DesktopApp:
    """Create the Tkinter desktop app instance."""
    return TkinterDesktopApp(
        config=config,
        logger=logger,
        generation_service=generation_service,
        guide_chat=guide_chat,
        exporter=exporter,
        output_context_factory=output_context_factory,
    )
