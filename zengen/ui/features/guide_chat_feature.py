"""Zen Guide chat panel for the Tkinter app."""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Any

from ..common import GUIDE_TYPING_TEXT, format_chat_line


class GuideChatFeature:
    """Build the chat panel and relay messages to GuideChatService."""

    def __init__(self, host) -> None:
        self.host = host
        self.frame: ttk.Frame | None = None
        self.is_open = False

    def build_panel(self, parent: ttk.Frame) -> ttk.Frame:
        ui = self.host
        frame = ttk.Frame(parent, padding=12, style="Card.TFrame")
        ttk.Label(frame, text="Zen Guide", style="Title.TLabel").pack(anchor="w")
        transcript = tk.Text(frame, width=42, height=20, wrap="word", relief="flat")
        transcript.pack(fill="both", expand=True, pady=(8, 4))
        transcript.configure(state="disabled")
        ui.chat_transcript = transcript
        ttk.Label(frame, textvariable=ui.chat_typing_var, style="Muted.TLabel").pack(anchor="w")

        input_row = ttk.Frame(frame, style="Card.TFrame")
        input_row.pack(fill="x", pady=(4, 0))
        entry = ttk.Entry(input_row, textvariable=ui.chat_input_var)
        entry.pack(side="left", fill="x", expand=True)
        entry.bind("<Return>", self._on_return)
        ui.chat_send_btn = ttk.Button(input_row, text="Send", command=self.on_send)
        ui.chat_send_btn.pack(side="left", padx=(8, 0))
        self.frame = frame
        self.render()
        return frame

    def toggle(self) -> None:
        if self.frame is None:
            return
        if self.is_open:
            self.frame.pack_forget()
        else:
            self.frame.pack(side="right", fill="y", padx=(12, 0))
        self.is_open = not self.is_open

    def hide(self) -> None:
        if self.frame is not None and self.is_open:
            self.frame.pack_forget()
        self.is_open = False

    def reset(self) -> None:
        self.host.guide_chat.reset()
        self.host.chat_input_var.set("")
        self.render()

    def render(self) -> None:
        ui = self.host
        chat = ui.guide_chat
        typing = chat.is_typing
        lines = [format_chat_line(message) for message in chat.messages]
        ui._write_text(ui.chat_transcript, "\n\n".join(lines))
        if ui.chat_transcript is not None:
            ui.chat_transcript.see(tk.END)
        ui.chat_typing_var.set(GUIDE_TYPING_TEXT if typing else "")
        if ui.chat_send_btn is not None:
            ui.chat_send_btn.state(["disabled"] if typing else ["!disabled"])

    def on_send(self) -> None:
        ui = self.host
        if ui.guide_chat.begin(ui.chat_input_var.get()) is None:
            return
        ui.chat_input_var.set("")
        self.render()
        ui._threaded(ui.guide_chat.complete, lambda _reply: self.render())

    def _on_return(self, _event: tk.Event[Any]) -> str:
        self.on_send()
        return "break"
