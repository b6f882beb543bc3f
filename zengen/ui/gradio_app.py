"""Gradio UI construction for the ZenGen web mode."""
from __future__ import annotations

import html
import os
from typing import Callable

import gradio as gr

from ..config import AppConfig
from ..constants import DEFAULT_DURATION, DURATION_CHOICES, LOADING_STEP_ERROR
from ..domain.session import GenerationParams
from .common import (
    APP_TAGLINE,
    APP_TITLE,
    FOCUS_PLACEHOLDER,
    MOOD_PLACEHOLDER,
    NO_MEDIA_TEXT,
    can_generate,
    transcript_markdown,
)

UI_PRIMARY_HUE = os.getenv("UI_PRIMARY_HUE", "teal").strip() or "teal"
APP_THEME = gr.themes.Base(primary_hue=UI_PRIMARY_HUE)

_STEP_PROGRESS = {0: 0.1, 1: 0.5}


def session_image_html(image_url: str | None, alt: str) -> str:
    if not image_url:
        return ""
    return (
        f'<img src="{html.escape(image_url, quote=True)}" alt="{html.escape(alt, quote=True)}" '
        'style="width:100%;max-height:520px;object-fit:cover;border-radius:16px;" />'
    )


def create_gradio_app(
    *,
    config: AppConfig,
    logger,
    generation_service,
    guide_chat_factory: Callable[[], object],
) -> gr.Blocks:
    def on_form_change(mood, focus):
        return gr.update(interactive=can_generate(mood, focus))

    def generate(mood, focus, duration, progress=gr.Progress()):
        params = GenerationParams(mood=mood, focus=focus, duration=duration)
        steps: list[str] = []

        def on_step(message: str) -> None:
            progress(_STEP_PROGRESS.get(len(steps), 0.9), desc=message)
            steps.append(message)

        try:
            session = generation_service.generate(params, on_step=on_step)
        except Exception as exc:
            logger.exception("Web generation failed")
            raise gr.Error(LOADING_STEP_ERROR) from exc
        audio = None
        status = ""
        if session.has_audio:
            audio = (session.audio.sample_rate, session.audio.samples)
        else:
            status = NO_MEDIA_TEXT
        return (
            f"## {session.title}",
            session_image_html(session.image_url, session.image_prompt),
            audio,
            "\n\n".join(session.script_lines()),
            status,
        )

    def chat_send(message, chat):
        if chat is None:
            chat = guide_chat_factory()
        chat.send(message)
        return "", transcript_markdown(chat.messages), chat

    def chat_reset(chat):
        if chat is None:
            chat = guide_chat_factory()
        chat.reset()
        return transcript_markdown(chat.messages), chat

    with gr.Blocks(theme=APP_THEME, title=APP_TITLE) as app:
        chat_state = gr.State(None)
        gr.Markdown(f"# {APP_TITLE}\n{APP_TAGLINE}")
        with gr.Row():
            with gr.Column(scale=1):
                mood = gr.Textbox(label="How are you feeling?", placeholder=MOOD_PLACEHOLDER)
                focus = gr.Textbox(
                    label="What would you like to focus on?", placeholder=FOCUS_PLACEHOLDER
                )
                duration = gr.Radio(
                    choices=list(DURATION_CHOICES),
                    value=DEFAULT_DURATION,
                    label="Duration",
                )
                generate_btn = gr.Button("Generate Session", variant="primary", interactive=False)
            with gr.Column(scale=2):
                title = gr.Markdown()
                image = gr.HTML()
                audio = gr.Audio(label="Meditation", type="numpy", interactive=False)
                status = gr.Markdown()
                script = gr.Textbox(label="Script", lines=12, interactive=False)
        with gr.Accordion("Zen Guide", open=False):
            transcript = gr.Markdown()
            with gr.Row():
                chat_input = gr.Textbox(show_label=False, placeholder="Ask your guide...", scale=4)
                send_btn = gr.Button("Send", scale=1)
            clear_btn = gr.Button("Start over", size="sm")

        mood.change(on_form_change, inputs=[mood, focus], outputs=[generate_btn], queue=False)
        focus.change(on_form_change, inputs=[mood, focus], outputs=[generate_btn], queue=False)
        generate_btn.click(
            fn=generate,
            inputs=[mood, focus, duration],
            outputs=[title, image, audio, script, status],
            api_name=False,
        )
        send_btn.click(
            fn=chat_send,
            inputs=[chat_input, chat_state],
            outputs=[chat_input, transcript, chat_state],
            api_name=False,
        )
        chat_input.submit(
            fn=chat_send,
            inputs=[chat_input, chat_state],
            outputs=[chat_input, transcript, chat_state],
            api_name=False,
        )
        clear_btn.click(
            fn=chat_reset,
            inputs=[chat_state],
            outputs=[transcript, chat_state],
            api_name=False,
        )
        app.load(fn=chat_reset, inputs=[chat_state], outputs=[transcript, chat_state], api_name=False)

    logger.debug(
        "Web UI wiring complete: server=%s:%s", config.web_server_name, config.web_server_port
    )
    return app
