"""Follow-up chat with the meditation guide persona."""

from __future__ import annotations

import threading

from ..domain.prompts import GUIDE_EMPTY_REPLY, GUIDE_ERROR_REPLY, GUIDE_GREETING
from ..domain.session import ChatMessage
from .ports import GuideChatPort


class GuideChatService:
    """Transcript and request history for the guide chat.

    The visible transcript starts with a greeting that is never sent to the
    service. Only completed exchanges enter the request history.
    """

    def __init__(self, api: GuideChatPort, logger) -> None:
        self.api = api
        self.logger = logger
        self._lock = threading.Lock()
        self._messages: list[ChatMessage] = []
        self._history: list[ChatMessage] = []
        self._pending: ChatMessage | None = None
        self.reset()

    @property
    def messages(self) -> list[ChatMessage]:
        with self._lock:
            return list(self._messages)

    @property
    def is_typing(self) -> bool:
        with self._lock:
            return self._pending is not None

    def reset(self) -> None:
        with self._lock:
            self._messages = [ChatMessage(role="model", text=GUIDE_GREETING)]
            self._history = []
            self._pending = None

    def begin(self, text: str) -> ChatMessage | None:
        """Record a user message; returns None for blank input or while typing."""
        message = str(text or "").strip()
        if not message:
            return None
        with self._lock:
            if self._pending is not None:
                return None
            user_message = ChatMessage(role="user", text=message)
            self._messages.append(user_message)
            self._pending = user_message
        return user_message

    def complete(self) -> ChatMessage | None:
        """Request the guide's reply to the pending user message."""
        with self._lock:
            pending = self._pending
            history = list(self._history)
        if pending is None:
            return None
        failed = False
        try:
            reply = str(self.api.reply(pending.text, history) or "").strip()
        except Exception:
            self.logger.exception("Guide chat request failed")
            reply = GUIDE_ERROR_REPLY
            failed = True
        if not reply:
            reply = GUIDE_EMPTY_REPLY
        model_message = ChatMessage(role="model", text=reply)
        with self._lock:
            if self._pending is not pending:
                self.logger.debug("Dropping guide reply for a chat that was reset")
                return None
            self._messages.append(model_message)
            if not failed:
                self._history.extend([pending, model_message])
            self._pending = None
        return model_message

    def send(self, text: str) -> ChatMessage | None:
        if self.begin(text) is None:
            return None
        return self.complete()
