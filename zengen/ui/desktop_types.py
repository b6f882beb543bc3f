"""Desktop UI interfaces."""

from __future__ import annotations

from typing import Protocol

from ..domain.session import AppView


class DesktopApp(Protocol):
    """Contract of the ZenGen desktop window used by the app facade."""

    title: str
    view: AppView

    def launch(self) -> None:
        """Start the UI main loop."""

    def close(self) -> None:
        """Dispose the player and destroy the window."""
