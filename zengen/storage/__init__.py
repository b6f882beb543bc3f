"""Storage layer for exported session files."""

from .session_exporter import SessionExporter

__all__ = ["SessionExporter"]
