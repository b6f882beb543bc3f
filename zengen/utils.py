"""Small parsing helpers shared by config and the player."""
from __future__ import annotations

import math
import os
from typing import Any, Optional, TypeVar

_N = TypeVar("_N", int, float)


def resolve_path(value: str, base_dir: str) -> str:
    """Resolve a path relative to base_dir when value is not absolute."""
    if os.path.isabs(value):
        return value
    return os.path.join(base_dir, value)


def _bounded(value: _N, min_value: Optional[_N], max_value: Optional[_N]) -> _N:
    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value
    return value


def parse_int_env(
    name: str,
    default: int,
    *,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> int:
    """Read an integer from the environment, falling back to default."""
    raw = os.getenv(name)
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        value = default
    return _bounded(value, min_value, max_value)


def parse_float_env(
    name: str,
    default: float,
    *,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> float:
    """Read a float from the environment; NaN and junk use default."""
    return coerce_float(
        os.getenv(name, default),
        default=default,
        min_value=min_value,
        max_value=max_value,
    )


def coerce_float(
    value: Any,
    *,
    default: float,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> float:
    """Convert value to a bounded float, using default for unparsable input."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = float(default)
    if math.isnan(parsed):
        parsed = float(default)
    return float(
        _bounded(
            parsed,
            None if min_value is None else float(min_value),
            None if max_value is None else float(max_value),
        )
    )
