"""
Utility functions for the preview panel.
"""

import json
import math
from typing import Any
from urllib.parse import urlsplit

from preview_panel.schemas import LogEntry


def clamp(value: int, minimum: int, maximum: int) -> int:
    """Limit value to [minimum, maximum]; maximum wins if the range is empty."""
    return min(maximum, max(minimum, value))


def location_path(url: str) -> str:
    """
    Path shown in the address bar.

    Args:
        url: Absolute URL reported by the sandbox

    Returns:
        The URL path, "/" when the URL has none
    """
    path = urlsplit(url).path
    return path or "/"


def format_value(value: Any) -> str:
    """
    Render a decoded console value the way a browser console would.

    Strings print bare at the top level; everything else uses a JSON-ish form.
    """
    if isinstance(value, str):
        return value
    return _format_nested(value)


def _format_nested(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_nested(v) for v in value) + "]"
    if isinstance(value, dict):
        items = ", ".join(f"{k}: {_format_nested(v)}" for k, v in value.items())
        return "{" + items + "}"
    return repr(value)


def format_log_entry(entry: LogEntry) -> str:
    """Render a whole entry as a single console line."""
    text = " ".join(format_value(v) for v in entry.data)
    if entry.method == "command":
        return f"> {text}"
    if entry.method == "result":
        return f"< {text}"
    return text
