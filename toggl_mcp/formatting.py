"""Render upstream payloads and errors as the text a tool returns."""

import json
from typing import Any

from .errors import TogglError

MAX_RESPONSE_CHARS = 100_000
SERIALIZATION_FAILED = "Error: The Toggl response could not be serialized to JSON."


def format_response(data: Any) -> str:
    """Pretty-print a payload as JSON, keeping upstream key order."""
    try:
        text = json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        return SERIALIZATION_FAILED
    if len(text) > MAX_RESPONSE_CHARS:
        omitted = len(text) - MAX_RESPONSE_CHARS
        text = (
            text[:MAX_RESPONSE_CHARS]
            + f"\n... [truncated, {omitted} more characters]"
        )
    return text


def format_error(e: BaseException) -> str:
    """Consistent error formatting."""
    if isinstance(e, TogglError):
        return f"Error: {e.message}"
    try:
        message = str(e)
    except Exception:
        message = ""
    return f"Error: {message or type(e).__name__}"
