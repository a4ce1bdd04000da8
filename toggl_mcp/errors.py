"""Error taxonomy shared by the executor, the tool handlers and the bulk orchestrator."""

from typing import Optional


class TogglError(Exception):
    """Base class for every error this server reports back to the client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(TogglError):
    """The API token is missing."""


class ValidationError(TogglError, ValueError):
    """Tool input is malformed or outside the upstream contract."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class NotFoundError(TogglError):
    """A name-based lookup found nothing."""


class TransportError(TogglError):
    """The HTTP call could not be completed."""


# Hints appended to well-known upstream failures.
_STATUS_HINTS = {
    401: "Authentication failed. Check your TOGGL_API_TOKEN.",
    403: "Permission denied for this workspace or resource.",
    404: "Resource not found. Check the IDs are correct.",
    429: "Rate limit exceeded. Wait a moment and retry.",
}


class UpstreamError(TogglError):
    """The Toggl API answered with a non-2xx status or an unreadable body."""

    def __init__(
        self,
        status: int,
        status_text: str,
        body_text: str = "",
        detail: Optional[str] = None,
    ):
        self.status = status
        self.status_text = status_text
        self.body_text = body_text
        message = detail or f"Toggl API returned {status} {status_text}".rstrip()
        hint = _STATUS_HINTS.get(status)
        if hint:
            message = f"{message}. {hint}"
        if body_text:
            message = f"{message} Response: {body_text}"
        super().__init__(message)
