"""
Server configuration.

Settings are read once from the environment at startup and then passed
explicitly to the request executor and the bulk orchestrator. A missing API
token is not a startup error: every tool call reports it instead.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BASE_URL = "https://api.track.toggl.com/api/v9"
DEFAULT_TIMEOUT = 30.0
# Toggl allows roughly one request per second per token.
DEFAULT_BULK_INTERVAL = 1.0
DEFAULT_CREATED_WITH = "toggl-mcp"


def _float_from_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid {name}: {raw!r}. Must be a number.") from None


@dataclass(frozen=True)
class TogglSettings:
    """
    Configuration for the Toggl MCP server.

    Attributes:
        api_token: Toggl API token (None when not configured)
        base_url: Versioned Toggl API root
        timeout: Per-request timeout in seconds
        bulk_interval: Pause between bulk submissions, in seconds
        created_with: Client name sent with every created time entry
        log_level: Logging level name for the stderr handler
    """

    api_token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    bulk_interval: float = DEFAULT_BULK_INTERVAL
    created_with: str = DEFAULT_CREATED_WITH
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.bulk_interval < 0:
            raise ValueError(
                f"Invalid bulk interval {self.bulk_interval}. Must be >= 0."
            )
        if self.timeout <= 0:
            raise ValueError(f"Invalid timeout {self.timeout}. Must be > 0.")

    @property
    def has_token(self) -> bool:
        return bool(self.api_token)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "TogglSettings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from (defaults to os.environ)

        Returns:
            TogglSettings with environment values applied over defaults

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if env is None else env
        token = env.get("TOGGL_API_TOKEN", "").strip()
        return cls(
            api_token=token or None,
            base_url=env.get("TOGGL_API_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout=_float_from_env(env, "TOGGL_REQUEST_TIMEOUT", DEFAULT_TIMEOUT),
            bulk_interval=_float_from_env(
                env, "TOGGL_BULK_INTERVAL", DEFAULT_BULK_INTERVAL
            ),
            created_with=env.get("TOGGL_CREATED_WITH", DEFAULT_CREATED_WITH),
            log_level=env.get("TOGGL_MCP_LOG_LEVEL", "WARNING").upper(),
        )


def configure_logging(level: str = "WARNING") -> None:
    """Send log records to stderr; stdout carries the stdio transport."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
