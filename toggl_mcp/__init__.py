"""MCP server exposing the Toggl Track API as tools."""

from .client import TogglClient, basic_auth_header
from .config import TogglSettings
from .server import build_server

__version__ = "1.0.0"

__all__ = ["TogglClient", "TogglSettings", "basic_auth_header", "build_server"]
