"""
Toggl Track MCP Server
Connects MCP clients (Claude Desktop and others) to the Toggl Track v9 API.

Setup:
  1. pip install toggl-mcp
  2. Copy your API token from the Profile page at track.toggl.com
  3. Set TOGGL_API_TOKEN in the environment or in the client's server config
  4. Run `toggl-mcp` (stdio transport)
"""

from typing import Optional

from mcp.server.fastmcp import FastMCP

from .bulk import Pacing
from .client import TogglClient
from .config import TogglSettings
from .tools import TogglTools

SERVER_NAME = "toggl_mcp"

# ─── Tool Annotations ────────────────────────────────────────────────────────

READ_ONLY = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}
CREATE = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "idempotentHint": False,
    "openWorldHint": True,
}
UPDATE = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}
DELETE = {
    "readOnlyHint": False,
    "destructiveHint": True,
    "idempotentHint": True,
    "openWorldHint": True,
}

# name -> (title, annotations)
TOOLS = {
    "get_time_entries": ("List Time Entries", READ_ONLY),
    "get_current_time_entry": ("Get Running Time Entry", READ_ONLY),
    "get_current_user": ("Get Current User", READ_ONLY),
    "create_time_entry": ("Create Time Entry", CREATE),
    "create_time_entry_legacy": ("Create Time Entry (flat endpoint)", CREATE),
    "bulk_create_time_entries": ("Bulk Create Time Entries", CREATE),
    "bulk_edit_time_entries": ("Bulk Edit Time Entries", UPDATE),
    "update_time_entry": ("Update Time Entry", UPDATE),
    "stop_time_entry": ("Stop Time Entry", UPDATE),
    "delete_time_entry": ("Delete Time Entry", DELETE),
    "get_workspaces": ("List Workspaces", READ_ONLY),
    "get_workspace_projects": ("List Workspace Projects", READ_ONLY),
    "get_workspace_tags": ("List Workspace Tags", READ_ONLY),
    "find_project_by_name": ("Find Project By Name", READ_ONLY),
}


def greeting(name: str) -> str:
    """Greet someone by name."""
    return f"Hello, {name}!"


def build_server(
    settings: Optional[TogglSettings] = None,
    client: Optional[TogglClient] = None,
    pacing: Optional[Pacing] = None,
) -> FastMCP:
    """
    Create the FastMCP app with every Toggl tool registered.

    Args:
        settings: Server settings (read from the environment when omitted)
        client: Request executor (built from settings when omitted)
        pacing: Bulk pacing policy (one submission per bulk_interval when omitted)

    Returns:
        FastMCP app ready to run
    """
    if client is None:
        client = TogglClient(settings or TogglSettings.from_env())
    tools = TogglTools(client, pacing)

    mcp = FastMCP(SERVER_NAME)
    for name, (title, hints) in TOOLS.items():
        mcp.tool(name=name, annotations={"title": title, **hints})(getattr(tools, name))
    mcp.resource("greeting://{name}")(greeting)
    return mcp
