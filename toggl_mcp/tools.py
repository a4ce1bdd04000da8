"""
Tool handlers.

Each handler validates its input, performs its upstream call(s) through the
shared TogglClient and returns the formatted text. Handlers catch every error
at their own boundary, so a failing tool always answers with an error message
instead of raising into the MCP runtime.
"""

from typing import Optional

from .bulk import BulkOrchestrator, Pacing
from .client import TogglClient
from .errors import NotFoundError
from .formatting import format_error, format_response
from .models import (
    BulkCreateTimeEntriesInput,
    BulkEditTimeEntriesInput,
    CreateTimeEntryInput,
    FindProjectByNameInput,
    GetTimeEntriesInput,
    LegacyTimeEntryInput,
    TimeEntryRefInput,
    UpdateTimeEntryInput,
    WorkspaceInput,
    WorkspaceProjectsInput,
)


class TogglTools:
    """The tool handlers, bound to one client and one pacing policy."""

    def __init__(self, client: TogglClient, pacing: Optional[Pacing] = None):
        self.client = client
        self.bulk = BulkOrchestrator(client, pacing)

    @property
    def created_with(self) -> str:
        return self.client.settings.created_with

    # ─── Time entries: read ──────────────────────────────────────────────

    async def get_time_entries(self, params: GetTimeEntriesInput) -> str:
        """List the current user's time entries.

        Without filters Toggl returns the most recent entries. Date filters
        must be full ISO 8601 date-times, e.g. '2024-04-08T00:00:00Z'.

        Args:
            params: Optional start/end/before instants and a 'since' timestamp.

        Returns:
            str: JSON array of time entries.
        """
        try:
            data = await self.client.execute("/me/time_entries", params=params.query())
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def get_current_time_entry(self) -> str:
        """Get the currently running time entry (null when no timer runs)."""
        try:
            data = await self.client.execute("/me/time_entries/current")
            return format_response(data)
        except Exception as e:
            return format_error(e)

    # ─── Time entries: write ─────────────────────────────────────────────

    async def create_time_entry(self, params: CreateTimeEntryInput) -> str:
        """Create a time entry in a workspace.

        The duration is taken from 'duration' when given, otherwise computed
        from start and stop, otherwise 0.

        Args:
            params: Workspace, start instant and optional entry fields.

        Returns:
            str: JSON of the created time entry.
        """
        try:
            data = await self.client.execute(
                f"/workspaces/{params.workspace_id}/time_entries",
                "POST",
                body=params.body(self.created_with),
            )
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def create_time_entry_legacy(self, params: LegacyTimeEntryInput) -> str:
        """Create a time entry through the flat endpoint (pid/wid fields, meta=true).

        Returns the entry with its project and workspace metadata expanded.

        Args:
            params: Workspace, start instant and optional entry fields.

        Returns:
            str: JSON of the created time entry.
        """
        try:
            data = await self.client.execute(
                "/time_entries",
                "POST",
                body=params.body(self.created_with),
                params={"meta": True},
            )
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def bulk_edit_time_entries(self, params: BulkEditTimeEntriesInput) -> str:
        """Apply the same project, task, tags or billable change to several entries.

        Args:
            params: Workspace, entry IDs and the fields to change.

        Returns:
            str: JSON result reported by Toggl.
        """
        try:
            data = await self.client.execute(
                f"/workspaces/{params.workspace_id}/time_entries",
                "PATCH",
                body=params.body(),
            )
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def update_time_entry(self, params: UpdateTimeEntryInput) -> str:
        """Update a time entry. Fields that are not given are left unchanged.

        Args:
            params: Workspace, entry ID and the fields to change.

        Returns:
            str: JSON of the updated time entry.
        """
        try:
            data = await self.client.execute(
                f"/workspaces/{params.workspace_id}/time_entries/{params.time_entry_id}",
                "PUT",
                body=params.body(),
            )
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def delete_time_entry(self, params: TimeEntryRefInput) -> str:
        """Delete a time entry. This cannot be undone.

        Args:
            params: Workspace and entry ID.

        Returns:
            str: Deletion acknowledgement.
        """
        try:
            data = await self.client.execute(
                f"/workspaces/{params.workspace_id}/time_entries/{params.time_entry_id}",
                "DELETE",
            )
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def stop_time_entry(self, params: TimeEntryRefInput) -> str:
        """Stop a running time entry.

        Args:
            params: Workspace and entry ID.

        Returns:
            str: JSON of the stopped time entry.
        """
        try:
            data = await self.client.execute(
                f"/workspaces/{params.workspace_id}/time_entries/{params.time_entry_id}/stop",
                "PATCH",
            )
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def bulk_create_time_entries(self, params: BulkCreateTimeEntriesInput) -> str:
        """Create several time entries, one per second, and summarize the outcome.

        Projects can be referenced by ID or by exact name; names are resolved
        against a single listing of the workspace's projects. A failing entry
        does not stop the others.

        Args:
            params: Workspace and the entries to create, in order.

        Returns:
            str: JSON summary with per-entry results and billable hours.
        """
        try:
            summary = await self.bulk.bulk_create(params.workspace_id, params.entries)
            return format_response(summary.model_dump())
        except Exception as e:
            return format_error(e)

    # ─── Account, workspaces, projects, tags ─────────────────────────────

    async def get_current_user(self) -> str:
        """Get the profile of the user owning the API token."""
        try:
            data = await self.client.execute("/me")
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def get_workspaces(self) -> str:
        """List the workspaces the user belongs to."""
        try:
            data = await self.client.execute("/workspaces")
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def get_workspace_projects(self, params: WorkspaceProjectsInput) -> str:
        """List projects in a workspace.

        Args:
            params: Workspace plus optional active filter and pagination.

        Returns:
            str: JSON array of projects.
        """
        try:
            data = await self.client.execute(
                f"/workspaces/{params.workspace_id}/projects", params=params.query()
            )
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def get_workspace_tags(self, params: WorkspaceInput) -> str:
        """List tags defined in a workspace."""
        try:
            data = await self.client.execute(f"/workspaces/{params.workspace_id}/tags")
            return format_response(data)
        except Exception as e:
            return format_error(e)

    async def find_project_by_name(self, params: FindProjectByNameInput) -> str:
        """Find a project in a workspace by its exact, case-sensitive name.

        Args:
            params: Workspace and project name.

        Returns:
            str: JSON of the first matching project.
        """
        try:
            projects = await self.client.execute(
                f"/workspaces/{params.workspace_id}/projects"
            )
            for project in projects if isinstance(projects, list) else []:
                if isinstance(project, dict) and project.get("name") == params.name:
                    return format_response(project)
            raise NotFoundError(
                f"Project '{params.name}' not found in workspace {params.workspace_id}"
            )
        except Exception as e:
            return format_error(e)
