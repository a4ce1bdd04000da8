"""
Bulk creation of time entries.

Entries are submitted one at a time, in input order, with a pause after each
submission so a large batch stays under Toggl's request rate limit. A failing
entry is recorded and the loop moves on; only the initial project listing can
abort the whole call.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Protocol, Sequence, Union

from pydantic import BaseModel

from .client import TogglClient
from .errors import NotFoundError, TogglError
from .models import BulkEntryInput, elapsed_seconds, flat_entry_body

logger = logging.getLogger(__name__)


# ─── Pacing ──────────────────────────────────────────────────────────────────


class Pacing(Protocol):
    """Waits between bulk submissions."""

    async def wait(self) -> None: ...


class FixedIntervalPacing:
    """Sleep a fixed number of seconds after every submission."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval

    async def wait(self) -> None:
        await asyncio.sleep(self.interval)


class NoPacing:
    """Never wait. Used in tests."""

    async def wait(self) -> None:
        return None


# ─── Results ─────────────────────────────────────────────────────────────────


class EntryCreated(BaseModel):
    success: bool = True
    description: str
    id: Optional[int] = None
    duration_seconds: int
    hours: float
    billable: bool


class EntryFailed(BaseModel):
    success: bool = False
    description: str
    error: str


EntryResult = Union[EntryCreated, EntryFailed]


class BulkSummary(BaseModel):
    total_entries: int
    successful: int
    failed: int
    total_billable_hours: str
    results: List[EntryResult]

    @classmethod
    def from_results(cls, results: Sequence[EntryResult]) -> "BulkSummary":
        created = [r for r in results if isinstance(r, EntryCreated)]
        billable_hours = sum(r.hours for r in created if r.billable)
        return cls(
            total_entries=len(results),
            successful=len(created),
            failed=len(results) - len(created),
            total_billable_hours=f"{billable_hours:.2f}",
            results=list(results),
        )


# ─── Orchestrator ────────────────────────────────────────────────────────────


def build_project_cache(projects: object) -> Dict[str, int]:
    """Map project name to id. With duplicate names the last project wins."""
    cache: Dict[str, int] = {}
    for project in projects if isinstance(projects, list) else []:
        if isinstance(project, dict) and "name" in project and "id" in project:
            cache[project["name"]] = project["id"]
    return cache


class BulkOrchestrator:
    def __init__(
        self,
        client: TogglClient,
        pacing: Optional[Pacing] = None,
        created_with: Optional[str] = None,
    ):
        self.client = client
        self.pacing = pacing or FixedIntervalPacing(client.settings.bulk_interval)
        self.created_with = created_with or client.settings.created_with

    async def fetch_project_cache(self, workspace_id: int) -> Dict[str, int]:
        projects = await self.client.execute(f"/workspaces/{workspace_id}/projects")
        return build_project_cache(projects)

    @staticmethod
    def resolve_project(
        workspace_id: int, entry: BulkEntryInput, cache: Dict[str, int]
    ) -> Optional[int]:
        if entry.project_id is not None:
            return entry.project_id
        if entry.project_name is None:
            return None
        if entry.project_name not in cache:
            raise NotFoundError(
                f"Project '{entry.project_name}' not found in workspace {workspace_id}"
            )
        return cache[entry.project_name]

    async def submit(
        self, workspace_id: int, entry: BulkEntryInput, cache: Dict[str, int]
    ) -> EntryResult:
        """Create one entry and describe the outcome. Never raises."""
        try:
            project_id = self.resolve_project(workspace_id, entry, cache)
            duration = elapsed_seconds(entry.start, entry.stop)
            body = flat_entry_body(
                workspace_id,
                entry.start,
                self.created_with,
                description=entry.description,
                project_id=project_id,
                stop=entry.stop,
                duration=duration,
                billable=entry.billable,
                tags=entry.tags,
            )
            created = await self.client.execute(
                "/time_entries", "POST", body=body, params={"meta": True}
            )
        except TogglError as e:
            logger.info("Bulk entry '%s' failed: %s", entry.description, e.message)
            return EntryFailed(description=entry.description, error=e.message)
        except Exception as e:
            logger.exception("Unexpected error creating bulk entry '%s'", entry.description)
            return EntryFailed(
                description=entry.description, error=str(e) or type(e).__name__
            )

        entry_id = created.get("id") if isinstance(created, dict) else None
        logger.info("Bulk entry '%s' created (id=%s)", entry.description, entry_id)
        return EntryCreated(
            description=entry.description,
            id=entry_id,
            duration_seconds=duration,
            hours=round(duration / 3600, 2),
            billable=entry.billable,
        )

    async def bulk_create(
        self, workspace_id: int, entries: Sequence[BulkEntryInput]
    ) -> BulkSummary:
        """
        Create entries sequentially and summarize the outcome.

        Args:
            workspace_id: Workspace owning the entries and projects
            entries: Entries in submission order

        Returns:
            BulkSummary with one result per entry, in input order

        Raises:
            TogglError: The project list could not be fetched
        """
        cache = await self.fetch_project_cache(workspace_id)
        results: List[EntryResult] = []
        for entry in entries:
            results.append(await self.submit(workspace_id, entry, cache))
            await self.pacing.wait()
        return BulkSummary.from_results(results)
