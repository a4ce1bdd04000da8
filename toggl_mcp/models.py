"""
Tool input models and the request bodies derived from them.

Pydantic checks types and ranges when FastMCP parses the arguments. Date-time
semantics (ISO 8601 with an explicit time part) are checked by the handlers
through parse_iso_datetime so the failure is reported like any other tool
error, before a request is sent.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationError

ISO_EXAMPLE = "2024-04-08T09:00:00Z"


# ─── Date-time helpers ───────────────────────────────────────────────────────


def parse_iso_datetime(field: str, value: str) -> datetime:
    """Parse an ISO 8601 date-time, rejecting bare dates such as '2024-04-08'."""
    if "T" not in value:
        raise ValidationError(
            field, f"'{value}' is not an ISO 8601 date-time (e.g. {ISO_EXAMPLE})"
        )
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(
            field, f"'{value}' is not an ISO 8601 date-time (e.g. {ISO_EXAMPLE})"
        ) from None


def check_iso_fields(**fields: Optional[str]) -> None:
    """Validate every non-None keyword as an ISO 8601 date-time."""
    for name, value in fields.items():
        if value is not None:
            parse_iso_datetime(name, value)


def _as_aware(moment: datetime) -> datetime:
    """Instants without an offset are read as local time."""
    return moment if moment.tzinfo is not None else moment.astimezone()


def elapsed_seconds(start: str, stop: str) -> int:
    """floor(stop - start) in whole seconds. Negative spans are returned as-is."""
    started = _as_aware(parse_iso_datetime("start", start))
    stopped = _as_aware(parse_iso_datetime("stop", stop))
    return math.floor((stopped - started).total_seconds())


def entry_duration(
    start: str, stop: Optional[str], duration: Optional[int]
) -> int:
    """Explicit duration wins, then stop - start, then 0."""
    if duration is not None:
        return duration
    if stop is not None:
        return elapsed_seconds(start, stop)
    return 0


def _drop_unset(body: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in body.items() if value is not None}


# ─── Query Models ────────────────────────────────────────────────────────────


class GetTimeEntriesInput(BaseModel):
    """Input for listing the current user's time entries."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    start_date: Optional[str] = Field(
        default=None,
        description=f"Entries starting at or after this instant (ISO 8601, e.g. '{ISO_EXAMPLE}')",
    )
    end_date: Optional[str] = Field(
        default=None,
        description="Entries starting before this instant (ISO 8601, e.g. '2024-04-14T23:59:59Z')",
    )
    before: Optional[str] = Field(
        default=None, description="Only entries before this instant (ISO 8601)"
    )
    since: Optional[int] = Field(
        default=None, description="Only entries modified since this UNIX timestamp", ge=0
    )

    def query(self) -> Dict[str, Any]:
        check_iso_fields(
            start_date=self.start_date, end_date=self.end_date, before=self.before
        )
        return {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "before": self.before,
            "since": self.since,
        }


class WorkspaceInput(BaseModel):
    """Input for workspace-scoped listings."""
    model_config = ConfigDict(extra="forbid")

    workspace_id: int = Field(..., description="Toggl workspace ID")


class WorkspaceProjectsInput(BaseModel):
    """Input for listing projects in a workspace."""
    model_config = ConfigDict(extra="forbid")

    workspace_id: int = Field(..., description="Toggl workspace ID")
    active: Optional[bool] = Field(
        default=None, description="Only active (true) or archived (false) projects"
    )
    page: Optional[int] = Field(default=None, description="Page number", ge=1)
    per_page: Optional[int] = Field(
        default=None, description="Results per page", ge=1, le=200
    )

    def query(self) -> Dict[str, Any]:
        return {"active": self.active, "page": self.page, "per_page": self.per_page}


class FindProjectByNameInput(BaseModel):
    """Input for an exact, case-sensitive project lookup."""
    model_config = ConfigDict(extra="forbid")

    workspace_id: int = Field(..., description="Toggl workspace ID")
    name: str = Field(..., description="Exact project name (case-sensitive)", min_length=1)


class TimeEntryRefInput(BaseModel):
    """Input identifying one time entry."""
    model_config = ConfigDict(extra="forbid")

    workspace_id: int = Field(..., description="Toggl workspace ID")
    time_entry_id: int = Field(..., description="Toggl time entry ID")


# ─── Write Models ────────────────────────────────────────────────────────────


class CreateTimeEntryInput(BaseModel):
    """Input for creating a time entry in a workspace."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    workspace_id: int = Field(..., description="Toggl workspace ID")
    start: str = Field(..., description=f"Start instant (ISO 8601, e.g. '{ISO_EXAMPLE}')")
    stop: Optional[str] = Field(
        default=None, description="Stop instant (ISO 8601). Used to derive the duration."
    )
    duration: Optional[int] = Field(
        default=None,
        description="Duration in seconds. Overrides start/stop; -1 starts a running timer.",
    )
    description: Optional[str] = Field(default=None, description="Entry description")
    project_id: Optional[int] = Field(default=None, description="Toggl project ID")
    task_id: Optional[int] = Field(default=None, description="Toggl task ID")
    billable: Optional[bool] = Field(default=None, description="Billable flag")
    tags: Optional[List[str]] = Field(default=None, description="Tag names")

    def body(self, created_with: str) -> Dict[str, Any]:
        check_iso_fields(start=self.start, stop=self.stop)
        return _drop_unset(
            {
                "created_with": created_with,
                "workspace_id": self.workspace_id,
                "description": self.description,
                "project_id": self.project_id,
                "task_id": self.task_id,
                "start": self.start,
                "stop": self.stop,
                "duration": entry_duration(self.start, self.stop, self.duration),
                "billable": bool(self.billable),
                "tags": list(self.tags or []),
            }
        )


def flat_entry_body(
    workspace_id: int,
    start: str,
    created_with: str,
    *,
    description: Optional[str] = None,
    project_id: Optional[int] = None,
    stop: Optional[str] = None,
    duration: Optional[int] = None,
    billable: Optional[bool] = None,
    tags: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Build the flat creation body (pid/tid/wid) used with ?meta=true.

    tid is always null and groupBy always empty: the endpoint rejects bodies
    without them.
    """
    check_iso_fields(start=start, stop=stop)
    body = _drop_unset(
        {
            "created_with": created_with,
            "description": description,
            "pid": project_id,
            "wid": workspace_id,
            "start": start,
            "stop": stop,
            "duration": entry_duration(start, stop, duration),
            "billable": bool(billable),
            "tags": list(tags or []),
        }
    )
    body["tid"] = None
    body["groupBy"] = ""
    return body


class LegacyTimeEntryInput(BaseModel):
    """Input for the flat creation endpoint."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    workspace_id: int = Field(..., description="Toggl workspace ID (sent as wid)")
    start: str = Field(..., description=f"Start instant (ISO 8601, e.g. '{ISO_EXAMPLE}')")
    stop: Optional[str] = Field(default=None, description="Stop instant (ISO 8601)")
    duration: Optional[int] = Field(default=None, description="Duration in seconds")
    description: Optional[str] = Field(default=None, description="Entry description")
    project_id: Optional[int] = Field(default=None, description="Toggl project ID (sent as pid)")
    billable: Optional[bool] = Field(default=None, description="Billable flag")
    tags: Optional[List[str]] = Field(default=None, description="Tag names")

    def body(self, created_with: str) -> Dict[str, Any]:
        return flat_entry_body(
            self.workspace_id,
            self.start,
            created_with,
            description=self.description,
            project_id=self.project_id,
            stop=self.stop,
            duration=self.duration,
            billable=self.billable,
            tags=self.tags,
        )


class UpdateTimeEntryInput(BaseModel):
    """Input for updating a time entry. Only the given fields are sent."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    workspace_id: int = Field(..., description="Toggl workspace ID")
    time_entry_id: int = Field(..., description="Toggl time entry ID")
    description: Optional[str] = Field(default=None, description="New description")
    project_id: Optional[int] = Field(default=None, description="New project ID")
    task_id: Optional[int] = Field(default=None, description="New task ID")
    billable: Optional[bool] = Field(default=None, description="New billable flag")
    start: Optional[str] = Field(default=None, description="New start instant (ISO 8601)")
    stop: Optional[str] = Field(default=None, description="New stop instant (ISO 8601)")
    duration: Optional[int] = Field(default=None, description="New duration in seconds")
    tags: Optional[List[str]] = Field(default=None, description="Replacement tag names")

    def body(self) -> Dict[str, Any]:
        check_iso_fields(start=self.start, stop=self.stop)
        return _drop_unset(
            {
                "description": self.description,
                "project_id": self.project_id,
                "task_id": self.task_id,
                "billable": self.billable,
                "start": self.start,
                "stop": self.stop,
                "duration": self.duration,
                "tags": self.tags,
            }
        )


class BulkEditTimeEntriesInput(BaseModel):
    """Input for applying the same changes to several time entries."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    workspace_id: int = Field(..., description="Toggl workspace ID")
    time_entry_ids: List[int] = Field(..., description="IDs of the entries to edit", min_length=1)
    project_id: Optional[int] = Field(default=None, description="New project ID")
    task_id: Optional[int] = Field(default=None, description="New task ID")
    tags: Optional[List[str]] = Field(default=None, description="Replacement tag names")
    billable: Optional[bool] = Field(default=None, description="New billable flag")

    def body(self) -> Dict[str, Any]:
        return _drop_unset(
            {
                "time_entry_ids": list(self.time_entry_ids),
                "project_id": self.project_id,
                "task_id": self.task_id,
                "tags": self.tags,
                "billable": self.billable,
            }
        )


class BulkEntryInput(BaseModel):
    """One entry of a bulk creation."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    description: str = Field(..., description="Entry description")
    start: str = Field(..., description=f"Start instant (ISO 8601, e.g. '{ISO_EXAMPLE}')")
    stop: str = Field(..., description="Stop instant (ISO 8601)")
    project_id: Optional[int] = Field(default=None, description="Toggl project ID")
    project_name: Optional[str] = Field(
        default=None,
        description="Exact project name, resolved when project_id is not given",
    )
    billable: bool = Field(default=False, description="Billable flag")
    tags: Optional[List[str]] = Field(default=None, description="Tag names")


class BulkCreateTimeEntriesInput(BaseModel):
    """Input for creating several time entries one after another."""
    model_config = ConfigDict(extra="forbid")

    workspace_id: int = Field(..., description="Toggl workspace ID")
    entries: List[BulkEntryInput] = Field(
        ..., description="Entries to create, submitted in order", min_length=1
    )
