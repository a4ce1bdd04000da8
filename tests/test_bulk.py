"""Tests for bulk time entry creation."""

import json

import pytest

from toggl_mcp.bulk import (
    BulkOrchestrator,
    BulkSummary,
    EntryCreated,
    EntryFailed,
    FixedIntervalPacing,
    NoPacing,
    build_project_cache,
)
from toggl_mcp.models import BulkCreateTimeEntriesInput, BulkEntryInput, elapsed_seconds


def entry(**overrides):
    fields = {
        "description": "A",
        "start": "2024-01-01T09:00:00Z",
        "stop": "2024-01-01T10:00:00Z",
        "billable": True,
    }
    fields.update(overrides)
    return BulkEntryInput(**fields)


class RecordingPacing:
    def __init__(self):
        self.waits = 0

    async def wait(self):
        self.waits += 1


class TestProjectCache:
    def test_last_duplicate_wins(self):
        cache = build_project_cache([{"name": "Ops", "id": 1}, {"name": "Ops", "id": 2}])

        assert cache == {"Ops": 2}

    def test_non_list_payload_gives_empty_cache(self):
        assert build_project_cache(None) == {}


class TestBulkCreate:
    @pytest.mark.asyncio
    async def test_entry_without_project_succeeds(self, client, fake_toggl):
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[])
        fake_toggl.add("POST", "/time_entries", json_body={"id": 501})

        summary = await BulkOrchestrator(client, NoPacing()).bulk_create(1, [entry()])

        assert summary.total_entries == 1
        assert summary.successful == 1
        assert summary.failed == 0
        assert summary.total_billable_hours == "1.00"
        result = summary.results[0]
        assert isinstance(result, EntryCreated)
        assert result.id == 501
        assert result.duration_seconds == 3600
        assert result.hours == 1.0

    @pytest.mark.asyncio
    async def test_unknown_project_name_fails_entry(self, client, fake_toggl):
        """A project name missing from the cache fails only that entry."""
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[])

        summary = await BulkOrchestrator(client, NoPacing()).bulk_create(
            1, [entry(project_name="Ghost")]
        )

        assert summary.successful == 0
        assert summary.failed == 1
        assert summary.total_billable_hours == "0.00"
        assert summary.results[0].error == "Project 'Ghost' not found in workspace 1"
        # Only the project listing was requested.
        assert len(fake_toggl.requests) == 1

    @pytest.mark.asyncio
    async def test_project_name_resolved_from_single_listing(self, client, fake_toggl):
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[{"name": "Ops", "id": 77}])
        fake_toggl.add("POST", "/time_entries", json_body={"id": 1})

        await BulkOrchestrator(client, NoPacing()).bulk_create(
            1, [entry(project_name="Ops"), entry(description="B", project_name="Ops")]
        )

        listings = [r for r in fake_toggl.requests if r.method == "GET"]
        assert len(listings) == 1
        posted = fake_toggl.body(1)
        assert posted["pid"] == 77
        assert posted["wid"] == 1
        assert posted["tid"] is None
        assert posted["groupBy"] == ""
        assert posted["duration"] == 3600
        assert fake_toggl.requests[1].url.params["meta"] == "true"

    @pytest.mark.asyncio
    async def test_explicit_project_id_wins(self, client, fake_toggl):
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[{"name": "Ops", "id": 77}])
        fake_toggl.add("POST", "/time_entries", json_body={"id": 1})

        await BulkOrchestrator(client, NoPacing()).bulk_create(
            1, [entry(project_id=5, project_name="Ops")]
        )

        assert fake_toggl.body()["pid"] == 5

    @pytest.mark.asyncio
    async def test_failure_does_not_block_later_entries(self, client, fake_toggl):
        """First entry fails upstream, second succeeds, order is preserved."""
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[])
        fake_toggl.add("POST", "/time_entries", status=500, text="boom")
        fake_toggl.add("POST", "/time_entries", json_body={"id": 2})

        summary = await BulkOrchestrator(client, NoPacing()).bulk_create(
            1, [entry(description="first"), entry(description="second", billable=False)]
        )

        assert summary.total_entries == 2
        assert summary.successful == 1
        assert summary.failed == 1
        assert [r.description for r in summary.results] == ["first", "second"]
        assert isinstance(summary.results[0], EntryFailed)
        assert "500" in summary.results[0].error
        assert isinstance(summary.results[1], EntryCreated)
        assert summary.total_billable_hours == "0.00"

    @pytest.mark.asyncio
    async def test_invalid_dates_fail_entry_only(self, client, fake_toggl):
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[])
        fake_toggl.add("POST", "/time_entries", json_body={"id": 3})

        summary = await BulkOrchestrator(client, NoPacing()).bulk_create(
            1, [entry(stop="2024-01-01"), entry(description="ok")]
        )

        assert summary.results[0].success is False
        assert summary.results[0].error.startswith("stop:")
        assert summary.results[1].success is True

    @pytest.mark.asyncio
    async def test_mixed_offsets_still_create_entry(self, client, fake_toggl):
        """A stop without an offset is read as local time, not rejected."""
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[])
        fake_toggl.add("POST", "/time_entries", json_body={"id": 6})

        summary = await BulkOrchestrator(client, NoPacing()).bulk_create(
            1, [entry(description="B", stop="2024-01-01T10:00:00")]
        )

        expected = elapsed_seconds("2024-01-01T09:00:00Z", "2024-01-01T10:00:00")
        assert summary.successful == 1
        assert summary.failed == 0
        assert fake_toggl.body()["duration"] == expected

    @pytest.mark.asyncio
    async def test_negative_duration_passes_through(self, client, fake_toggl):
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[])
        fake_toggl.add("POST", "/time_entries", json_body={"id": 4})

        summary = await BulkOrchestrator(client, NoPacing()).bulk_create(
            1, [entry(start="2024-01-01T10:00:00Z", stop="2024-01-01T09:00:00Z")]
        )

        assert fake_toggl.body()["duration"] == -3600
        assert summary.results[0].hours == -1.0

    @pytest.mark.asyncio
    async def test_project_listing_failure_is_fatal(self, client, fake_toggl):
        fake_toggl.add("GET", "/workspaces/1/projects", status=401, text="")

        with pytest.raises(Exception, match="401"):
            await BulkOrchestrator(client, NoPacing()).bulk_create(1, [entry()])

        assert len(fake_toggl.requests) == 1

    @pytest.mark.asyncio
    async def test_pauses_after_every_submission(self, client, fake_toggl):
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[])
        fake_toggl.add("POST", "/time_entries", status=500)
        fake_toggl.add("POST", "/time_entries", json_body={"id": 1})
        pacing = RecordingPacing()

        await BulkOrchestrator(client, pacing).bulk_create(1, [entry(), entry(), entry()])

        assert pacing.waits == 3

    def test_default_pacing_uses_settings_interval(self, client):
        orchestrator = BulkOrchestrator(client)

        assert isinstance(orchestrator.pacing, FixedIntervalPacing)
        assert orchestrator.pacing.interval == client.settings.bulk_interval


class TestFixedIntervalPacing:
    @pytest.mark.asyncio
    async def test_wait_sleeps_for_interval(self, monkeypatch):
        delays = []

        async def fake_sleep(delay):
            delays.append(delay)

        monkeypatch.setattr("toggl_mcp.bulk.asyncio.sleep", fake_sleep)

        await FixedIntervalPacing().wait()
        await FixedIntervalPacing(0.25).wait()

        assert delays == [1.0, 0.25]


class TestBulkSummary:
    def test_billable_hours_only_from_successful_billable(self):
        summary = BulkSummary.from_results(
            [
                EntryCreated(description="a", id=1, duration_seconds=5400, hours=1.5, billable=True),
                EntryCreated(description="b", id=2, duration_seconds=3600, hours=1.0, billable=False),
                EntryFailed(description="c", error="nope"),
            ]
        )

        assert summary.total_billable_hours == "1.50"
        assert summary.successful == 2
        assert summary.failed == 1


class TestBulkTool:
    @pytest.mark.asyncio
    async def test_tool_returns_summary_json(self, tools, fake_toggl):
        fake_toggl.add("GET", "/workspaces/1/projects", json_body=[])
        fake_toggl.add("POST", "/time_entries", json_body={"id": 9})

        result = await tools.bulk_create_time_entries(
            BulkCreateTimeEntriesInput(workspace_id=1, entries=[entry()])
        )

        summary = json.loads(result)
        assert summary["total_entries"] == 1
        assert summary["successful"] == 1
        assert summary["total_billable_hours"] == "1.00"
        assert summary["results"][0]["success"] is True

    @pytest.mark.asyncio
    async def test_tool_reports_fatal_listing_error(self, tools, fake_toggl):
        fake_toggl.add("GET", "/workspaces/1/projects", status=500, text="down")

        result = await tools.bulk_create_time_entries(
            BulkCreateTimeEntriesInput(workspace_id=1, entries=[entry()])
        )

        assert result.startswith("Error: Toggl API returned 500")
        assert len(fake_toggl.requests) == 1
