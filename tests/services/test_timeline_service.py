"""Tests for TimelineService aggregation, milestone creation and suggestions."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from tracker.core.exceptions import InvalidWindowError, MilestoneValidationError
from tracker.schemas.timeline import ItemKind, Period, TimelineSuggestion, TimeWindow
from tracker.services.timeline_service import TimelineService

pytestmark = pytest.mark.unit


def _ids(items):
    return [item.id for item in items]


@pytest.fixture
def service(store):
    return TimelineService(store)


class TestBuildView:
    """Test the full aggregation pipeline over the store."""

    async def test_unified_items_sorted_and_dated_only(self, service, today):
        """The view holds dated items in date order."""
        view = await service.build_view("p-1", today=today)
        assert _ids(view.items) == ["m-4", "t-4", "t-1", "m-1", "t-2", "m-2", "m-3", "t-3"]
        assert view.window == TimeWindow.ALL
        assert view.today == today

    async def test_items_are_classified(self, service, today):
        """Items carry overdue flags and status classes."""
        view = await service.build_view("p-1", today=today)
        overdue = {item.id for item in view.items if item.is_overdue}
        assert overdue == {"t-1", "m-1"}
        assert view.find("m-4").status_class == "cancelled"

    async def test_week_window(self, service, today):
        """The week window filters to the next ten days."""
        view = await service.build_view("p-1", TimeWindow.WEEK, today)
        assert _ids(view.filtered) == ["t-2", "m-2"]

    async def test_overdue_window(self, service, today):
        """The overdue window filters to overdue items."""
        view = await service.build_view("p-1", "overdue", today)
        assert _ids(view.filtered) == ["t-1", "m-1"]

    async def test_buckets(self, service, today):
        """Filtered items are grouped by period."""
        view = await service.build_view("p-1", today=today)
        assert _ids(view.buckets.get(Period.OVERDUE)) == ["t-1", "m-1"]
        assert _ids(view.buckets.this_week) == ["m-4", "t-4", "t-2"]
        assert _ids(view.buckets.next_week) == ["m-2"]
        assert view.buckets.this_month == []
        assert _ids(view.buckets.later) == ["m-3", "t-3"]

    async def test_buckets_follow_filtered_set(self, service, today):
        """Buckets hold exactly the filtered items."""
        view = await service.build_view("p-1", TimeWindow.WEEK, today)
        bucketed = [item.id for period in Period for item in view.buckets.get(period)]
        assert sorted(bucketed) == sorted(_ids(view.filtered))

    async def test_stats_ignore_window(self, service, today):
        """Stats cover all items whatever the window."""
        full = await service.build_view("p-1", TimeWindow.ALL, today)
        narrow = await service.build_view("p-1", TimeWindow.WEEK, today)
        assert narrow.stats == full.stats
        assert full.stats.milestones.total == 4
        assert full.stats.milestones.completion_rate == 25
        assert full.stats.milestones.overdue == 1
        assert (full.stats.todos.total, full.stats.todos.completed, full.stats.todos.overdue) == (4, 1, 1)

    async def test_kind_filter(self, service, today):
        """The kind filter narrows filtered items but not items."""
        view = await service.build_view("p-1", today=today, kind=ItemKind.MILESTONE)
        assert all(item.kind == ItemKind.MILESTONE for item in view.filtered)
        assert len(view.items) == 8
        assert view.kind == ItemKind.MILESTONE
        assert view.query is None

    async def test_text_search(self, service, today):
        """Search is case-insensitive over title and description."""
        view = await service.build_view("p-1", today=today, query="LAUNCH")
        assert _ids(view.filtered) == ["m-1", "m-2"]
        assert view.query == "LAUNCH"
        assert view.kind is None

    async def test_unknown_window_raises(self, service, today):
        """Unknown windows raise InvalidWindowError."""
        with pytest.raises(InvalidWindowError):
            await service.build_view("p-1", "decade", today)

    async def test_default_window_used(self, store, today):
        """The service default window applies when none is passed."""
        service = TimelineService(store, default_window=TimeWindow.OVERDUE)
        view = await service.build_view("p-1", today=today)
        assert view.window == TimeWindow.OVERDUE

    async def test_todos_key_accepted(self, today):
        """Stores may return tasks under a todos key."""
        store = AsyncMock()
        store.list_timeline_items.return_value = {
            "todos": [{"id": "t", "due_date": "2025-01-21", "status": "pending"}],
            "milestones": [],
        }
        view = await TimelineService(store).build_view("p-1", today=today)
        assert _ids(view.items) == ["t"]
        store.list_timeline_items.assert_awaited_once_with("p-1")

    async def test_empty_store_response(self, today):
        """An empty store response gives an empty view."""
        store = AsyncMock()
        store.list_timeline_items.return_value = {}
        view = await TimelineService(store).build_view("p-1", today=today)
        assert view.items == []
        assert view.stats.milestones.completion_rate == 0


def test_aggregate_is_pure(sample_tasks, sample_milestones, today):
    """aggregate works on given records without store I/O."""
    store = AsyncMock()
    service = TimelineService(store)
    view = service.aggregate("p-1", {"tasks": sample_tasks, "milestones": sample_milestones}, "week", today)
    assert _ids(view.filtered) == ["t-2", "m-2"]
    store.list_timeline_items.assert_not_called()


class TestCreateMilestone:
    """Test milestone creation through the store."""

    async def test_creates_through_store(self, service, store, today):
        """A valid milestone is written to the store."""
        created = await service.create_milestone("p-1", {"title": "Demo", "target_date": "2025-02-10"}, today)
        assert created["target_date"] == "2025-02-10"
        assert created["status"] == "planned"
        assert store.milestones[-1]["title"] == "Demo"

    async def test_rejects_past_date(self, service, store, today):
        """A past target date is rejected before the store is called."""
        with pytest.raises(MilestoneValidationError):
            await service.create_milestone("p-1", {"title": "Late", "target_date": "2025-01-01"}, today)
        assert len(store.milestones) == 4


class TestApplySuggestion:
    """Test applying estimator suggestions."""

    async def test_valid_entries_created_invalid_skipped(self, service, store, today):
        """Invalid suggested milestones are skipped, the rest created."""
        suggestion = {
            "timeline_summary": "Two more months",
            "milestones": [
                {"title": "Alpha", "target_date": "2025-02-01"},
                {"title": "", "target_date": "2025-02-05"},
                {"title": "Old", "target_date": "2024-12-01"},
                {"title": "GA", "target_date": "2025-03-15", "description": "general availability"},
            ],
            "risks": ["scope creep"],
        }
        result = await service.apply_suggestion("p-1", suggestion, today=today)

        assert [m["title"] for m in result.created] == ["Alpha", "GA"]
        assert [title for title, _ in result.skipped] == ["", "Old"]
        assert result.view is not None
        assert result.view.stats.milestones.total == 6

    async def test_accepts_model(self, service, today):
        """A TimelineSuggestion model is accepted as well as a dict."""
        suggestion = TimelineSuggestion(milestones=[])
        result = await service.apply_suggestion("p-1", suggestion, today=today)
        assert result.created == []
        assert result.view.stats.milestones.total == 4


async def test_export_uses_filtered_items(service, today):
    """Export lists only the view's filtered items."""
    view = await service.build_view("p-1", TimeWindow.WEEK, today)
    text = service.export(view, "Home")
    assert "Filter: this week" in text
    assert "Generated: 2025-01-20" in text
    assert "Review notes" in text
    assert "Plan sprint" not in text


async def test_export_generated_on_override(service, today):
    """Export date can be overridden."""
    view = await service.build_view("p-1", today=today)
    assert "Generated: 2025-02-02" in service.export(view, "Home", generated_on=date(2025, 2, 2))
