"""Shared test fixtures for all test groups."""

from datetime import date
from typing import Any

import pytest

TODAY = date(2025, 1, 20)


class FakeTimelineStore:
    """In-memory TimelineStore with switchable update failures."""

    def __init__(self, tasks: list[dict] | None = None, milestones: list[dict] | None = None):
        self.tasks = [dict(t) for t in tasks or []]
        self.milestones = [dict(m) for m in milestones or []]
        self.update_calls: list[tuple[str, date]] = []
        self.fail_updates = False
        self.raise_on_update: Exception | None = None
        self._next_id = 1000

    async def list_timeline_items(self, project_id: str) -> dict[str, list[Any]]:
        return {
            "tasks": [dict(t) for t in self.tasks],
            "milestones": [dict(m) for m in self.milestones],
        }

    async def update_milestone_date(self, milestone_id: str, new_date: date) -> bool:
        self.update_calls.append((milestone_id, new_date))
        if self.raise_on_update is not None:
            raise self.raise_on_update
        if self.fail_updates:
            return False
        for milestone in self.milestones:
            if milestone["id"] == milestone_id:
                milestone["target_date"] = new_date.isoformat()
                return True
        return False

    async def create_milestone(self, project_id: str, data: dict[str, Any]) -> dict[str, Any]:
        self._next_id += 1
        record = {"id": f"m-{self._next_id}", "project_id": project_id, **data}
        self.milestones.append(record)
        return record


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def sample_tasks():
    return [
        {"id": "t-1", "title": "Write report", "due_date": "2025-01-10", "status": "pending"},
        {"id": "t-2", "title": "Review notes", "due_date": "2025-01-22", "status": "in_progress"},
        {"id": "t-3", "title": "Plan sprint", "due_date": "2025-03-01", "status": "pending"},
        {"id": "t-4", "title": "File taxes", "due_date": "2025-01-05", "status": "completed"},
        {"id": "t-5", "title": "Someday", "due_date": None, "status": "pending"},
    ]


@pytest.fixture
def sample_milestones():
    return [
        {"id": "m-1", "title": "Beta launch", "target_date": "2025-01-15", "status": "in_progress"},
        {"id": "m-2", "title": "Public launch", "target_date": "2025-01-28", "status": "planned"},
        {"id": "m-3", "title": "Retrospective", "target_date": "2025-02-25", "status": "completed"},
        {"id": "m-4", "title": "Kickoff", "target_date": "2025-01-02", "status": "cancelled"},
    ]


@pytest.fixture
def store(sample_tasks, sample_milestones):
    return FakeTimelineStore(sample_tasks, sample_milestones)


@pytest.fixture
def make_store():
    """Factory for stores with custom records."""
    return FakeTimelineStore
