"""Interface of the external task/milestone store.

The engine owns no persistence. Anything satisfying TimelineStore (an HTTP
client, a repository over SQL, a test fake) can back it.
"""

from datetime import date
from typing import Any, Protocol


class TimelineStore(Protocol):
    async def list_timeline_items(self, project_id: str) -> dict[str, list[Any]]:
        """Return {"tasks": [...], "milestones": [...]} for a project.

        Tasks carry due_date, milestones carry target_date. The key "todos"
        is accepted in place of "tasks".
        """
        ...

    async def update_milestone_date(self, milestone_id: str, new_date: date) -> bool:
        """Persist a new target date. Falsy return or an exception means failure."""
        ...

    async def create_milestone(self, project_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create a milestone and return the stored record."""
        ...
