"""TimelineService — aggregates tasks and milestones into a TimelineView.

Pulls raw records from the external store and runs the full pipeline:
unify -> classify -> window filter (+ optional search/kind filter) -> bucket,
with statistics computed from the unfiltered set. The whole view is rebuilt
on every call; there is no incremental update.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

import structlog

from tracker.core.exceptions import MilestoneValidationError
from tracker.domain.dates import normalize
from tracker.domain.dates import today as local_today
from tracker.domain.export import render_timeline_export
from tracker.domain.milestones import validate_new_milestone
from tracker.domain.periods import bucket_by_period
from tracker.domain.stats import compute_stats
from tracker.domain.unify import unify
from tracker.domain.urgency import classify
from tracker.domain.windows import coerce_window, filter_by_window
from tracker.schemas.timeline import (
    ItemKind,
    TimelineSuggestion,
    TimelineView,
    TimeWindow,
)
from tracker.services.store import TimelineStore

logger = structlog.get_logger(__name__)


@dataclass
class SuggestionApplyResult:
    """Outcome of applying an estimator suggestion."""

    created: list[dict[str, Any]] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)  # (title, reason)
    view: TimelineView | None = None


class TimelineService:
    """Builds timeline views for a project over an injected store.

    Uses dependency injection (takes the store) for testability.
    """

    def __init__(self, store: TimelineStore, default_window: TimeWindow = TimeWindow.ALL):
        """Initialize with an injected store.

        Args:
            store: External task/milestone store
            default_window: Window used when callers pass none
        """
        self.store = store
        self.default_window = default_window

    def aggregate(
        self,
        project_id: str,
        raw: dict[str, list[Any]],
        window: TimeWindow | str | None = None,
        today: date | None = None,
        query: str | None = None,
        kind: ItemKind | str | None = None,
    ) -> TimelineView:
        """Run the pipeline over already-fetched records. No I/O.

        Args:
            project_id: Project identifier, carried into the view
            raw: {"tasks" | "todos": [...], "milestones": [...]}
            window: Horizon for the filtered set (defaults to default_window)
            today: Reference day (defaults to the local calendar day)
            query: Optional case-insensitive search on title + description
            kind: Optional item kind filter

        Returns:
            TimelineView with items, filtered items, buckets and stats.
        """
        window = coerce_window(window or self.default_window)
        today = normalize(today) if today is not None else local_today()

        tasks = raw.get("tasks")
        if tasks is None:
            tasks = raw.get("todos", [])
        items = classify(unify(tasks, raw.get("milestones", [])), today)

        filtered = filter_by_window(items, window, today)

        if kind is not None:
            kind = ItemKind(kind)
            filtered = [item for item in filtered if item.kind == kind]

        if query:
            query_lower = query.lower()
            filtered = [
                item for item in filtered
                if query_lower in item.title.lower()
                or query_lower in (item.description or "").lower()
            ]

        view = TimelineView(
            project_id=str(project_id),
            window=window,
            today=today,
            items=items,
            filtered=filtered,
            buckets=bucket_by_period(filtered, today),
            stats=compute_stats(items, today),
            query=query or None,
            kind=kind,
        )

        logger.info(
            "timeline_aggregated",
            project_id=view.project_id,
            window=window.value,
            total=len(items),
            filtered=len(filtered),
        )
        return view

    async def build_view(
        self,
        project_id: str,
        window: TimeWindow | str | None = None,
        today: date | None = None,
        query: str | None = None,
        kind: ItemKind | str | None = None,
    ) -> TimelineView:
        """Fetch the project's records from the store and aggregate them."""
        with structlog.contextvars.bound_contextvars(project_id=str(project_id)):
            raw = await self.store.list_timeline_items(str(project_id))
            return self.aggregate(project_id, raw or {}, window, today, query, kind)

    async def create_milestone(
        self,
        project_id: str,
        data: dict[str, Any],
        today: date | None = None,
    ) -> dict[str, Any]:
        """Validate and create a milestone through the store.

        Raises:
            MilestoneValidationError: if the payload is invalid
        """
        today = normalize(today) if today is not None else local_today()
        payload = validate_new_milestone(data, today)
        created = await self.store.create_milestone(str(project_id), payload)
        logger.info(
            "milestone_created",
            project_id=str(project_id),
            title=payload["title"],
            target_date=payload["target_date"],
        )
        return created

    async def apply_suggestion(
        self,
        project_id: str,
        suggestion: TimelineSuggestion | dict[str, Any],
        window: TimeWindow | str | None = None,
        today: date | None = None,
    ) -> SuggestionApplyResult:
        """Create one milestone per valid suggested milestone, then rebuild the view.

        Invalid entries (no title, no or past target date) are skipped and
        reported; they never abort the rest of the suggestion.
        """
        if not isinstance(suggestion, TimelineSuggestion):
            suggestion = TimelineSuggestion.model_validate(suggestion)
        today = normalize(today) if today is not None else local_today()

        result = SuggestionApplyResult()
        for proposed in suggestion.milestones:
            try:
                created = await self.create_milestone(
                    project_id,
                    proposed.model_dump(exclude_none=True),
                    today=today,
                )
            except MilestoneValidationError as e:
                logger.warning(
                    "suggested_milestone_skipped",
                    project_id=str(project_id),
                    title=proposed.title,
                    reason=str(e),
                )
                result.skipped.append((proposed.title, str(e)))
                continue
            result.created.append(created)

        result.view = await self.build_view(project_id, window, today)
        return result

    def export(self, view: TimelineView, project_name: str, generated_on: date | None = None) -> str:
        """Render the view's filtered items as a plain-text report."""
        return render_timeline_export(
            project_name,
            view.filtered,
            view.window,
            generated_on or view.today,
        )
