"""Pydantic schemas for the unified timeline view."""

import datetime as dt
from collections.abc import Iterator
from enum import StrEnum

from pydantic import BaseModel, Field


class ItemKind(StrEnum):
    """Source collection of a timeline item. Closed set."""

    TASK = "task"
    MILESTONE = "milestone"


class TimeWindow(StrEnum):
    """Named horizon used to narrow the timeline."""

    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    OVERDUE = "overdue"


class Period(StrEnum):
    """Display periods, declared in render order."""

    OVERDUE = "overdue"
    THIS_WEEK = "thisWeek"
    NEXT_WEEK = "nextWeek"
    THIS_MONTH = "thisMonth"
    LATER = "later"


class TimelineItem(BaseModel):
    """A task or milestone placed on the timeline.

    is_overdue and status_class are derived per aggregation pass and never
    written back to the store.
    """

    id: str
    kind: ItemKind
    title: str = ""
    description: str | None = None
    date: dt.date
    status: str = "pending"
    is_overdue: bool = False
    status_class: str = "planned"


class TimelineBuckets(BaseModel):
    """Items partitioned by display period. Every bucket is always present."""

    overdue: list[TimelineItem] = Field(default_factory=list)
    this_week: list[TimelineItem] = Field(default_factory=list)
    next_week: list[TimelineItem] = Field(default_factory=list)
    this_month: list[TimelineItem] = Field(default_factory=list)
    later: list[TimelineItem] = Field(default_factory=list)

    def get(self, period: Period) -> list[TimelineItem]:
        return getattr(self, _PERIOD_FIELDS[period])

    def counts(self) -> dict[Period, int]:
        return {period: len(self.get(period)) for period in Period}

    def non_empty(self) -> Iterator[tuple[Period, list[TimelineItem]]]:
        """Yield (period, items) for populated buckets in render order."""
        for period in Period:
            items = self.get(period)
            if items:
                yield period, items


_PERIOD_FIELDS: dict[Period, str] = {
    Period.OVERDUE: "overdue",
    Period.THIS_WEEK: "this_week",
    Period.NEXT_WEEK: "next_week",
    Period.THIS_MONTH: "this_month",
    Period.LATER: "later",
}


class KindStats(BaseModel):
    """Counts for one item kind."""

    total: int = 0
    completed: int = 0
    overdue: int = 0
    completion_rate: int = Field(0, ge=0, le=100, description="Completed share, 0-100")


class TimelineStats(BaseModel):
    """Portfolio-wide counts, computed from the unfiltered item set."""

    milestones: KindStats = Field(default_factory=KindStats)
    todos: KindStats = Field(default_factory=KindStats)


class TimelineView(BaseModel):
    """One aggregation pass over a project's timeline."""

    project_id: str
    window: TimeWindow
    today: dt.date
    items: list[TimelineItem] = Field(default_factory=list, description="Unified, classified items")
    filtered: list[TimelineItem] = Field(default_factory=list, description="Items inside the window")
    buckets: TimelineBuckets = Field(default_factory=TimelineBuckets)
    query: str | None = Field(default=None, description="Search applied to the filtered set")
    kind: ItemKind | None = Field(default=None, description="Kind filter applied to the filtered set")
    stats: TimelineStats = Field(default_factory=TimelineStats)

    def find(self, item_id: str, kind: ItemKind | None = None) -> TimelineItem | None:
        """Look up an item by id. Milestones win when a task shares the id."""
        kinds = [kind] if kind is not None else [ItemKind.MILESTONE, ItemKind.TASK]
        for candidate_kind in kinds:
            for item in self.items:
                if item.kind == candidate_kind and item.id == str(item_id):
                    return item
        return None


class SuggestedMilestone(BaseModel):
    """One milestone proposed by the timeline estimator."""

    title: str = ""
    target_date: str | None = None
    description: str | None = None


class TimelineSuggestion(BaseModel):
    """Estimator output handed to the engine for application."""

    timeline_summary: str | None = None
    milestones: list[SuggestedMilestone] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
