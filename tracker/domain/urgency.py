"""Urgency classification for timeline items.

Pure domain logic. An item is overdue only while it is still open; completed
and cancelled work is never flagged after the fact.
"""

from datetime import date

from tracker.domain.dates import normalize
from tracker.schemas.timeline import ItemKind, TimelineItem

KNOWN_STATUSES: frozenset[str] = frozenset({
    "pending",
    "in_progress",
    "blocked",
    "completed",
    "cancelled",
    "planned",
})

OPEN_STATUSES: frozenset[str] = frozenset({"pending", "in_progress", "blocked"})

# Milestones may carry an explicit "overdue" status, which still counts as open
MILESTONE_OPEN_STATUSES: frozenset[str] = OPEN_STATUSES | {"overdue"}

STATUS_ICONS: dict[str, str] = {
    "completed": "✓",
    "in_progress": "→",
    "planned": "○",
    "cancelled": "✗",
    "overdue": "⚠",
}


def effective_status(item: TimelineItem) -> str:
    """Status used for classification. Unknown values read as pending."""
    status = (item.status or "").lower()
    if status in KNOWN_STATUSES:
        return status
    if item.kind == ItemKind.MILESTONE and status == "overdue":
        return status
    return "pending"


def is_open(item: TimelineItem) -> bool:
    """True while the item still has work outstanding."""
    status = effective_status(item)
    if item.kind == ItemKind.MILESTONE:
        return status in MILESTONE_OPEN_STATUSES
    return status in OPEN_STATUSES


def is_overdue(item: TimelineItem, today: date) -> bool:
    """An open item whose date is strictly before today."""
    if not is_open(item):
        return False
    item_date = normalize(item.date)
    if item_date is None:
        return False
    return item_date < normalize(today)


def get_status_class(item: TimelineItem, today: date) -> str:
    """Display class: overdue takes priority over every status-derived class."""
    if is_overdue(item, today):
        return "overdue"
    status = effective_status(item)
    if status == "completed":
        return "completed"
    if status == "in_progress":
        return "in-progress"
    if status == "cancelled":
        return "cancelled"
    return "planned"


def status_label(item: TimelineItem, today: date) -> str:
    """Human-readable status, e.g. "Overdue" or "in progress"."""
    if is_overdue(item, today):
        return "Overdue"
    return (item.status or "pending").replace("_", " ")


def status_icon(status: str | None) -> str:
    return STATUS_ICONS.get(status or "", STATUS_ICONS["planned"])


def classify(items: list[TimelineItem], today: date) -> list[TimelineItem]:
    """Return copies of items annotated with is_overdue and status_class."""
    return [
        item.model_copy(update={
            "is_overdue": is_overdue(item, today),
            "status_class": get_status_class(item, today),
        })
        for item in items
    ]
