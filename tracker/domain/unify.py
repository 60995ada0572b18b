"""Merge tasks and milestones into one date-ordered list of TimelineItems.

Pure functions with no external dependencies.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from tracker.domain.dates import normalize
from tracker.schemas.timeline import ItemKind, TimelineItem

logger = structlog.get_logger(__name__)

# Record field holding the calendar date, per source kind
DATE_FIELDS: dict[ItemKind, str] = {
    ItemKind.TASK: "due_date",
    ItemKind.MILESTONE: "target_date",
}


def _field(record: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute-style record."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def to_timeline_item(record: Any, kind: ItemKind) -> TimelineItem | None:
    """Map one raw record to a TimelineItem.

    Returns:
        TimelineItem, or None if the record has no parseable date.
    """
    item_date = normalize(_field(record, DATE_FIELDS[kind]))
    if item_date is None:
        logger.debug(
            "timeline_record_skipped",
            kind=kind.value,
            record_id=_field(record, "id"),
            reason="unparseable_date",
        )
        return None

    status = _field(record, "status")
    title = _field(record, "title")
    description = _field(record, "description")
    return TimelineItem(
        id=str(_field(record, "id")),
        kind=kind,
        title=str(title) if title is not None else "",
        description=str(description) if description else None,
        date=item_date,
        status=str(status).strip().lower() if status else "pending",
    )


def unify(tasks: Iterable[Any], milestones: Iterable[Any]) -> list[TimelineItem]:
    """Combine tasks and milestones, sorted ascending by date.

    Records without a parseable date are dropped. The sort is stable, so
    items sharing a date keep their input order (tasks before milestones).
    """
    items: list[TimelineItem] = []

    for task in tasks or []:
        item = to_timeline_item(task, ItemKind.TASK)
        if item is not None:
            items.append(item)

    for milestone in milestones or []:
        item = to_timeline_item(milestone, ItemKind.MILESTONE)
        if item is not None:
            items.append(item)

    items.sort(key=lambda item: item.date)
    return items
