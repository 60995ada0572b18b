"""Deterministic portfolio statistics.

Pure functions with no external dependencies.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from tracker.domain.urgency import effective_status, is_overdue
from tracker.schemas.timeline import ItemKind, KindStats, TimelineItem, TimelineStats


def completion_rate(completed: int, total: int) -> int:
    """Completed share as a whole percentage (0-100), rounding halves up.

    Returns 0 when total is 0.
    """
    if total <= 0:
        return 0
    rate = Decimal(completed * 100) / Decimal(total)
    return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _kind_stats(items: list[TimelineItem], today: date) -> KindStats:
    total = len(items)
    completed = sum(1 for item in items if effective_status(item) == "completed")
    overdue = sum(1 for item in items if is_overdue(item, today))
    return KindStats(
        total=total,
        completed=completed,
        overdue=overdue,
        completion_rate=completion_rate(completed, total),
    )


def compute_stats(items: list[TimelineItem], today: date) -> TimelineStats:
    """Compute per-kind counts over the unfiltered item set.

    Args:
        items: Unified items (not window-filtered; stats are portfolio-wide)
        today: Reference day for overdue counts

    Returns:
        TimelineStats with milestone and todo counts
    """
    milestones = [item for item in items if item.kind == ItemKind.MILESTONE]
    tasks = [item for item in items if item.kind == ItemKind.TASK]
    return TimelineStats(
        milestones=_kind_stats(milestones, today),
        todos=_kind_stats(tasks, today),
    )
