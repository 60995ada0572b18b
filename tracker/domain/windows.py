"""Time-window filtering.

Forward windows (week/month/quarter/year) start at today and never include
past-dated items, even overdue ones. Only the overdue and all windows surface
past-due work.
"""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from tracker.core.exceptions import InvalidWindowError
from tracker.domain.dates import normalize
from tracker.domain.urgency import is_overdue
from tracker.schemas.timeline import TimelineItem, TimeWindow

WEEK_WINDOW_DAYS: int = 10

# Horizon added to today for each forward-looking window
WINDOW_SPANS: dict[TimeWindow, timedelta | relativedelta] = {
    TimeWindow.WEEK: timedelta(days=WEEK_WINDOW_DAYS),
    TimeWindow.MONTH: relativedelta(months=1),
    TimeWindow.QUARTER: relativedelta(months=3),
    TimeWindow.YEAR: relativedelta(years=1),
}

WINDOW_LABELS: dict[TimeWindow, str] = {
    TimeWindow.WEEK: "this week",
    TimeWindow.MONTH: "this month",
    TimeWindow.QUARTER: "this quarter",
    TimeWindow.YEAR: "this year",
    TimeWindow.OVERDUE: "overdue items",
    TimeWindow.ALL: "all time",
}


def coerce_window(window: TimeWindow | str | None) -> TimeWindow:
    """Accept enum members or their string values. None means all."""
    if window is None:
        return TimeWindow.ALL
    try:
        return TimeWindow(window)
    except ValueError:
        raise InvalidWindowError(window) from None


def window_end(window: TimeWindow | str, today: date) -> date | None:
    """Inclusive upper bound of a forward window, None for all/overdue."""
    span = WINDOW_SPANS.get(coerce_window(window))
    if span is None:
        return None
    return normalize(today) + span


def window_label(window: TimeWindow | str) -> str:
    return WINDOW_LABELS[coerce_window(window)]


def filter_by_window(
    items: list[TimelineItem],
    window: TimeWindow | str,
    today: date,
) -> list[TimelineItem]:
    """Return the items that fall inside the named window.

    Args:
        items: Unified timeline items
        window: Horizon name
        today: Reference day (inclusive lower bound for forward windows)

    Returns:
        New list, always a subset of items, original order preserved.
    """
    window = coerce_window(window)
    today = normalize(today)

    if window == TimeWindow.ALL:
        return list(items)

    if window == TimeWindow.OVERDUE:
        return [item for item in items if is_overdue(item, today)]

    end = window_end(window, today)
    return [item for item in items if today <= item.date <= end]
