"""Period bucketing for grouped timeline display.

Pure functions, deterministic given (items, today).
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from tracker.domain.dates import normalize
from tracker.domain.urgency import is_open
from tracker.schemas.timeline import Period, TimelineBuckets, TimelineItem

PERIOD_TITLES: dict[Period, str] = {
    Period.OVERDUE: "Overdue",
    Period.THIS_WEEK: "This Week",
    Period.NEXT_WEEK: "Next Week",
    Period.THIS_MONTH: "Later This Month",
    Period.LATER: "Future",
}


@dataclass(frozen=True)
class PeriodBoundaries:
    """Inclusive upper bounds of each dated period, computed once from today."""

    today: date
    week_end: date
    next_week_end: date
    month_end: date


def period_boundaries(today: date) -> PeriodBoundaries:
    today = normalize(today)
    last_day = calendar.monthrange(today.year, today.month)[1]
    return PeriodBoundaries(
        today=today,
        week_end=today + timedelta(days=7),
        next_week_end=today + timedelta(days=14),
        month_end=today.replace(day=last_day),
    )


def period_for(item: TimelineItem, bounds: PeriodBoundaries) -> Period:
    """Place one item. First matching rule wins."""
    if item.date < bounds.today and is_open(item):
        return Period.OVERDUE
    if item.date <= bounds.week_end:
        return Period.THIS_WEEK
    if item.date <= bounds.next_week_end:
        return Period.NEXT_WEEK
    if item.date <= bounds.month_end:
        return Period.THIS_MONTH
    return Period.LATER


def bucket_by_period(items: list[TimelineItem], today: date) -> TimelineBuckets:
    """Partition items into the five display periods.

    Every item lands in exactly one bucket; empty buckets are still returned.
    """
    bounds = period_boundaries(today)
    buckets = TimelineBuckets()
    for item in items:
        buckets.get(period_for(item, bounds)).append(item)
    return buckets


def default_drop_date(period: Period | str, today: date) -> date | None:
    """Date assigned when an item is dropped into an empty period container.

    Returns:
        Mid-week, mid-next-week, month end or mid-next-month for the dated
        periods. None for the overdue period, which does not accept drops.
    """
    period = Period(period)
    bounds = period_boundaries(today)

    if period == Period.THIS_WEEK:
        return bounds.today + timedelta(days=3)
    if period == Period.NEXT_WEEK:
        return bounds.today + timedelta(days=10)
    if period == Period.THIS_MONTH:
        return bounds.month_end
    if period == Period.LATER:
        return bounds.today.replace(day=15) + relativedelta(months=1)
    return None
