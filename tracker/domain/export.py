"""Plain-text timeline export."""

from collections import defaultdict
from datetime import date

from tracker.domain.urgency import status_icon
from tracker.domain.windows import window_label
from tracker.schemas.timeline import ItemKind, TimelineItem, TimeWindow

KIND_ICONS: dict[ItemKind, str] = {
    ItemKind.MILESTONE: "🏁",
    ItemKind.TASK: "✅",
}


def render_timeline_export(
    project_name: str,
    items: list[TimelineItem],
    window: TimeWindow | str,
    generated_on: date,
) -> str:
    """Render items as a text report grouped by date, oldest first.

    Args:
        project_name: Shown in the header
        items: Items to export (usually the window-filtered set)
        window: Window the items were filtered with, for the header
        generated_on: Date printed in the header

    Returns:
        The report text, ending with a newline.
    """
    label = window_label(window)
    lines = [
        f"Timeline Export - {project_name}",
        f"Generated: {generated_on.isoformat()}",
        f"Filter: {label}",
        "",
    ]

    if not items:
        lines.append(f"No timeline items found for {label}.")
        return "\n".join(lines) + "\n"

    by_date: dict[date, list[TimelineItem]] = defaultdict(list)
    for item in items:
        by_date[item.date].append(item)

    for day in sorted(by_date):
        lines.append(f"=== {day.isoformat()} ===")
        for item in by_date[day]:
            lines.append(f"{KIND_ICONS[item.kind]} {status_icon(item.status)} {item.title}")
            if item.description:
                lines.append(f"   {item.description}")
            lines.append("")

    return "\n".join(lines) + "\n"
