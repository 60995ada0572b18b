"""Milestone input validation.

Pure domain logic, no store access.
"""

from datetime import date
from typing import Any

from tracker.core.exceptions import MilestoneValidationError
from tracker.domain.dates import normalize

MILESTONE_STATUSES: tuple[str, ...] = ("planned", "in_progress", "completed", "cancelled")


def validate_new_milestone(data: dict[str, Any], today: date) -> dict[str, Any]:
    """Validate and normalise the payload for a new milestone.

    Args:
        data: {"title", "target_date", "description"?, "status"?}
        today: Reference day; target dates before it are rejected

    Returns:
        Cleaned payload with target_date as an ISO date string and a status

    Raises:
        MilestoneValidationError: on a missing title, missing or unparseable
            target date, a target date in the past, or an unknown status
    """
    title = (data.get("title") or "").strip()
    if not title:
        raise MilestoneValidationError("Milestone title is required", field="title")

    if not data.get("target_date"):
        raise MilestoneValidationError("Target date is required", field="target_date")

    target_date = normalize(data["target_date"])
    if target_date is None:
        raise MilestoneValidationError("Target date is not a valid date", field="target_date")

    if target_date < normalize(today):
        raise MilestoneValidationError("Target date cannot be in the past", field="target_date")

    status = data.get("status") or "planned"
    if status not in MILESTONE_STATUSES:
        raise MilestoneValidationError(f"Unknown milestone status: {status}", field="status")

    cleaned = {
        "title": title,
        "target_date": target_date.isoformat(),
        "status": status,
    }
    if data.get("description"):
        cleaned["description"] = data["description"]
    return cleaned
