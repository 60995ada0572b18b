from datetime import date


class TrackerError(Exception):
    """Base exception for the timeline engine."""

    pass


class InvalidWindowError(TrackerError):
    """Raised when a time window name is not recognised."""

    def __init__(self, window: object):
        self.window = window
        super().__init__(f"Unknown time window: {window!r}")


class MilestoneValidationError(TrackerError):
    """Raised when milestone input fails validation."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class RescheduleFailedError(TrackerError):
    """Raised when the store rejects a milestone date change."""

    def __init__(self, milestone_id: str, new_date: date, reason: str = ""):
        self.milestone_id = milestone_id
        self.new_date = new_date
        self.reason = reason
        message = f"Failed to move milestone '{milestone_id}' to {new_date.isoformat()}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
