"""Engine entry point: wires settings, logging and the timeline service."""

import structlog

from tracker.core.config import Settings, get_settings
from tracker.core.logging import configure_structlog
from tracker.services.store import TimelineStore
from tracker.services.timeline_service import TimelineService

logger = structlog.get_logger(__name__)


def create_timeline_engine(store: TimelineStore, settings: Settings | None = None) -> TimelineService:
    """Configure logging from settings and return a TimelineService over store."""
    settings = settings or get_settings()
    configure_structlog(
        log_level="DEBUG" if settings.debug else settings.log_level,
        json_logs=settings.json_logs and not settings.debug,
    )
    logger.info("timeline_engine_ready", app_name=settings.app_name, default_window=settings.default_window.value)
    return TimelineService(store, default_window=settings.default_window)
