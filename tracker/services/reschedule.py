"""RescheduleCoordinator — drag-and-drop milestone rescheduling.

State machine:
    IDLE -> DRAGGING -> RESOLVING -> IDLE
                     -> CANCELLED -> IDLE
                     -> IDLE          (no-op drop)

- Only milestones can be dragged; task due dates are edited elsewhere.
- At most one drag is live. begin_drag() outside IDLE is ignored, which also
  blocks new drags while a mutation is in flight.
- RESOLVING issues exactly one update_milestone_date() call. On success the
  whole view is rebuilt; on failure nothing local changes and
  RescheduleFailedError is raised once the machine is back in IDLE. If the
  rebuild itself fails after the store accepted the date, the drop still
  reports RESCHEDULED with no view and the caller rebuilds later.
- An issued mutation always runs to completion; cancel_drag() only applies
  while DRAGGING.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

import structlog

from tracker.core.exceptions import RescheduleFailedError
from tracker.domain.periods import default_drop_date
from tracker.schemas.timeline import ItemKind, Period, TimelineView
from tracker.services.store import TimelineStore
from tracker.services.timeline_service import TimelineService

logger = structlog.get_logger(__name__)


class DragState(StrEnum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESOLVING = "resolving"
    CANCELLED = "cancelled"


class RescheduleOutcome(StrEnum):
    RESCHEDULED = "rescheduled"
    NOOP = "noop"
    IGNORED = "ignored"


@dataclass(frozen=True)
class DragContext:
    """The drag currently in progress."""

    item_id: str
    kind: ItemKind
    original_date: date


@dataclass
class RescheduleResult:
    """Result of a drop."""

    outcome: RescheduleOutcome
    milestone_id: str | None = None
    new_date: date | None = None
    view: TimelineView | None = None


PERIOD_NAMES: frozenset[str] = frozenset(period.value for period in Period)

RefreshFn = Callable[[], Awaitable[TimelineView]]


class RescheduleCoordinator:
    """Drives milestone date changes from drag gestures."""

    # Valid state transitions
    TRANSITIONS = {
        DragState.IDLE: [DragState.DRAGGING],
        DragState.DRAGGING: [DragState.RESOLVING, DragState.CANCELLED, DragState.IDLE],
        DragState.RESOLVING: [DragState.IDLE],
        DragState.CANCELLED: [DragState.IDLE],
    }

    def __init__(self, store: TimelineStore, refresh: RefreshFn, view: TimelineView):
        """
        Args:
            store: External store; only update_milestone_date() is called
            refresh: Rebuilds the full view after a successful mutation
            view: Current view, used to resolve item ids and today
        """
        self.store = store
        self.refresh = refresh
        self.view = view
        self.state = DragState.IDLE
        self.drag: DragContext | None = None

    @classmethod
    def for_service(cls, service: TimelineService, view: TimelineView) -> "RescheduleCoordinator":
        """Coordinator that refreshes through a TimelineService with the view's parameters.

        Window, today, search query and kind filter all carry over to the rebuilt view.
        """

        async def refresh() -> TimelineView:
            return await service.build_view(
                view.project_id,
                view.window,
                view.today,
                query=view.query,
                kind=view.kind,
            )

        return cls(service.store, refresh, view)

    def _transition(self, new_state: DragState) -> bool:
        if new_state not in self.TRANSITIONS.get(self.state, []):
            return False
        logger.debug("drag_state_changed", from_state=self.state.value, to_state=new_state.value)
        self.state = new_state
        return True

    def _finish(self) -> None:
        self.drag = None
        self._transition(DragState.IDLE)

    def begin_drag(self, item_id: str) -> bool:
        """Start dragging a milestone.

        Returns:
            True if a drag started. False when another drag is live, a
            mutation is in flight, or the id is not a milestone.
        """
        if self.state != DragState.IDLE:
            logger.debug("drag_start_ignored", item_id=item_id, state=self.state.value)
            return False

        item = self.view.find(item_id, ItemKind.MILESTONE)
        if item is None:
            logger.debug("drag_start_ignored", item_id=item_id, reason="not_a_milestone")
            return False

        self.drag = DragContext(item_id=item.id, kind=item.kind, original_date=item.date)
        self._transition(DragState.DRAGGING)
        return True

    def cancel_drag(self) -> bool:
        """Abandon the current drag without side effects."""
        if not self._transition(DragState.CANCELLED):
            return False
        self._finish()
        return True

    def _resolve_target_date(
        self,
        drag: DragContext,
        target: Period | str,
        kind: ItemKind | None,
    ) -> date | None:
        if isinstance(target, Period):
            return default_drop_date(target, self.view.today)

        item = self.view.find(target, kind)
        if item is None:
            if target in PERIOD_NAMES:
                return default_drop_date(Period(target), self.view.today)
            return None
        if item.kind == drag.kind and item.id == drag.item_id:
            return None  # self-drop
        return item.date

    async def handle_drop(
        self,
        target: Period | str,
        kind: ItemKind | None = None,
    ) -> RescheduleResult:
        """Drop the dragged milestone onto an item or an empty period container.

        Args:
            target: Period member for a container drop, otherwise an item id
            kind: Disambiguates an item id shared by a task and a milestone

        Returns:
            RescheduleResult with the refreshed view on success. view is None
            when the update landed but the rebuild failed.

        Raises:
            RescheduleFailedError: the store rejected or failed the update
        """
        if self.state != DragState.DRAGGING or self.drag is None:
            logger.debug("drop_ignored", state=self.state.value)
            return RescheduleResult(RescheduleOutcome.IGNORED)

        drag = self.drag
        new_date = self._resolve_target_date(drag, target, kind)
        if new_date is None or new_date == drag.original_date:
            self._finish()
            return RescheduleResult(RescheduleOutcome.NOOP, milestone_id=drag.item_id)

        self._transition(DragState.RESOLVING)
        try:
            try:
                updated = await self.store.update_milestone_date(drag.item_id, new_date)
            except Exception as e:
                logger.warning(
                    "reschedule_failed",
                    milestone_id=drag.item_id,
                    new_date=new_date.isoformat(),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise RescheduleFailedError(drag.item_id, new_date, str(e)) from e

            if not updated:
                logger.warning(
                    "reschedule_failed",
                    milestone_id=drag.item_id,
                    new_date=new_date.isoformat(),
                    error="store rejected the update",
                )
                raise RescheduleFailedError(drag.item_id, new_date, "store rejected the update")

            logger.info(
                "milestone_rescheduled",
                milestone_id=drag.item_id,
                from_date=drag.original_date.isoformat(),
                to_date=new_date.isoformat(),
            )

            try:
                self.view = await self.refresh()
            except Exception as e:
                # The store already holds new_date; the caller must rebuild the view.
                logger.warning(
                    "reschedule_refresh_failed",
                    milestone_id=drag.item_id,
                    new_date=new_date.isoformat(),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return RescheduleResult(
                    RescheduleOutcome.RESCHEDULED,
                    milestone_id=drag.item_id,
                    new_date=new_date,
                )
        finally:
            self._finish()

        return RescheduleResult(
            RescheduleOutcome.RESCHEDULED,
            milestone_id=drag.item_id,
            new_date=new_date,
            view=self.view,
        )
