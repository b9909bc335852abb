"""Progress state machine for a single verification."""

import asyncio
import logging
from typing import Callable, List, Optional

from ..models.progress import (
    STAGE_LOOKUP,
    STAGE_ORDER,
    ProgressEvent,
    ProgressSnapshot,
    SourceActivityEvent,
    SourceStatus,
    SourceTally,
    StageEvent,
    TerminalEvent,
)

logger = logging.getLogger(__name__)

ProgressListener = Callable[[ProgressSnapshot], None]

# The timer never moves past this index; only settlement reaches the verdict.
PENULTIMATE_INDEX = len(STAGE_ORDER) - 2


class ProgressTracker:
    """Tracks the stage, source activity and elapsed time of a verification.

    The stage index only moves forward. Transport ``StageEvent``s drive it
    when they arrive; until the first one does, a timer advances one stage
    every ``stage_interval`` seconds, stopping at the penultimate stage. The
    final stage is reached only through ``settle()``.
    """

    def __init__(
        self,
        stage_interval: float = 6.0,
        tick_interval: float = 1.0,
        listener: Optional[ProgressListener] = None,
    ):
        """Initialize the tracker.

        Args:
            stage_interval: Seconds between timer-driven stage advances
            tick_interval: Seconds between elapsed-time ticks
            listener: Called with a snapshot after every change
        """
        self._stage_interval = stage_interval
        self._tick_interval = tick_interval
        self._listener = listener
        self._stage_task: Optional[asyncio.Task] = None
        self._ticker_task: Optional[asyncio.Task] = None
        self._reset()

    def _reset(self) -> None:
        self._stage_index = 0
        self._message = ""
        self._elapsed = 0
        self._current_source: Optional[str] = None
        self._sources_found: List[SourceTally] = []
        self._transport_driven = False
        self._running = False
        self._settled = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def stage_index(self) -> int:
        return self._stage_index

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed

    @property
    def has_active_timers(self) -> bool:
        """Whether the ticker or the stage timer is still scheduled."""
        return any(
            task is not None and not task.done()
            for task in (self._stage_task, self._ticker_task)
        )

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            stage=STAGE_ORDER[self._stage_index],
            stage_index=self._stage_index,
            message=self._message,
            elapsed_seconds=self._elapsed,
            current_source=self._current_source,
            sources_found=list(self._sources_found),
            is_running=self._running,
            is_settled=self._settled,
        )

    def start(self) -> None:
        """Reset state and start the ticker and the stage timer.

        Must be called from a running event loop.
        """
        self._cancel_timers()
        self._reset()
        self._running = True
        self._ticker_task = asyncio.create_task(
            self._run_periodic(self._tick_interval, self._tick)
        )
        self._stage_task = asyncio.create_task(
            self._run_periodic(self._stage_interval, self._advance_by_timer)
        )
        self._notify()

    def settle(self) -> None:
        """Terminal success: stop timers and move to the verdict stage."""
        self._cancel_timers()
        self._stage_index = len(STAGE_ORDER) - 1
        self._current_source = None
        self._running = False
        self._settled = True
        self._notify()

    def fail(self, message: str = "") -> None:
        """Terminal failure: stop timers, keep the reached stage."""
        self._cancel_timers()
        self._current_source = None
        self._running = False
        if message:
            self._message = message
        self._notify()

    def stop(self) -> None:
        """Teardown or cancellation: stop timers without touching the stage."""
        self._cancel_timers()
        self._current_source = None
        self._running = False

    def handle(self, event: ProgressEvent) -> None:
        """Apply a transport progress event."""
        if not self._running:
            logger.debug(f"Ignoring progress event outside a verification: {event}")
            return

        if isinstance(event, StageEvent):
            self._handle_stage(event)
        elif isinstance(event, SourceActivityEvent):
            self._handle_source(event)
        elif isinstance(event, TerminalEvent):
            if not event.succeeded and event.failure:
                self._message = event.failure
        self._notify()

    def _handle_stage(self, event: StageEvent) -> None:
        if event.message is not None:
            self._message = event.message

        stage = STAGE_LOOKUP.get(event.stage_id)
        if stage is None:
            logger.debug(f"Unknown stage '{event.stage_id}' - no transition")
            return

        if not self._transport_driven:
            self._transport_driven = True
            self._cancel_stage_timer()

        target = min(STAGE_ORDER.index(stage), PENULTIMATE_INDEX)
        if target > self._stage_index:
            self._stage_index = target

    def _handle_source(self, event: SourceActivityEvent) -> None:
        if event.status == SourceStatus.SEARCHING:
            self._current_source = event.source
            self._message = f"Reading {event.source}..."
        else:
            count = event.count or 0
            self._sources_found.append(SourceTally(name=event.source, count=count))
            self._message = f"Found {count} from {event.source}"

    def _tick(self) -> None:
        self._elapsed += 1
        self._notify()

    def _advance_by_timer(self) -> None:
        if self._transport_driven or self._stage_index >= PENULTIMATE_INDEX:
            return
        self._stage_index += 1
        self._notify()

    async def _run_periodic(self, interval: float, callback: Callable[[], None]) -> None:
        while True:
            await asyncio.sleep(interval)
            callback()

    def _cancel_stage_timer(self) -> None:
        if self._stage_task is not None:
            self._stage_task.cancel()
            self._stage_task = None

    def _cancel_timers(self) -> None:
        self._cancel_stage_timer()
        if self._ticker_task is not None:
            self._ticker_task.cancel()
            self._ticker_task = None

    def _notify(self) -> None:
        if self._listener is None:
            return
        try:
            self._listener(self.snapshot())
        except Exception as e:
            logger.warning(f"⚠️ Progress listener failed: {e}")
