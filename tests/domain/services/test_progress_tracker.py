"""Tests for the progress state machine."""

import asyncio

import pytest
import pytest_asyncio

from crisiswatch.domain.models.progress import (
    SourceActivityEvent,
    SourceStatus,
    Stage,
    StageEvent,
    TerminalEvent,
)
from crisiswatch.domain.models.verification import Verdict, VerificationResult
from crisiswatch.domain.services.progress_tracker import ProgressTracker


@pytest_asyncio.fixture
async def tracker():
    """Started tracker whose timers never fire on their own during a test."""
    snapshots = []
    tracker = ProgressTracker(stage_interval=60, tick_interval=60, listener=snapshots.append)
    tracker.snapshots = snapshots
    tracker.start()
    yield tracker
    tracker.stop()


@pytest.mark.asyncio
async def test_start_resets_state(tracker):
    snapshot = tracker.snapshot()
    assert snapshot.stage is Stage.READING
    assert snapshot.is_running
    assert not snapshot.is_settled
    assert tracker.has_active_timers


@pytest.mark.asyncio
async def test_timer_stops_at_penultimate_stage(tracker):
    """Timer advances never reach the verdict stage."""
    for _ in range(5):
        tracker._advance_by_timer()

    assert tracker.stage_index == 2
    assert tracker.snapshot().stage is Stage.CROSS_REFERENCING

    tracker.settle()
    assert tracker.snapshot().stage is Stage.VERDICT
    assert tracker.snapshot().is_settled


@pytest.mark.asyncio
async def test_stage_events_are_monotonic(tracker):
    """Test that an earlier stage never moves the index backwards."""
    tracker.handle(StageEvent("synthesizing"))
    assert tracker.stage_index == 2

    tracker.handle(StageEvent("searching", "Searching again"))
    assert tracker.stage_index == 2
    assert tracker.snapshot().message == "Searching again"

    indices = [snapshot.stage_index for snapshot in tracker.snapshots]
    assert indices == sorted(indices)


@pytest.mark.asyncio
async def test_verdict_stage_event_waits_for_settlement(tracker):
    tracker.handle(StageEvent("complete"))
    assert tracker.stage_index == 2

    tracker.handle(TerminalEvent())
    tracker.settle()
    assert tracker.stage_index == 3


@pytest.mark.asyncio
async def test_terminal_failure_message_only_without_result(tracker):
    """Test that a terminal failure updates the message and a settled result does not."""
    tracker.handle(TerminalEvent(failure="LLM quota exceeded"))
    assert tracker.snapshot().message == "LLM quota exceeded"

    tracker.handle(StageEvent("searching", "Hunting for receipts"))
    done = TerminalEvent(
        result=VerificationResult(claim="claim", verdict=Verdict.TRUE, confidence=88),
        failure="ignored",
    )
    assert done.succeeded
    assert not TerminalEvent(failure="x").succeeded

    tracker.handle(done)
    assert tracker.snapshot().message == "Hunting for receipts"


@pytest.mark.asyncio
async def test_first_transport_stage_stops_timer(tracker):
    """Test that transport stages take over from the stage timer."""
    tracker.handle(StageEvent("extracting"))
    assert tracker.stage_index == 0
    assert tracker._stage_task is None

    tracker._advance_by_timer()
    assert tracker.stage_index == 0


@pytest.mark.asyncio
async def test_unknown_stage_keeps_timer(tracker):
    tracker.handle(StageEvent("pondering", "Thinking hard"))

    assert tracker.stage_index == 0
    assert tracker.snapshot().message == "Thinking hard"
    assert tracker._stage_task is not None

    tracker._advance_by_timer()
    assert tracker.stage_index == 1


@pytest.mark.asyncio
async def test_source_activity(tracker):
    """Test source searching and found events."""
    tracker.handle(SourceActivityEvent("Wikipedia", SourceStatus.SEARCHING))
    snapshot = tracker.snapshot()
    assert snapshot.current_source == "Wikipedia"
    assert snapshot.message == "Reading Wikipedia..."

    tracker.handle(SourceActivityEvent("Wikipedia", SourceStatus.FOUND, count=3))
    tracker.handle(SourceActivityEvent("Reuters", SourceStatus.FOUND, count=2))
    snapshot = tracker.snapshot()
    assert snapshot.message == "Found 2 from Reuters"
    assert [(tally.name, tally.count) for tally in snapshot.sources_found] == [("Wikipedia", 3), ("Reuters", 2)]
    assert snapshot.total_sources_found == 5


@pytest.mark.asyncio
async def test_tick_counts_elapsed_seconds(tracker):
    tracker._tick()
    tracker._tick()
    assert tracker.elapsed_seconds == 2


@pytest.mark.asyncio
async def test_fail_keeps_stage_and_stops_timers(tracker):
    tracker._advance_by_timer()
    tracker.fail("Claim is required")

    snapshot = tracker.snapshot()
    assert snapshot.stage_index == 1
    assert snapshot.message == "Claim is required"
    assert not snapshot.is_running
    assert not snapshot.is_settled
    assert not tracker.has_active_timers


@pytest.mark.asyncio
async def test_events_ignored_when_not_running(tracker):
    tracker.stop()
    tracker.handle(StageEvent("synthesizing"))
    assert tracker.stage_index == 0
    assert not tracker.has_active_timers


@pytest.mark.asyncio
async def test_start_resets_previous_run(tracker):
    tracker.handle(StageEvent("synthesizing"))
    tracker.settle()

    tracker.start()
    snapshot = tracker.snapshot()
    assert snapshot.stage_index == 0
    assert snapshot.sources_found == []
    assert snapshot.is_running


@pytest.mark.asyncio
async def test_real_timers_advance_and_stop():
    """Test the scheduled timers end to end with short intervals."""
    tracker = ProgressTracker(stage_interval=0.01, tick_interval=0.01)
    tracker.start()
    await asyncio.sleep(0.15)

    assert tracker.stage_index == 2
    assert tracker.elapsed_seconds > 0

    tracker.stop()
    assert not tracker.has_active_timers


@pytest.mark.asyncio
async def test_listener_errors_are_contained():
    def broken_listener(snapshot):
        raise RuntimeError("listener blew up")

    tracker = ProgressTracker(stage_interval=60, tick_interval=60, listener=broken_listener)
    tracker.start()
    tracker.handle(StageEvent("searching"))
    assert tracker.stage_index == 1
    tracker.stop()
