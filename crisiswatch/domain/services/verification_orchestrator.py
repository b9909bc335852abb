"""Service orchestrating claim verification across fallback transports."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import (
    ExhaustionError,
    FallbackEligibleError,
    InvalidClaimError,
    TransportError,
)
from ..models.claim import VerificationRequest
from ..models.connectivity import SessionConnectivity
from ..models.example_claim import ExampleClaim
from ..models.progress import ProgressEvent
from ..models.verification import VerificationResult
from ..ports.transport import VerificationTransport
from .history_service import HistoryService
from .progress_tracker import ProgressTracker

logger = logging.getLogger(__name__)

EXAMPLE_TIMEOUT_SECONDS = 20.0
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."
EXAMPLE_SLOW_EXPLANATION = (
    "This result is from our pre-verified cache. The live API is currently slow or unavailable."
)
EXAMPLE_ERROR_EXPLANATION = "This result is from our pre-verified cache due to an API error."


class OrchestratorState(str, Enum):
    """Where the orchestrator is in the fallback chain."""
    IDLE = "idle"
    STREAMING = "streaming"
    BUFFERED = "buffered"
    SIMULATED = "simulated"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TransportKind(str, Enum):
    """Which transport produced a result."""
    STREAMING = "streaming"
    BUFFERED = "buffered"
    SIMULATED = "simulated"
    CANNED = "canned"


@dataclass
class VerificationOutcome:
    """A verification result and where it came from."""

    request: VerificationRequest
    result: VerificationResult
    transport: TransportKind


class VerificationOrchestrator:
    """Runs one verification at a time through the transport fallback chain.

    The chain is streaming -> buffered -> simulated. Streaming and buffered
    are skipped while the session is unreachable. A fallback-eligible
    failure moves on to the next transport; any other transport error ends
    the verification immediately. Connectivity is demoted only once both
    live transports have failed.
    """

    def __init__(
        self,
        streaming: VerificationTransport,
        buffered: VerificationTransport,
        simulated: VerificationTransport,
        connectivity: SessionConnectivity,
        history: HistoryService,
        progress: Optional[ProgressTracker] = None,
        probe=None,
        transport_timeout: Optional[float] = None,
        example_timeout: float = EXAMPLE_TIMEOUT_SECONDS,
    ):
        """Initialize the orchestrator.

        Args:
            streaming: Event stream transport
            buffered: Single request/response transport
            simulated: Local heuristic transport, never fails
            connectivity: Session connectivity consulted before each run
            history: History the successful results are recorded into
            progress: Progress state machine driven by the active transport
            probe: Connectivity probe run by ``initialize()``
            transport_timeout: Ceiling for each live transport, in seconds
            example_timeout: Ceiling before an example shows its canned result
        """
        self._streaming = streaming
        self._buffered = buffered
        self._simulated = simulated
        self._connectivity = connectivity
        self._history = history
        self._progress = progress or ProgressTracker()
        self._probe = probe
        self._transport_timeout = transport_timeout
        self._example_timeout = example_timeout

        self._state = OrchestratorState.IDLE
        self._generation = 0
        self._active_task: Optional[asyncio.Task] = None
        self._last_request: Optional[VerificationRequest] = None
        self._last_error: Optional[TransportError] = None
        self._last_outcome: Optional[VerificationOutcome] = None
        logger.info("🔧 VerificationOrchestrator initialized")

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def connectivity(self) -> SessionConnectivity:
        return self._connectivity

    @property
    def progress(self) -> ProgressTracker:
        return self._progress

    @property
    def history(self) -> HistoryService:
        return self._history

    @property
    def active_task(self) -> Optional[asyncio.Task]:
        """The in-flight transport chain, including a discarded example call."""
        return self._active_task

    @property
    def last_request(self) -> Optional[VerificationRequest]:
        return self._last_request

    @property
    def last_error(self) -> Optional[TransportError]:
        return self._last_error

    @property
    def last_outcome(self) -> Optional[VerificationOutcome]:
        return self._last_outcome

    async def initialize(self) -> SessionConnectivity:
        """Probe the remote service once for this session."""
        if self._probe is not None:
            await self._probe.probe()
        logger.info(f"🔌 Session connectivity: {self._connectivity.state.value}")
        return self._connectivity

    def build_request(
        self,
        claim: str,
        language: str = "en",
        skip_cache: Optional[bool] = None,
    ) -> VerificationRequest:
        """Build a request, defaulting ``skip_cache`` from the history state."""
        if skip_cache is None:
            skip_cache = self._history.skip_cache
        return VerificationRequest.create(claim, language=language, skip_cache=skip_cache)

    async def verify(
        self,
        claim: str,
        language: str = "en",
        skip_cache: Optional[bool] = None,
    ) -> VerificationOutcome:
        """Verify a claim.

        Raises:
            InvalidClaimError: If the claim is empty
            TerminalTransportError: If the service rejected the request
            ExhaustionError: If every transport failed
        """
        return await self.submit(self.build_request(claim, language, skip_cache))

    async def retry(self) -> VerificationOutcome:
        """Re-submit the last request unchanged."""
        if self._last_request is None:
            raise InvalidClaimError("Nothing to retry")
        return await self.submit(self._last_request)

    async def verify_history_entry(self, entry_id: str) -> VerificationOutcome:
        """Verify a claim from history again."""
        entry = self._history.get(entry_id)
        if entry is None:
            raise KeyError(f"History entry '{entry_id}' not found")
        return await self.verify(entry.claim)

    async def submit(self, request: VerificationRequest) -> VerificationOutcome:
        """Run a prepared request through the fallback chain."""
        await self.cancel()
        generation = self._begin(request)
        task = asyncio.create_task(self._run_chain(request, generation))
        self._active_task = task

        try:
            outcome = await task
        except asyncio.CancelledError:
            if generation == self._generation:
                self._progress.stop()
                self._state = OrchestratorState.IDLE
            raise
        except TransportError as e:
            self._fail(generation, e)
            raise
        except Exception as e:
            error = ExhaustionError(UNEXPECTED_ERROR_MESSAGE, last_error=str(e))
            self._fail(generation, error)
            raise error from e
        finally:
            if self._active_task is task:
                self._active_task = None

        self._succeed(generation, outcome)
        return outcome

    async def verify_example(self, example: ExampleClaim, language: str = "en") -> VerificationOutcome:
        """Verify a preset example, showing its canned result if the check is slow.

        The live chain races a fixed ceiling. If the ceiling wins, the live call
        keeps running in the background until it settles (releasing its channel)
        and its result is discarded; the next submission cancels it.
        """
        await self.cancel()
        request = self.build_request(example.claim, language)
        generation = self._begin(request)
        task = asyncio.create_task(self._run_chain(request, generation))
        self._active_task = task

        try:
            done, _ = await asyncio.wait({task}, timeout=self._example_timeout)
        except asyncio.CancelledError:
            task.cancel()
            if generation == self._generation:
                self._progress.stop()
                self._state = OrchestratorState.IDLE
            raise

        if task not in done:
            logger.warning(f"⏱️ Example {example.id} exceeded {self._example_timeout}s - using canned result")
            task.add_done_callback(self._discard_background_result)
            outcome = VerificationOutcome(
                request=request,
                result=example.canned_result(EXAMPLE_SLOW_EXPLANATION),
                transport=TransportKind.CANNED,
            )
            self._succeed(generation, outcome)
            # Detach the background call from state and progress
            self._generation += 1
            return outcome

        if self._active_task is task:
            self._active_task = None
        error = task.exception()
        if error is not None:
            logger.warning(f"⚠️ Example {example.id} failed ({error}) - using canned result")
            outcome = VerificationOutcome(
                request=request,
                result=example.canned_result(EXAMPLE_ERROR_EXPLANATION),
                transport=TransportKind.CANNED,
            )
            self._succeed(generation, outcome, record=False)
            return outcome

        outcome = task.result()
        self._succeed(generation, outcome)
        return outcome

    async def cancel(self) -> None:
        """Release the active verification's channel, request and timers."""
        task = self._active_task
        self._active_task = None
        if task is not None and not task.done():
            logger.info("🛑 Cancelling active verification")
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Cancelled verification ended with: {e}")
        self._progress.stop()

    async def shutdown(self) -> None:
        """Teardown: cancel the active verification and stop timers."""
        await self.cancel()
        self._state = OrchestratorState.IDLE

    def _begin(self, request: VerificationRequest) -> int:
        self._generation += 1
        self._last_request = request
        self._last_error = None
        self._state = OrchestratorState.IDLE
        self._progress.start()
        logger.info(f"🔍 Verifying claim: {request.claim[:100]}")
        return self._generation

    def _succeed(self, generation: int, outcome: VerificationOutcome, record: bool = True) -> None:
        if generation != self._generation:
            return
        self._progress.settle()
        self._state = OrchestratorState.SUCCEEDED
        self._last_outcome = outcome
        if record:
            self._history.record(outcome.result)
        logger.info(
            f"✅ {outcome.result.verdict.value} ({outcome.result.confidence}%) via {outcome.transport.value}"
        )

    def _fail(self, generation: int, error: TransportError) -> None:
        if generation != self._generation:
            return
        self._progress.fail(error.message)
        self._state = OrchestratorState.FAILED
        self._last_error = error
        logger.error(f"❌ Verification failed: {error}")

    def _discard_background_result(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.info(f"Discarded background verification ended with: {error}")
        else:
            logger.info("Discarded background verification settled")
        if self._active_task is task:
            self._active_task = None

    def _on_progress(self, generation: int, event: ProgressEvent) -> None:
        if generation == self._generation:
            self._progress.handle(event)

    async def _run_chain(self, request: VerificationRequest, generation: int) -> VerificationOutcome:
        def on_progress(event: ProgressEvent) -> None:
            self._on_progress(generation, event)

        last_error: Optional[str] = None
        if self._connectivity.is_unreachable:
            logger.info("🔌 Verification service unreachable - using simulated transport")
        else:
            try:
                return await self._attempt(TransportKind.STREAMING, self._streaming, request, on_progress, generation)
            except FallbackEligibleError as e:
                logger.warning(f"⚠️ Streaming failed ({e}) - falling back to buffered request")

            try:
                return await self._attempt(TransportKind.BUFFERED, self._buffered, request, on_progress, generation)
            except FallbackEligibleError as e:
                logger.warning(f"⚠️ Buffered request failed ({e}) - falling back to simulation")
                self._connectivity.mark_unreachable(str(e))
                last_error = str(e)

        self._set_state(generation, OrchestratorState.SIMULATED)
        try:
            result = await self._simulated.verify(request, on_progress)
        except Exception as e:
            logger.error(f"❌ Simulated transport raised: {e}", exc_info=True)
            raise ExhaustionError(UNEXPECTED_ERROR_MESSAGE, last_error=str(e) or last_error) from e
        return VerificationOutcome(request=request, result=result, transport=TransportKind.SIMULATED)

    async def _attempt(
        self,
        kind: TransportKind,
        transport: VerificationTransport,
        request: VerificationRequest,
        on_progress,
        generation: int,
    ) -> VerificationOutcome:
        state = OrchestratorState.STREAMING if kind == TransportKind.STREAMING else OrchestratorState.BUFFERED
        self._set_state(generation, state)
        try:
            if self._transport_timeout is None:
                result = await transport.verify(request, on_progress)
            else:
                result = await asyncio.wait_for(transport.verify(request, on_progress), self._transport_timeout)
        except asyncio.TimeoutError:
            raise FallbackEligibleError(f"{kind.value} transport timed out after {self._transport_timeout}s")
        if not result.claim.strip():
            # Upstream echo is empty, keep the claim that was asked
            result = result.model_copy(update={"claim": request.claim})
        return VerificationOutcome(request=request, result=result, transport=kind)

    def _set_state(self, generation: int, state: OrchestratorState) -> None:
        if generation == self._generation:
            self._state = state
