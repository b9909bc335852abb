"""Event stream implementation of the verification transport."""

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from ...domain.errors import FallbackEligibleError
from ...domain.models.claim import VerificationRequest
from ...domain.models.progress import SourceActivityEvent, SourceStatus, StageEvent, TerminalEvent
from ...domain.models.verification import VerificationResult
from ...domain.ports.transport import ProgressCallback, VerificationTransport

logger = logging.getLogger(__name__)


class StreamingConfig(BaseModel):
    """Configuration for the streaming transport."""

    base_url: str = Field(default="http://localhost:3000", description="Base URL of the check API")
    path: str = Field(default="/api/check/stream", description="Event stream endpoint")
    connect_timeout: float = Field(default=10.0, description="Connection timeout in seconds")
    read_timeout: Optional[float] = Field(default=None, description="Read timeout; None waits for the orchestrator")


def parse_event_line(line: str) -> Optional[Dict[str, Any]]:
    """Decode one line of the event stream.

    Accepts bare JSON lines as well as SSE ``data:`` lines. Blank lines,
    SSE comments and ``event:``/``id:``/``retry:`` fields yield None.
    """
    line = line.strip()
    if not line or line.startswith(":"):
        return None
    if line.startswith(("event:", "id:", "retry:")):
        return None
    if line.startswith("data:"):
        line = line[len("data:"):].strip()
        if not line:
            return None
    try:
        event = json.loads(line)
    except json.JSONDecodeError:
        logger.warning(f"⚠️ Skipping unparsable stream line: {line[:100]}")
        return None
    if not isinstance(event, dict):
        logger.warning(f"⚠️ Skipping non-object stream event: {line[:100]}")
        return None
    return event


def _as_count(value: Any) -> Optional[int]:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return None


class StreamingTransport(VerificationTransport):
    """Consumes the live progress stream of the check API.

    Each call opens one channel and closes it on every exit path. Opening
    a new channel while one is still open closes the old one first.
    """

    def __init__(
        self,
        config: Optional[StreamingConfig] = None,
        provider_name: str = "Streaming",
    ):
        """Initialize the transport."""
        self._config = config or StreamingConfig()
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._response: Optional[httpx.Response] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=httpx.Timeout(
                    self._config.connect_timeout,
                    read=self._config.read_timeout,
                ),
            )
        self._initialized = True

    @property
    def is_channel_open(self) -> bool:
        """Whether a stream is currently open."""
        return self._response is not None

    async def close_channel(self) -> None:
        """Close the open stream, if any."""
        response = self._response
        self._response = None
        if response is not None and not response.is_closed:
            await response.aclose()
            logger.debug("🔒 Stream channel closed")

    async def verify(
        self,
        request: VerificationRequest,
        on_progress: ProgressCallback,
    ) -> VerificationResult:
        """Verify a claim over the event stream.

        Raises:
            FallbackEligibleError: On any stream or transport failure
        """
        if not self._client:
            raise RuntimeError("Transport not initialized")

        await self.close_channel()
        channel: Optional[httpx.Response] = None
        try:
            async with self._client.stream(
                "GET",
                self._config.path,
                params=request.to_query_params(),
                headers={"Accept": "text/event-stream"},
            ) as response:
                channel = response
                self._response = response
                if response.is_error:
                    raise FallbackEligibleError(f"Stream connection failed with HTTP {response.status_code}")

                logger.info("📡 Stream channel open")
                async for line in response.aiter_lines():
                    event = parse_event_line(line)
                    if event is None:
                        continue
                    result = self._dispatch(event, on_progress)
                    if result is not None:
                        return result

            raise FallbackEligibleError("Stream closed before the verification completed")
        except httpx.HTTPError as e:
            raise FallbackEligibleError(f"Stream transport error: {e}") from e
        finally:
            if channel is not None and self._response is channel:
                await self.close_channel()

    def _dispatch(self, event: Dict[str, Any], on_progress: ProgressCallback) -> Optional[VerificationResult]:
        event_type = event.get("type")

        if event_type == "step":
            on_progress(StageEvent(str(event.get("step", "")), event.get("message")))
        elif event_type == "source":
            try:
                status = SourceStatus(event.get("status"))
            except ValueError:
                logger.debug(f"Unknown source status in event: {event}")
                return None
            count = event.get("count")
            on_progress(SourceActivityEvent(
                source=str(event.get("source", "")),
                status=status,
                count=_as_count(count),
            ))
        elif event_type == "complete":
            try:
                result = VerificationResult.from_backend(event.get("result") or {})
            except (ValidationError, TypeError, ValueError) as e:
                raise FallbackEligibleError(f"Malformed stream result: {e}") from e
            on_progress(TerminalEvent(result=result))
            return result
        elif event_type == "error":
            message = event.get("message") or "Stream reported an error"
            on_progress(TerminalEvent(failure=message))
            raise FallbackEligibleError(message)
        else:
            logger.debug(f"Ignoring stream event of type {event_type!r}")
        return None

    async def shutdown(self) -> None:
        """Close any open channel and the HTTP client."""
        await self.close_channel()
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def is_available(self) -> bool:
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {
            "progress_events": True,
            "source_activity": True,
            "network": True,
            "always_succeeds": False,
        }
