"""Single request/response implementation of the verification transport."""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from ...domain.errors import FallbackEligibleError, TerminalTransportError
from ...domain.models.claim import VerificationRequest
from ...domain.models.progress import TerminalEvent
from ...domain.models.verification import VerificationResult
from ...domain.ports.transport import ProgressCallback, VerificationTransport

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to verify claim"


class BufferedConfig(BaseModel):
    """Configuration for the buffered transport."""

    base_url: str = Field(default="http://localhost:3000", description="Base URL of the check API")
    path: str = Field(default="/api/check", description="Check endpoint")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")


class BufferedTransport(VerificationTransport):
    """Posts the claim to the check API and waits for the full result."""

    def __init__(
        self,
        config: Optional[BufferedConfig] = None,
        provider_name: str = "Buffered",
    ):
        """Initialize the transport."""
        self._config = config or BufferedConfig()
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={"Content-Type": "application/json"},
            )
        self._initialized = True

    async def verify(
        self,
        request: VerificationRequest,
        on_progress: ProgressCallback,
    ) -> VerificationResult:
        """Verify a claim with one POST request.

        Raises:
            FallbackEligibleError: If the service is unavailable
            TerminalTransportError: If the service rejected the request
        """
        if not self._client:
            raise RuntimeError("Transport not initialized")

        try:
            response = await self._client.post(self._config.path, json=request.to_payload())
        except httpx.HTTPError as e:
            raise FallbackEligibleError(f"Check request failed: {e}") from e

        body = self._json_body(response)
        if response.is_error:
            if body.get("fallback"):
                raise FallbackEligibleError(str(body.get("message") or body.get("error") or "Backend unavailable"))
            message = body.get("error") or body.get("message") or DEFAULT_ERROR_MESSAGE
            logger.warning(f"⚠️ Check rejected with HTTP {response.status_code}: {message}")
            raise TerminalTransportError(str(message), status_code=response.status_code)

        data = body.get("data")
        if not body.get("success") or not isinstance(data, dict):
            raise TerminalTransportError(str(body.get("error") or DEFAULT_ERROR_MESSAGE), status_code=response.status_code)

        try:
            result = VerificationResult.from_check_data(data)
        except (ValidationError, TypeError, ValueError) as e:
            raise TerminalTransportError(f"Malformed check response: {e}", status_code=response.status_code) from e

        on_progress(TerminalEvent(result=result))
        return result

    @staticmethod
    def _json_body(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            logger.warning(f"⚠️ Non-JSON check response (HTTP {response.status_code})")
            return {}
        return body if isinstance(body, dict) else {}

    async def shutdown(self) -> None:
        """Close the HTTP client."""
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
            "progress_events": False,
            "source_activity": False,
            "network": True,
            "always_succeeds": False,
        }
