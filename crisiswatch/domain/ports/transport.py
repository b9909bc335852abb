"""Protocol for verification transports."""

from typing import Callable, Dict, Protocol

from ..models.claim import VerificationRequest
from ..models.progress import ProgressEvent
from ..models.verification import VerificationResult

ProgressCallback = Callable[[ProgressEvent], None]


class VerificationTransport(Protocol):
    """A strategy for obtaining a verification result for a claim.

    ``verify`` must settle: it returns a normalized result or raises
    ``FallbackEligibleError`` / ``TerminalTransportError``. It must release
    any open channel when it returns, raises, or is cancelled.
    """

    async def initialize(self) -> None:
        """Prepare the transport (open HTTP clients, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Release every resource held by the transport."""
        ...

    async def verify(
        self,
        request: VerificationRequest,
        on_progress: ProgressCallback,
    ) -> VerificationResult:
        """Verify a claim, reporting progress events along the way."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the transport name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the transport is initialized and ready."""
        ...

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the transport's capabilities."""
        ...
