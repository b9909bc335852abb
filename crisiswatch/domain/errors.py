"""Error taxonomy for claim verification."""

from typing import Optional


class InvalidClaimError(ValueError):
    """Raised when a claim is empty or whitespace-only."""


class TransportError(Exception):
    """Base class for failures reported by a verification transport."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FallbackEligibleError(TransportError):
    """The transport cannot serve the request but another transport might."""


class TerminalTransportError(TransportError):
    """The remote service explicitly rejected the request.

    Trying another transport would not change the outcome, so the
    orchestrator surfaces this error to the caller immediately.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExhaustionError(TransportError):
    """Every transport failed, including the simulated one."""

    def __init__(self, message: str, last_error: Optional[str] = None):
        super().__init__(message)
        self.last_error = last_error

    def __str__(self) -> str:
        if self.last_error:
            return f"{self.message} ({self.last_error})"
        return self.message
