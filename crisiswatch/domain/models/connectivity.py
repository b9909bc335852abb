"""Session-scoped connectivity to the remote verification service."""

import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ConnectivityState(str, Enum):
    """Whether the remote service is believed to be reachable."""
    UNKNOWN = "unknown"
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"


class SessionConnectivity:
    """Connectivity state shared by the probe and the orchestrator.

    ``UNREACHABLE`` is sticky: only a new probe can move the session back
    to ``REACHABLE``.
    """

    def __init__(self, state: ConnectivityState = ConnectivityState.UNKNOWN):
        self._state = state
        self._reason: Optional[str] = None

    @property
    def state(self) -> ConnectivityState:
        return self._state

    @property
    def reason(self) -> Optional[str]:
        """Why the session was last marked unreachable."""
        return self._reason

    @property
    def is_unreachable(self) -> bool:
        return self._state == ConnectivityState.UNREACHABLE

    def mark_reachable(self) -> None:
        self._state = ConnectivityState.REACHABLE
        self._reason = None

    def mark_unreachable(self, reason: Optional[str] = None) -> None:
        if self._state != ConnectivityState.UNREACHABLE:
            logger.warning(f"🔌 Verification service marked unreachable: {reason or 'no reason given'}")
        self._state = ConnectivityState.UNREACHABLE
        self._reason = reason

    def __repr__(self) -> str:
        return f"SessionConnectivity(state={self._state.value!r})"
