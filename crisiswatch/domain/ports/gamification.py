"""Protocol for the gamification collaborator."""

from typing import List, Protocol

from ..models.gamification import Badge


class GamificationSink(Protocol):
    """Receives completed checks and history resets."""

    def record_check(self) -> List[Badge]:
        """Count a completed check, returning newly unlocked badges."""
        ...

    def reset(self) -> None:
        """Forget all counters and badges."""
        ...
