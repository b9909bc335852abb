"""Gamification counters, streaks and badges."""

import json
import logging
import math
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from ..models.gamification import BADGES, Badge, GamificationState
from ..ports.storage import KeyValueStore

logger = logging.getLogger(__name__)

GAMIFICATION_KEY = "crisiswatch-gamification"
STREAK_WINDOW_SECONDS = 24 * 60 * 60


class GamificationService:
    """Counts checked claims and unlocks badges, persisting as JSON."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], float] = time.time):
        self._store = store
        self._clock = clock
        self._state = self._load()

    @property
    def state(self) -> GamificationState:
        return self._state

    def record_check(self) -> List[Badge]:
        """Count one completed check.

        Returns:
            Badges unlocked by this check
        """
        previous = self._state
        now = self._clock()
        count = previous.claims_checked + 1
        streak = previous.streak + 1 if now - previous.last_check_time < STREAK_WINDOW_SECONDS else 1

        unlocked = list(previous.unlocked_badges)
        earned = []
        for badge in BADGES:
            if count >= badge.requirement and badge.id not in unlocked:
                unlocked.append(badge.id)
                earned.append(badge)

        self._state = GamificationState(
            claims_checked=count,
            unlocked_badges=unlocked,
            last_check_time=now,
            streak=streak,
            fact_score=int(math.floor(100 * math.log10(count + 1))),
        )
        self._save()
        return earned

    def reset(self) -> None:
        self._state = GamificationState()
        self._save()

    def unlocked_badges(self) -> List[Badge]:
        return [badge for badge in BADGES if badge.id in self._state.unlocked_badges]

    def next_badge(self) -> Optional[Badge]:
        return next((badge for badge in BADGES if badge.id not in self._state.unlocked_badges), None)

    def progress(self) -> float:
        """Percent of the way from the last unlocked badge to the next one."""
        upcoming = self.next_badge()
        if upcoming is None:
            return 100.0
        unlocked = self.unlocked_badges()
        start = unlocked[-1].requirement if unlocked else 0
        span = upcoming.requirement - start
        return min(100.0, (self._state.claims_checked - start) / span * 100)

    def _load(self) -> GamificationState:
        try:
            raw = self._store.get_item(GAMIFICATION_KEY)
            if raw:
                return GamificationState.model_validate(json.loads(raw))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"❌ Failed to load gamification state: {e}")
        return GamificationState()

    def _save(self) -> None:
        try:
            self._store.set_item(GAMIFICATION_KEY, self._state.model_dump_json())
        except OSError as e:
            logger.error(f"❌ Failed to save gamification state: {e}")
