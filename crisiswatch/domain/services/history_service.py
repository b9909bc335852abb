"""Service reconciling completed verifications into client-side history."""

import json
import logging
import time
from typing import List, Optional

from pydantic import ValidationError

from ..models.history import HistoryEntry
from ..models.verification import VerificationResult
from ..ports.gamification import GamificationSink
from ..ports.storage import KeyValueStore

logger = logging.getLogger(__name__)

HISTORY_KEY = "crisiswatch-history"
MAX_HISTORY_ENTRIES = 10


class HistoryService:
    """Bounded, deduplicated history of verified claims.

    At most one entry exists per distinct claim text; recording a claim
    again moves it to the front. Only the ``max_entries`` most recent
    entries are kept. Storage failures are logged and never raised.
    """

    def __init__(
        self,
        store: KeyValueStore,
        gamification: Optional[GamificationSink] = None,
        max_entries: int = MAX_HISTORY_ENTRIES,
    ):
        """Initialize the service and load persisted history.

        Args:
            store: Durable key-value storage
            gamification: Collaborator notified of checks and resets
            max_entries: History bound
        """
        self._store = store
        self._gamification = gamification
        self._max_entries = max_entries
        self._skip_cache = False
        self._last_id = 0
        self._entries: List[HistoryEntry] = self._load()
        for entry in self._entries:
            if entry.id.isdigit():
                self._last_id = max(self._last_id, int(entry.id))

    @property
    def entries(self) -> List[HistoryEntry]:
        """History, most recent first."""
        return list(self._entries)

    @property
    def skip_cache(self) -> bool:
        """Whether new requests should bypass the backend cache."""
        return self._skip_cache

    def set_skip_cache(self, enabled: bool) -> None:
        self._skip_cache = enabled

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        return next((entry for entry in self._entries if entry.id == entry_id), None)

    def find(self, claim: str) -> Optional[HistoryEntry]:
        return next((entry for entry in self._entries if entry.claim == claim), None)

    def record(self, result: VerificationResult) -> HistoryEntry:
        """Insert a result at the front of history and persist it.

        Args:
            result: Completed verification

        Returns:
            The new history entry
        """
        entry = HistoryEntry(
            id=self._next_id(),
            claim=result.claim,
            verdict=result.verdict.value,
            confidence=result.confidence,
        )
        remaining = [existing for existing in self._entries if existing.claim != result.claim]
        self._entries = ([entry] + remaining)[: self._max_entries]
        logger.info(f"📝 Recorded '{result.claim[:60]}' as {entry.verdict} ({len(self._entries)} in history)")
        self._save()

        if self._gamification is not None:
            try:
                for badge in self._gamification.record_check():
                    logger.info(f"🏅 Badge unlocked: {badge.name}")
            except Exception as e:
                logger.error(f"❌ Gamification update failed: {e}")
        return entry

    def clear(self) -> None:
        """Empty history, reset gamification and force fresh results."""
        self._entries = []
        self._save()
        if self._gamification is not None:
            try:
                self._gamification.reset()
            except Exception as e:
                logger.error(f"❌ Gamification reset failed: {e}")
        self._skip_cache = True
        logger.info("🧹 History cleared - next checks will skip the cache")

    def _next_id(self) -> str:
        candidate = time.time_ns() // 1_000_000
        self._last_id = max(candidate, self._last_id + 1)
        return str(self._last_id)

    def _load(self) -> List[HistoryEntry]:
        try:
            raw = self._store.get_item(HISTORY_KEY)
        except OSError as e:
            logger.error(f"❌ Failed to load history: {e}")
            return []
        if not raw:
            return []

        try:
            items = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("❌ Stored history is corrupt - starting empty")
            return []
        if not isinstance(items, list):
            logger.error("❌ Stored history is not a list - starting empty")
            return []

        entries = []
        for item in items:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError:
                logger.warning(f"⚠️ Skipping invalid history entry: {item!r}")
        return entries[: self._max_entries]

    def _save(self) -> None:
        payload = json.dumps(
            [entry.model_dump(mode="json") for entry in self._entries[: self._max_entries]]
        )
        try:
            self._store.set_item(HISTORY_KEY, payload)
        except OSError as e:
            logger.error(f"❌ Failed to save history: {e}")
