"""Local heuristic transport used when no verification service is reachable."""

import asyncio
import logging
import random
from typing import Dict, Optional, Tuple

from ...domain.models.claim import VerificationRequest
from ...domain.models.progress import StageEvent, TerminalEvent
from ...domain.models.verification import Verdict, VerificationResult
from ...domain.ports.transport import ProgressCallback, VerificationTransport

logger = logging.getLogger(__name__)

FALSE_EXPLANATION = "Multiple credible sources contradict this claim."
MIXED_EXPLANATION = "The evidence is mixed or insufficient for a definitive verdict."

EARTHQUAKE_PREDICTION_TERMS = ("predict", "will hit", "tomorrow", "forecast")


def classify_claim(claim: str) -> Optional[Tuple[Verdict, int]]:
    """Match a claim against known classes of false or mixed claims.

    Returns:
        Verdict and confidence, or None when no rule matches
    """
    text = claim.lower()
    if "earthquake" in text and any(term in text for term in EARTHQUAKE_PREDICTION_TERMS):
        return Verdict.FALSE, 96
    if "cow urine" in text or "cure cancer" in text:
        return Verdict.FALSE, 97
    if "5g" in text and ("corona" in text or "virus" in text):
        return Verdict.FALSE, 98
    if "flood" in text or "water" in text:
        return Verdict.PARTIALLY_TRUE, 72
    if "cure" in text or "heal" in text:
        return Verdict.FALSE, 94
    return None


class SimulatedTransport(VerificationTransport):
    """Produces a plausible verdict locally after an artificial delay.

    Never performs network I/O and never fails.
    """

    def __init__(
        self,
        min_delay: float = 2.0,
        max_delay: float = 3.0,
        rng: Optional[random.Random] = None,
        provider_name: str = "Simulated",
    ):
        """Initialize the transport.

        Args:
            min_delay: Lower bound of the artificial delay in seconds
            max_delay: Upper bound of the artificial delay in seconds
            rng: Random source, injectable for reproducible runs
            provider_name: Name of the transport
        """
        self._min_delay = min_delay
        self._max_delay = max_delay
        self._rng = rng or random.Random()
        self._name = provider_name
        self._initialized = False

    async def initialize(self) -> None:
        self._initialized = True

    async def shutdown(self) -> None:
        self._initialized = False

    async def verify(
        self,
        request: VerificationRequest,
        on_progress: ProgressCallback,
    ) -> VerificationResult:
        """Simulate a verification of the request's claim."""
        delay = self._min_delay + self._rng.random() * (self._max_delay - self._min_delay)
        logger.info(f"🎭 Simulating verification ({delay:.1f}s)")
        on_progress(StageEvent("analyzing", "Running offline analysis..."))
        await asyncio.sleep(delay)

        match = classify_claim(request.claim)
        if match is None:
            verdict = Verdict.FALSE if self._rng.random() > 0.6 else Verdict.PARTIALLY_TRUE
            confidence = self._rng.randint(70, 94)
        else:
            verdict, confidence = match

        explanation = "This claim was analyzed using AI-powered verification. " + (
            FALSE_EXPLANATION if verdict == Verdict.FALSE else MIXED_EXPLANATION
        )
        result = VerificationResult(
            claim=request.claim,
            verdict=verdict,
            confidence=confidence,
            sources_checked=self._rng.randint(8, 19),
            processing_time_seconds=round(self._rng.uniform(1.5, 3.0), 1),
            explanation=explanation,
        )
        on_progress(TerminalEvent(result=result))
        return result

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def is_available(self) -> bool:
        return True

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {
            "progress_events": False,
            "source_activity": False,
            "network": False,
            "always_succeeds": True,
        }
