"""Preset example claims with pre-verified fallback results."""

from dataclasses import dataclass
from typing import List

from .verification import Verdict, VerificationResult, parse_processing_time


@dataclass(frozen=True)
class ExampleClaim:
    """A demo claim and the canned result shown when the live check is slow."""

    id: int
    claim: str
    fallback_verdict: Verdict
    fallback_confidence: int
    fallback_sources: int
    fallback_time: str

    def canned_result(self, explanation: str) -> VerificationResult:
        """Build the pre-verified result for this example."""
        return VerificationResult(
            claim=self.claim,
            verdict=self.fallback_verdict,
            confidence=self.fallback_confidence,
            sources_checked=self.fallback_sources,
            processing_time_seconds=parse_processing_time(self.fallback_time),
            explanation=explanation,
        )


DEMO_EXAMPLES: List[ExampleClaim] = [
    ExampleClaim(
        id=1,
        claim="NASA said a 7.8 magnitude earthquake will hit Delhi tomorrow 😱",
        fallback_verdict=Verdict.FALSE,
        fallback_confidence=98,
        fallback_sources=14,
        fallback_time="12.4s",
    ),
    ExampleClaim(
        id=2,
        claim="Drinking lemon water at 4am can cure any disease",
        fallback_verdict=Verdict.FALSE,
        fallback_confidence=97,
        fallback_sources=12,
        fallback_time="14.8s",
    ),
    ExampleClaim(
        id=3,
        claim="5G towers are making people sick and spreading viruses",
        fallback_verdict=Verdict.FALSE,
        fallback_confidence=96,
        fallback_sources=18,
        fallback_time="11.2s",
    ),
]
