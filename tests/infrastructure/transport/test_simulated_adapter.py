"""Tests for the simulated transport."""

import random
from unittest.mock import AsyncMock, patch

import pytest

from crisiswatch.domain.models.claim import VerificationRequest
from crisiswatch.domain.models.progress import StageEvent, TerminalEvent
from crisiswatch.domain.models.verification import Verdict
from crisiswatch.infrastructure.transport.simulated_adapter import SimulatedTransport, classify_claim


@pytest.mark.parametrize(
    "claim, expected",
    [
        ("NASA said a 7.8 magnitude earthquake will hit Delhi tomorrow", (Verdict.FALSE, 96)),
        ("Scientists can predict every earthquake", (Verdict.FALSE, 96)),
        ("Cow urine can cure cancer", (Verdict.FALSE, 97)),
        ("5G spreads the corona virus", (Verdict.FALSE, 98)),
        ("The flood will reach the city by noon", (Verdict.PARTIALLY_TRUE, 72)),
        ("This herb will heal your knee", (Verdict.FALSE, 94)),
        ("The sky is green", None),
    ],
)
def test_classify_claim(claim, expected):
    assert classify_claim(claim) == expected


@pytest.mark.asyncio
async def test_simulated_earthquake_claim():
    """Test the earthquake prediction claim within the delay bounds."""
    adapter = SimulatedTransport(rng=random.Random(7))
    request = VerificationRequest.create("NASA said a 7.8 magnitude earthquake will hit Delhi tomorrow")
    events = []

    with patch(
        "crisiswatch.infrastructure.transport.simulated_adapter.asyncio.sleep",
        new_callable=AsyncMock,
    ) as sleep:
        result = await adapter.verify(request, events.append)

    delay = sleep.await_args.args[0]
    assert 2.0 <= delay <= 3.0
    assert result.verdict is Verdict.FALSE
    assert result.confidence == 96
    assert result.claim == request.claim
    assert 8 <= result.sources_checked <= 19
    assert 1.5 <= result.processing_time_seconds <= 3.0
    assert result.explanation.endswith("Multiple credible sources contradict this claim.")
    assert isinstance(events[0], StageEvent)
    assert events[-1] == TerminalEvent(result=result)


@pytest.mark.asyncio
async def test_simulated_unmatched_claim():
    adapter = SimulatedTransport(min_delay=0, max_delay=0, rng=random.Random(1))
    result = await adapter.verify(VerificationRequest.create("The sky is green"), lambda event: None)

    assert result.verdict in (Verdict.FALSE, Verdict.PARTIALLY_TRUE)
    assert 70 <= result.confidence <= 94


@pytest.mark.asyncio
async def test_simulated_is_always_available():
    adapter = SimulatedTransport()
    await adapter.initialize()
    assert adapter.is_available
    assert adapter.capabilities["always_succeeds"]
    assert not adapter.capabilities["network"]
    await adapter.shutdown()
