"""Test configuration and common fixtures."""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx
import pytest

from crisiswatch.domain.models.claim import VerificationRequest
from crisiswatch.domain.models.progress import ProgressEvent
from crisiswatch.domain.models.verification import Verdict, VerificationResult
from crisiswatch.infrastructure.storage.json_file_store import InMemoryStore


class FakeTransport:
    """Scriptable transport recording every request it receives.

    ``gate`` (an ``asyncio.Event``) holds the call open until it is set,
    which lets tests observe in-flight and cancelled calls.
    """

    def __init__(
        self,
        name: str = "Fake",
        result: Optional[VerificationResult] = None,
        error: Optional[BaseException] = None,
        events: Sequence[ProgressEvent] = (),
        gate: Optional[asyncio.Event] = None,
    ):
        self.name = name
        self.result = result
        self.error = error
        self.events = list(events)
        self.gate = gate
        self.calls: List[VerificationRequest] = []
        self.started = asyncio.Event()
        self.cancelled = False
        self.released = 0
        self.initialized = False

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.initialized = False

    async def verify(self, request, on_progress):
        self.calls.append(request)
        self.started.set()
        gate = self.gate
        try:
            for event in self.events:
                on_progress(event)
            if gate is not None:
                await gate.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        finally:
            self.released += 1
        if self.error is not None:
            raise self.error
        return self.result

    @property
    def provider_name(self) -> str:
        return self.name

    @property
    def is_available(self) -> bool:
        return True

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {"network": False}


@pytest.fixture
def make_transport() -> Callable[..., FakeTransport]:
    """Provide the fake transport class."""
    return FakeTransport


@pytest.fixture
def store() -> InMemoryStore:
    """Provide an empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def backend_result() -> Dict[str, Any]:
    """Raw backend result as carried by stream ``complete`` events."""
    return {
        "claim_id": 42,
        "claim_text": "5G towers are making people sick and spreading viruses",
        "verdict": "false",
        "confidence": 0.97,
        "severity": "high",
        "explanation": "No credible evidence links 5G to illness.",
        "explanation_hindi": "5G और बीमारी के बीच कोई विश्वसनीय संबंध नहीं है।",
        "correction": "5G radio waves do not spread viruses.",
        "sources_checked": 14,
        "processing_time_seconds": 12.43,
        "evidence": [
            {
                "source": "WHO",
                "snippet": "Viruses cannot travel on radio waves.",
                "url": "https://www.who.int/",
                "reliability": 0.95,
            },
            {
                "source": "Blog",
                "snippet": "Some people say otherwise.",
                "reliability": 0.4,
            },
        ],
        "cached": False,
    }


@pytest.fixture
def check_data() -> Dict[str, Any]:
    """``data`` object of a successful check response."""
    return {
        "claim_id": "7",
        "claim": "Drinking water keeps you hydrated",
        "verdict": "TRUE",
        "confidence": 91,
        "severity": "low",
        "explanation": "Water hydrates.",
        "explanation_hindi": None,
        "correction": None,
        "sources": 9,
        "evidence": [],
        "time": "8.2s",
        "cached": True,
    }


@pytest.fixture
def sample_result() -> VerificationResult:
    return VerificationResult(
        claim="The moon is made of cheese",
        verdict=Verdict.FALSE,
        confidence=99,
        sources_checked=11,
        processing_time_seconds=3.2,
        explanation="The moon is made of rock.",
    )


def mock_client(handler: Callable[[httpx.Request], httpx.Response], base_url: str = "http://test") -> httpx.AsyncClient:
    """Build an async client whose requests are answered by ``handler``."""
    return httpx.AsyncClient(base_url=base_url, transport=httpx.MockTransport(handler))


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Provide the mock HTTP client builder."""
    return mock_client
