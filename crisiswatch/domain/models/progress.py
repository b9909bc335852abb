"""Domain models for verification progress."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from .verification import VerificationResult


class Stage(Enum):
    """Verification stages, in the order they are shown."""
    READING = "reading"
    SEARCHING = "searching"
    CROSS_REFERENCING = "cross-referencing"
    VERDICT = "verdict"


STAGE_ORDER: List[Stage] = [
    Stage.READING,
    Stage.SEARCHING,
    Stage.CROSS_REFERENCING,
    Stage.VERDICT,
]

# Upstream step names mapped onto display stages
STAGE_LOOKUP: Dict[str, Stage] = {
    "extracting": Stage.READING,
    "generating_queries": Stage.READING,
    "analyzing": Stage.READING,
    "reading": Stage.READING,
    "searching": Stage.SEARCHING,
    "synthesizing": Stage.CROSS_REFERENCING,
    "cross-ref": Stage.CROSS_REFERENCING,
    "cross-referencing": Stage.CROSS_REFERENCING,
    "explaining": Stage.VERDICT,
    "verdict": Stage.VERDICT,
    "complete": Stage.VERDICT,
}

STAGE_DESCRIPTIONS: Dict[Stage, str] = {
    Stage.READING: "Analyzing the tea you just spilled... ☕",
    Stage.SEARCHING: "Searching the entire internet for receipts... 🔍",
    Stage.CROSS_REFERENCING: "Cross-referencing with the real ones... 📚",
    Stage.VERDICT: "Time to expose the truth... 💀",
}


class SourceStatus(Enum):
    """Activity reported for a single source."""
    SEARCHING = "searching"
    FOUND = "found"


@dataclass(frozen=True)
class StageEvent:
    """Transport reported a named step."""

    stage_id: str
    message: Optional[str] = None


@dataclass(frozen=True)
class SourceActivityEvent:
    """Transport is searching a source or found results in it."""

    source: str
    status: SourceStatus
    count: Optional[int] = None


@dataclass(frozen=True)
class TerminalEvent:
    """Transport settled with a result or a failure reason."""

    result: Optional[VerificationResult] = None
    failure: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None


ProgressEvent = Union[StageEvent, SourceActivityEvent, TerminalEvent]


@dataclass(frozen=True)
class SourceTally:
    """Number of results found in one source."""

    name: str
    count: int


@dataclass
class ProgressSnapshot:
    """Point-in-time view of a verification's progress."""

    stage: Stage
    stage_index: int
    message: str = ""
    elapsed_seconds: int = 0
    current_source: Optional[str] = None
    sources_found: List[SourceTally] = field(default_factory=list)
    is_running: bool = False
    is_settled: bool = False

    @property
    def total_sources_found(self) -> int:
        return sum(tally.count for tally in self.sources_found)

    @property
    def description(self) -> str:
        return STAGE_DESCRIPTIONS[self.stage]
