"""Domain models for verification results and evidence."""

import logging
import math
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class Verdict(str, Enum):
    """Categorical outcome of a claim verification."""

    TRUE = "TRUE"
    FALSE = "FALSE"
    MOSTLY_TRUE = "MOSTLY_TRUE"
    MOSTLY_FALSE = "MOSTLY_FALSE"
    PARTIALLY_TRUE = "PARTIALLY_TRUE"
    MIXED = "MIXED"
    UNVERIFIED = "UNVERIFIED"
    UNVERIFIABLE = "UNVERIFIABLE"

    @classmethod
    def parse(cls, value: Any) -> "Verdict":
        """Parse an upstream verdict such as ``"mostly false"`` or ``"Partially-True"``."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            logger.warning(f"⚠️ Unknown verdict '{value}' - treating as UNVERIFIED")
            return cls.UNVERIFIED

    @property
    def label(self) -> str:
        """Human readable form, e.g. ``PARTIALLY TRUE``."""
        return self.value.replace("_", " ")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_confidence(value: Union[int, float, str, None]) -> int:
    """Round an already scaled 0-100 confidence into an integer percentage."""
    try:
        percent = _round_half_up(float(value))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, percent))


def scale_confidence(fraction: Union[int, float, str, None]) -> int:
    """Scale a 0-1 confidence fraction to an integer percentage.

    The scaling is applied exactly once: 0.97 becomes 97.
    """
    try:
        return clamp_confidence(float(fraction) * 100)
    except (TypeError, ValueError):
        return 0


def format_processing_time(seconds: float) -> str:
    """Format a duration the way results display it, e.g. ``12.4s``."""
    return f"{seconds:.1f}s"


def parse_processing_time(value: Union[str, int, float, None]) -> float:
    """Parse ``"12.4s"`` (or a bare number) into seconds."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return round(float(value), 1)
    text = str(value).strip().rstrip("s").strip()
    try:
        return round(float(text), 1)
    except ValueError:
        logger.warning(f"⚠️ Unparsable processing time '{value}'")
        return 0.0


def _require_mapping(value: Any, what: str) -> None:
    if not isinstance(value, dict):
        raise ValueError(f"Expected {what} to be an object, got {type(value).__name__}")


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Expected evidence to be a list, got {type(value).__name__}")
    return value


class EvidenceItem(BaseModel):
    """One supporting source record returned by the verification backend."""

    source: str = Field(default="", description="Name of the source")
    snippet: str = Field(default="", description="Relevant excerpt")
    url: Optional[str] = Field(None, description="Link to the source")
    published_date: Optional[str] = Field(None, description="Publication date as sent upstream")
    reliability: Optional[float] = Field(None, description="Source reliability (0-1)")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @field_validator("reliability")
    @classmethod
    def _clamp_reliability(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return None
        return max(0.0, min(1.0, float(value)))

    @property
    def reliability_band(self) -> Optional[str]:
        """High / Medium / Low band used when displaying evidence."""
        if self.reliability is None:
            return None
        if self.reliability >= 0.8:
            return "High"
        if self.reliability >= 0.6:
            return "Medium"
        return "Low"

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "EvidenceItem":
        """Build an item from an upstream evidence dictionary."""
        _require_mapping(raw, "evidence item")
        return cls(
            source=str(raw.get("source") or ""),
            snippet=str(raw.get("snippet") or ""),
            url=raw.get("url"),
            published_date=raw.get("published_date"),
            reliability=raw.get("reliability"),
        )


class VerificationResult(BaseModel):
    """Normalized result of a claim verification, whichever transport produced it."""

    claim: str = Field(..., description="Echo of the verified claim")
    verdict: Verdict = Field(..., description="Verification verdict")
    confidence: int = Field(..., ge=0, le=100, description="Confidence percentage")
    sources_checked: int = Field(default=0, ge=0, description="Number of sources consulted")
    processing_time_seconds: float = Field(default=0.0, ge=0.0, description="Processing time")
    explanation: Optional[str] = Field(None, description="Explanation of the verdict")
    explanation_alt: Optional[str] = Field(None, description="Localized explanation")
    correction: Optional[str] = Field(None, description="Corrected statement, if any")
    evidence: List[EvidenceItem] = Field(default_factory=list, description="Evidence in upstream order")
    claim_id: Optional[str] = Field(None, description="Backend identifier of the claim")
    severity: Optional[str] = Field(None, description="Backend severity rating")
    cached: bool = Field(default=False, description="Whether the backend served a cached result")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @property
    def time_display(self) -> str:
        return format_processing_time(self.processing_time_seconds)

    @classmethod
    def from_backend(cls, raw: Dict[str, Any]) -> "VerificationResult":
        """Normalize a raw backend result (confidence as a 0-1 fraction).

        This is the shape carried by ``complete`` stream events and returned by
        the backend's own check endpoint.
        """
        _require_mapping(raw, "verification result")
        claim_id = raw.get("claim_id")
        return cls(
            claim=str(raw.get("claim_text") or raw.get("claim") or ""),
            verdict=Verdict.parse(raw.get("verdict")),
            confidence=scale_confidence(raw.get("confidence")),
            sources_checked=max(0, int(raw.get("sources_checked") or 0)),
            processing_time_seconds=parse_processing_time(raw.get("processing_time_seconds")),
            explanation=raw.get("explanation"),
            explanation_alt=raw.get("explanation_hindi"),
            correction=raw.get("correction"),
            evidence=[EvidenceItem.from_raw(item) for item in _as_list(raw.get("evidence"))],
            claim_id=str(claim_id) if claim_id is not None else None,
            severity=raw.get("severity"),
            cached=bool(raw.get("cached", False)),
        )

    @classmethod
    def from_check_data(cls, data: Dict[str, Any]) -> "VerificationResult":
        """Normalize the ``data`` object of a check response (confidence already 0-100)."""
        _require_mapping(data, "check data")
        claim_id = data.get("claim_id")
        return cls(
            claim=str(data.get("claim") or ""),
            verdict=Verdict.parse(data.get("verdict")),
            confidence=clamp_confidence(data.get("confidence")),
            sources_checked=max(0, int(data.get("sources") or 0)),
            processing_time_seconds=parse_processing_time(data.get("time")),
            explanation=data.get("explanation"),
            explanation_alt=data.get("explanation_hindi"),
            correction=data.get("correction"),
            evidence=[EvidenceItem.from_raw(item) for item in _as_list(data.get("evidence"))],
            claim_id=str(claim_id) if claim_id is not None else None,
            severity=data.get("severity"),
            cached=bool(data.get("cached", False)),
        )

    def to_check_data(self) -> Dict[str, Any]:
        """Convert to the ``data`` object of a check response."""
        return {
            "claim_id": self.claim_id,
            "claim": self.claim,
            "verdict": self.verdict.value,
            "confidence": self.confidence,
            "severity": self.severity,
            "explanation": self.explanation,
            "explanation_hindi": self.explanation_alt,
            "correction": self.correction,
            "sources": self.sources_checked,
            "evidence": [item.model_dump() for item in self.evidence],
            "time": self.time_display,
            "cached": self.cached,
        }
