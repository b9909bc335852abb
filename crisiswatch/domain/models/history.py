"""Domain model for client-side verification history."""

from datetime import datetime

from pydantic import BaseModel, Field


class HistoryEntry(BaseModel):
    """A previously verified claim."""

    id: str = Field(..., description="Unique id, increasing with recency")
    claim: str = Field(..., description="Claim text")
    verdict: str = Field(..., description="Verdict at the time of the check")
    confidence: int = Field(..., ge=0, le=100, description="Confidence percentage")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="When the check completed")

    class Config:
        """Pydantic model configuration."""
        frozen = True
