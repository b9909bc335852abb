"""Domain models for the trending claims listing."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

TRENDING_CATEGORIES: List[str] = ["politics", "health", "tech", "climate", "finance", "social"]


class TrendingClaim(BaseModel):
    """A recently checked claim shown in the trending list."""

    id: str
    claim: str
    verdict: str
    confidence: int = Field(..., ge=0, le=100)
    category: str
    checked_count: int = Field(default=0, ge=0)
    checked_at: Optional[str] = None


class TrendingFeed(BaseModel):
    """Response of the trending endpoint."""

    claims: List[TrendingClaim] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=lambda: list(TRENDING_CATEGORIES))
    total: int = 0


def mock_trending_claims(now: Optional[datetime] = None) -> List[TrendingClaim]:
    """Static dataset served when the backend trending call fails."""
    now = now or datetime.now(timezone.utc)

    def minutes_ago(minutes: int) -> str:
        return (now - timedelta(minutes=minutes)).isoformat()

    return [
        TrendingClaim(id="1", claim="NASA confirms asteroid will hit Earth in 2025", verdict="FALSE",
                      confidence=98, category="tech", checked_count=2847, checked_at=minutes_ago(30)),
        TrendingClaim(id="2", claim="New study shows coffee extends lifespan by 10 years", verdict="MOSTLY_FALSE",
                      confidence=89, category="health", checked_count=1923, checked_at=minutes_ago(45)),
        TrendingClaim(id="3", claim="Government announces free WiFi for all citizens", verdict="UNVERIFIABLE",
                      confidence=45, category="politics", checked_count=1456, checked_at=minutes_ago(60)),
        TrendingClaim(id="4", claim="Electric vehicles cause more pollution than diesel cars", verdict="FALSE",
                      confidence=94, category="climate", checked_count=3201, checked_at=minutes_ago(90)),
        TrendingClaim(id="5", claim="AI will replace 50% of jobs by 2030", verdict="MIXED",
                      confidence=62, category="tech", checked_count=2105, checked_at=minutes_ago(120)),
        TrendingClaim(id="6", claim="Drinking 8 glasses of water daily is essential for health", verdict="MOSTLY_TRUE",
                      confidence=78, category="health", checked_count=1678, checked_at=minutes_ago(150)),
    ]
