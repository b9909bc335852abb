"""Domain models for the gamification counters and badges."""

from dataclasses import dataclass
from typing import List

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Badge:
    """A badge unlocked after a number of checked claims."""

    id: str
    name: str
    description: str
    icon: str
    requirement: int


BADGES: List[Badge] = [
    Badge("first_check", "First Check", "Checked your first claim", "🎯", 1),
    Badge("myth_buster", "Myth Buster", "Busted 10 myths", "💥", 10),
    Badge("truth_seeker", "Truth Seeker", "Sought truth 25 times", "🔍", 25),
    Badge("cap_detective", "Cap Detective", "Detected 50 caps", "🕵️", 50),
    Badge("fact_champion", "Fact Champion", "Checked 100 claims", "🏆", 100),
]


class GamificationState(BaseModel):
    """Persisted gamification counters."""

    claims_checked: int = Field(default=0, ge=0)
    unlocked_badges: List[str] = Field(default_factory=list)
    last_check_time: float = Field(default=0.0, description="Epoch seconds of the last check")
    streak: int = Field(default=0, ge=0)
    fact_score: int = Field(default=0, ge=0)
