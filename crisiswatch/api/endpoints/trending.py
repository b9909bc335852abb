"""Trending claims endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends

from ...domain.models.trending import TrendingFeed
from ...infrastructure.trending.trending_adapter import TrendingAdapter
from ..dependencies import get_trending_adapter

router = APIRouter(prefix="/api/trending", tags=["trending"])


@router.get("", response_model=TrendingFeed)
async def get_trending(
    category: Optional[str] = "all",
    adapter: TrendingAdapter = Depends(get_trending_adapter),
) -> TrendingFeed:
    """List recently checked claims, optionally filtered by category."""
    return await adapter.get_trending(category)
