"""Trending claims listing backed by the verification backend."""

import logging
from typing import Optional

import httpx
from cachetools import TTLCache
from pydantic import ValidationError

from ...domain.models.trending import TRENDING_CATEGORIES, TrendingFeed, mock_trending_claims

logger = logging.getLogger(__name__)


class TrendingAdapter:
    """Fetches trending claims, falling back to a static mock dataset.

    This fallback is independent of the verification transport chain.
    Successful backend responses are cached per category.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache_ttl: int = 60,
        cache_maxsize: int = 32,
    ):
        """Initialize the adapter.

        Args:
            client: HTTP client pointed at the verification backend
            cache_ttl: Cache TTL in seconds
            cache_maxsize: Maximum number of cached categories
        """
        self._client = client
        self._cache = TTLCache(maxsize=cache_maxsize, ttl=cache_ttl)

    async def get_trending(self, category: Optional[str] = None) -> TrendingFeed:
        """Get trending claims for a category (``all`` for every category)."""
        category = category or "all"
        if category in self._cache:
            return self._cache[category]

        try:
            response = await self._client.get(
                "/api/trending",
                params={"category": category},
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            feed = TrendingFeed.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.info(f"📉 Trending: using mock data fallback ({e})")
            return self.mock_feed(category)

        self._cache[category] = feed
        return feed

    @staticmethod
    def mock_feed(category: str = "all") -> TrendingFeed:
        """Static fallback dataset filtered by category."""
        claims = mock_trending_claims()
        if category != "all":
            claims = [claim for claim in claims if claim.category == category]
        return TrendingFeed(claims=claims, categories=list(TRENDING_CATEGORIES), total=len(claims))
