"""Request-scoped dependencies for the gateway endpoints."""

import httpx
from fastapi import Request

from ..infrastructure.trending.trending_adapter import TrendingAdapter


def get_backend_client(request: Request) -> httpx.AsyncClient:
    """HTTP client pointed at the verification backend, created in the lifespan."""
    return request.app.state.backend_client


def get_trending_adapter(request: Request) -> TrendingAdapter:
    return request.app.state.trending_adapter
