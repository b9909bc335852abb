"""Liveness probe for the verification service."""

import logging
from typing import Optional

import httpx

from ...domain.models.connectivity import SessionConnectivity

logger = logging.getLogger(__name__)


class HealthProbe:
    """Single best-effort health check gating the live transports."""

    def __init__(
        self,
        connectivity: SessionConnectivity,
        base_url: str = "http://localhost:3000",
        path: str = "/api/check",
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the probe.

        Args:
            connectivity: Session state the probe result is stored into
            base_url: Base URL of the check API
            path: Health endpoint
            timeout: Request timeout in seconds
            client: HTTP client to use instead of a fresh one
        """
        self._connectivity = connectivity
        self._base_url = base_url
        self._path = path
        self._timeout = timeout
        self._client = client

    async def probe(self) -> SessionConnectivity:
        """Check whether the backend is reachable. Never raises."""
        reachable = await self._check()
        if reachable:
            self._connectivity.mark_reachable()
            logger.info("✅ Verification backend reachable")
        else:
            self._connectivity.mark_unreachable("health probe failed")
        return self._connectivity

    async def _check(self) -> bool:
        try:
            if self._client is not None:
                response = await self._client.get(self._path)
            else:
                async with httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout) as client:
                    response = await client.get(self._path)
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"⚠️ Health probe failed: {e}")
            return False

        return isinstance(body, dict) and body.get("backend") is True
