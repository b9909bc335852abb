"""Configuration for the verification client and the gateway."""

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = str(Path.home() / ".crisiswatch" / "state.json")


class ClientConfig(BaseModel):
    """Configuration for the verification client."""

    api_url: str = Field(default="http://localhost:3000", description="Base URL of the check API")
    language: str = Field(default="en", description="Default claim language")
    state_path: str = Field(default=DEFAULT_STATE_PATH, description="JSON file holding history and badges")
    request_timeout: float = Field(default=30.0, description="Buffered request and probe timeout in seconds")
    transport_timeout: float = Field(default=120.0, description="Ceiling for each live transport in seconds")
    example_timeout: float = Field(default=20.0, description="Ceiling before an example shows its canned result")
    stage_interval: float = Field(default=6.0, description="Seconds between timer-driven stage advances")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create configuration from environment variables."""
        config = cls(
            api_url=os.getenv("CRISISWATCH_API_URL", "http://localhost:3000"),
            language=os.getenv("CRISISWATCH_LANGUAGE", "en"),
            state_path=os.getenv("CRISISWATCH_HISTORY_PATH", DEFAULT_STATE_PATH),
            request_timeout=float(os.getenv("CRISISWATCH_REQUEST_TIMEOUT", "30")),
            transport_timeout=float(os.getenv("CRISISWATCH_TRANSPORT_TIMEOUT", "120")),
            example_timeout=float(os.getenv("CRISISWATCH_EXAMPLE_TIMEOUT", "20")),
            stage_interval=float(os.getenv("CRISISWATCH_STAGE_INTERVAL", "6")),
        )
        logger.info(f"🔧 Client configured for {config.api_url} (language={config.language})")
        return config


class GatewayConfig(BaseModel):
    """Configuration for the check API gateway."""

    backend_url: str = Field(default="http://localhost:8000", description="Verification backend base URL")
    timeout: float = Field(default=60.0, description="Backend request timeout in seconds")
    trending_ttl: int = Field(default=60, description="Trending cache TTL in seconds")

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Create configuration from environment variables."""
        backend_url = os.getenv("BACKEND_URL", "http://localhost:8000")
        if "BACKEND_URL" not in os.environ:
            logger.warning(f"⚠️ BACKEND_URL not set - using {backend_url}")
        return cls(
            backend_url=backend_url,
            timeout=float(os.getenv("CRISISWATCH_BACKEND_TIMEOUT", "60")),
            trending_ttl=int(os.getenv("CRISISWATCH_TRENDING_TTL", "60")),
        )
