"""FastAPI gateway in front of the verification backend."""

import contextlib
import logging

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from ..infrastructure.config import GatewayConfig
from ..infrastructure.trending.trending_adapter import TrendingAdapter
from .endpoints import check, trending

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared backend client on startup and close it on shutdown."""
    config = GatewayConfig.from_env()
    app.state.backend_client = httpx.AsyncClient(
        base_url=config.backend_url,
        timeout=config.timeout,
    )
    app.state.trending_adapter = TrendingAdapter(
        app.state.backend_client,
        cache_ttl=config.trending_ttl,
    )
    logger.info(f"🚀 Gateway proxying to {config.backend_url}")

    yield  # Application runs here

    await app.state.backend_client.aclose()
    logger.info("👋 Gateway backend client closed")


# Create FastAPI application
app = FastAPI(
    title="CrisisWatch Check API",
    description="Gateway for claim verification with streaming progress",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(check.router)
app.include_router(trending.router)
