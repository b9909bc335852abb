"""Dependency wiring for the verification client."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.models.connectivity import SessionConnectivity
from ..domain.services.gamification_service import GamificationService
from ..domain.services.history_service import HistoryService
from ..domain.services.progress_tracker import ProgressListener, ProgressTracker
from ..domain.services.verification_orchestrator import VerificationOrchestrator
from .config import ClientConfig
from .connectivity.health_probe import HealthProbe
from .storage.json_file_store import JsonFileStore
from .transport.factory import TransportFactory

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection.

    Everything that holds session state (connectivity, history,
    gamification) is constructed once here and passed in explicitly.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        progress_listener: Optional[ProgressListener] = None,
    ):
        """Initialize service container."""
        self._config = config or ClientConfig.from_env()
        self._progress_listener = progress_listener
        self._services: Dict[str, Any] = {}
        self._transport_factory = TransportFactory(
            base_url=self._config.api_url,
            request_timeout=self._config.request_timeout,
        )
        self._setup_services()

    def _setup_services(self) -> None:
        """Setup the stateful services; transports are created in ``initialize()``."""
        logger.info("🔧 Setting up service container...")
        store = JsonFileStore(self._config.state_path)
        connectivity = SessionConnectivity()
        gamification = GamificationService(store)
        history = HistoryService(store, gamification=gamification)
        progress = ProgressTracker(
            stage_interval=self._config.stage_interval,
            listener=self._progress_listener,
        )
        probe = HealthProbe(
            connectivity,
            base_url=self._config.api_url,
            timeout=self._config.request_timeout,
        )

        self._services = {
            'store': store,
            'connectivity': connectivity,
            'gamification_service': gamification,
            'history_service': history,
            'progress_tracker': progress,
            'health_probe': probe,
            'orchestrator': None,  # Created in initialize()
        }
        logger.info(f"✅ Service container setup completed (state file: {store.path})")

    async def initialize(self) -> VerificationOrchestrator:
        """Create the transports and the orchestrator, then probe connectivity."""
        if self._services['orchestrator'] is None:
            streaming = await self._transport_factory.create_transport("streaming")
            buffered = await self._transport_factory.create_transport("buffered")
            simulated = await self._transport_factory.create_transport("simulated")
            self._services['orchestrator'] = VerificationOrchestrator(
                streaming=streaming,
                buffered=buffered,
                simulated=simulated,
                connectivity=self.get('connectivity'),
                history=self.get('history_service'),
                progress=self.get('progress_tracker'),
                probe=self.get('health_probe'),
                transport_timeout=self._config.transport_timeout,
                example_timeout=self._config.example_timeout,
            )
            await self._services['orchestrator'].initialize()
        return self._services['orchestrator']

    async def shutdown(self) -> None:
        """Cancel any active verification and close every transport."""
        orchestrator = self._services.get('orchestrator')
        if orchestrator is not None:
            await orchestrator.shutdown()
        await self._transport_factory.shutdown()
        self._services['orchestrator'] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_history_service(self) -> HistoryService:
        return self.get('history_service')

    def get_gamification_service(self) -> GamificationService:
        return self.get('gamification_service')


@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance."""
    return ServiceContainer()
