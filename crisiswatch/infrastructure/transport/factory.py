"""Factory for creating and managing verification transports."""

from typing import Dict, Optional, Type

from ...domain.ports.transport import VerificationTransport
from .buffered_adapter import BufferedConfig, BufferedTransport
from .simulated_adapter import SimulatedTransport
from .streaming_adapter import StreamingConfig, StreamingTransport


class TransportFactory:
    """Factory for creating and managing verification transports.

    This factory maintains a registry of transport classes and handles
    the lifecycle (initialization, shutdown) of the instances it creates.
    """

    def __init__(self, base_url: str = "http://localhost:3000", request_timeout: float = 30.0):
        """Initialize the factory.

        Args:
            base_url: Base URL of the check API shared by the network transports
            request_timeout: Buffered request timeout in seconds
        """
        self._base_url = base_url
        self._request_timeout = request_timeout
        self._transports: Dict[str, Type[VerificationTransport]] = {}
        self._instances: Dict[str, VerificationTransport] = {}

        # Register default transports
        self.register_transport("streaming", StreamingTransport)
        self.register_transport("buffered", BufferedTransport)
        self.register_transport("simulated", SimulatedTransport)

    def register_transport(self, name: str, transport_class: Type[VerificationTransport]) -> None:
        """Register a transport class.

        Args:
            name: Transport name
            transport_class: Transport class
        """
        self._transports[name] = transport_class

    async def create_transport(self, name: str, **kwargs) -> VerificationTransport:
        """Create and initialize a transport instance.

        Args:
            name: Transport name
            **kwargs: Transport-specific configuration

        Returns:
            Initialized transport instance

        Raises:
            ValueError: If transport not found
        """
        if name not in self._transports:
            raise ValueError(f"Transport '{name}' not found")

        if name not in self._instances:
            transport_class = self._transports[name]
            if transport_class is StreamingTransport and "config" not in kwargs:
                kwargs["config"] = StreamingConfig(base_url=self._base_url)
            elif transport_class is BufferedTransport and "config" not in kwargs:
                kwargs["config"] = BufferedConfig(base_url=self._base_url, timeout=self._request_timeout)
            transport = transport_class(**kwargs)
            await transport.initialize()
            self._instances[name] = transport

        return self._instances[name]

    def get_transport(self, name: str) -> Optional[VerificationTransport]:
        """Get an existing transport instance, if created."""
        return self._instances.get(name)

    @property
    def available_transports(self) -> Dict[str, bool]:
        """Get dictionary of registered transports and whether they are created."""
        return {
            name: name in self._instances
            for name in self._transports
        }

    async def shutdown(self) -> None:
        """Shutdown all transport instances."""
        for transport in self._instances.values():
            await transport.shutdown()
        self._instances.clear()
