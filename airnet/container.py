"""Dependency injection container.

Explicit registration and resolution of the application's services,
so front-ends and tests can swap the data source or the renderers.
Factories run lazily, on first resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        engine = container.resolve(QueryEngine)

        # Testing
        container = Container()
        container.register(NetworkRepositoryPort, lambda: InMemoryRepository())
        repository = container.resolve(NetworkRepositoryPort)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        self._factories[port_type] = factory
        if singleton:
            self._singleton_types.add(port_type)
        else:
            self._singleton_types.discard(port_type)
        self._singletons.pop(port_type, None)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        if port_type not in self._factories:
            raise KeyError(f"Type not registered: {port_type}")

        if port_type in self._singleton_types:
            if port_type not in self._singletons:
                self._singletons[port_type] = self._factories[port_type]()
            return self._singletons[port_type]

        return self._factories[port_type]()

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_singletons(self) -> None:
        """Drop cached singletons; the next resolve rebuilds them."""
        self._singletons.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        Args:
            config: Optional configuration override.
        """
        from .adapters.graph import CSVNetworkRepository
        from .adapters.rendering import FoliumMapRenderer, TextReportWriter
        from .ports.graph import NetworkRepositoryPort
        from .ports.rendering import MapRendererPort, ReportWriterPort
        from .services import ItineraryComposer, QueryEngine

        config = config or get_config()
        container = cls(config=config)

        # Data
        container.register(
            NetworkRepositoryPort,
            lambda: CSVNetworkRepository(config.data),
        )

        # Rendering
        container.register(ReportWriterPort, lambda: TextReportWriter())
        container.register(
            MapRendererPort,
            lambda: FoliumMapRenderer(zoom_start=config.report.map_zoom_start),
        )

        # Services
        container.register(
            QueryEngine,
            lambda: QueryEngine(container.resolve(NetworkRepositoryPort).load()),
        )
        container.register(
            ItineraryComposer,
            lambda: ItineraryComposer(container.resolve(QueryEngine)),
        )

        return container
