"""
Service Container - Dependency Injection Container for DraftRoom
Manages service creation, dependencies, and lifecycle.
"""

from typing import Dict, Any, List, Optional, Callable
import inspect
import time
from enum import Enum


class ServiceLifecycle(Enum):
    """Service lifecycle management options"""
    SINGLETON = "singleton"  # One instance per container
    TRANSIENT = "transient"  # New instance every time


class ServiceDefinition:
    """Definition of how a service should be created"""

    def __init__(
        self,
        name: str,
        factory: Callable,
        dependencies: List[str] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        config: Dict[str, Any] = None
    ):
        self.name = name
        self.factory = factory
        self.dependencies = dependencies or []
        self.lifecycle = lifecycle
        self.config = config or {}


class CircularDependencyError(Exception):
    """Raised when circular dependency is detected"""
    pass


class ServiceNotFoundError(Exception):
    """Raised when requested service is not registered"""
    pass


class ServiceContainer:
    """
    Dependency Injection Container for managing services and their dependencies.

    Features:
    - Explicit dependency lists resolved in order
    - Circular dependency detection
    - Singleton and transient lifecycle management
    - External instances (the Socket.IO server, the clock)
    """

    def __init__(self):
        self._services: Dict[str, ServiceDefinition] = {}
        self._instances: Dict[str, Any] = {}
        self._creating: List[str] = []  # Services being created, in resolution order
        self._config: Dict[str, Any] = {}

    def register(
        self,
        name: str,
        factory: Callable,
        dependencies: List[str] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        config: Dict[str, Any] = None
    ) -> 'ServiceContainer':
        """
        Register a service with the container.

        Args:
            name: Service name for retrieval
            factory: Class or function to create the service
            dependencies: List of service names passed positionally to the factory
            lifecycle: How the service instance should be managed
            config: Keyword arguments passed to function factories

        Returns:
            Self for method chaining
        """
        if name in self._services:
            raise ValueError(f"Service '{name}' is already registered")

        if not callable(factory):
            raise ValueError(f"Factory for '{name}' must be callable")

        self._services[name] = ServiceDefinition(
            name=name,
            factory=factory,
            dependencies=dependencies,
            lifecycle=lifecycle,
            config=config
        )
        return self

    def configure_services(self) -> 'ServiceContainer':
        """
        Register all DraftRoom services with their dependencies.
        This method contains the service configuration for the application.
        """
        from src.room_registry import RoomRegistry
        from src.turn_engine import TurnEngine
        from src.game_manager import GameManager
        from src.services.concurrency_control_service import ConcurrencyControlService
        from src.services.participant_index import ParticipantIndex
        from src.services.room_state_presenter import RoomStatePresenter
        from src.services.validation_service import ValidationService
        from src.services.error_response_factory import ErrorResponseFactory
        from src.services.broadcast_gateway import BroadcastGateway
        from src.services.timer_scheduler import TimerScheduler

        # Configuration Factory (highest priority - no dependencies)
        from config_factory import ConfigurationFactory
        self.register('ConfigurationFactory', ConfigurationFactory)

        if 'clock' not in self._instances:
            self.set_external_dependency('clock', time.time)

        # Leaf services - no dependencies
        self.register('ValidationService', ValidationService)
        self.register('ErrorResponseFactory', ErrorResponseFactory)
        self.register('ConcurrencyControlService', ConcurrencyControlService)
        self.register('RoomStatePresenter', RoomStatePresenter)
        self.register('ParticipantIndex', ParticipantIndex)

        # Room registry - shares the per-room locks with everything that mutates rooms
        self.register('RoomRegistry', RoomRegistry, dependencies=['ConcurrencyControlService'])

        # Turn engine - pure transitions, needs the presenter for payloads and the clock for deadlines
        self.register('TurnEngine', TurnEngine, dependencies=['RoomStatePresenter', 'clock'])

        # Broadcast gateway - socketio is injected as external dependency
        self.register('BroadcastGateway', BroadcastGateway, dependencies=['socketio', 'ErrorResponseFactory'])

        self.register('TimerScheduler', TimerScheduler, dependencies=[
            'RoomRegistry', 'ParticipantIndex', 'TurnEngine', 'BroadcastGateway', 'clock'
        ])

        self.register('GameManager', GameManager, dependencies=[
            'RoomRegistry', 'ParticipantIndex', 'TurnEngine', 'TimerScheduler',
            'BroadcastGateway', 'RoomStatePresenter'
        ])

        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """
        Set an external dependency that's created outside the container.
        Useful for Flask-SocketIO and similar framework objects.
        """
        self._instances[name] = instance
        return self

    def set_config(self, config: Dict[str, Any]) -> 'ServiceContainer':
        """Set global configuration for the container"""
        self._config.update(config)
        return self

    def get_config(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get(self, name: str) -> Any:
        """
        Get a service instance, creating it if necessary.

        Args:
            name: Service name to retrieve

        Returns:
            Service instance

        Raises:
            ServiceNotFoundError: If service is not registered
            CircularDependencyError: If circular dependency detected
        """
        # External dependencies and created singletons
        if name in self._instances:
            return self._instances[name]

        if name not in self._services:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")

        return self._create_service(name)

    def _create_service(self, name: str) -> Any:
        """
        Create a service instance with dependency injection.
        """
        if name in self._creating:
            cycle = ' -> '.join(self._creating + [name])
            raise CircularDependencyError(f"Circular dependency detected: {cycle}")

        self._creating.append(name)

        try:
            service_def = self._services[name]

            dependencies = [self.get(dep_name) for dep_name in service_def.dependencies]

            if inspect.isclass(service_def.factory):
                instance = service_def.factory(*dependencies)
            else:
                instance = service_def.factory(*dependencies, **service_def.config)

            if service_def.lifecycle == ServiceLifecycle.SINGLETON:
                self._instances[name] = instance

            return instance

        finally:
            self._creating.remove(name)

    def has_service(self, name: str) -> bool:
        """Check if a service is registered"""
        return name in self._services

    def get_service_names(self) -> List[str]:
        """Get list of all registered service names"""
        return list(self._services.keys())

    def validate_dependencies(self) -> Dict[str, List[str]]:
        """
        Validate all service dependencies can be resolved.

        Returns:
            Dictionary mapping service names to lists of missing dependencies
        """
        issues = {}

        for name, service_def in self._services.items():
            missing_deps = [
                dep for dep in service_def.dependencies
                if not self.has_service(dep) and dep not in self._instances
            ]
            if missing_deps:
                issues[name] = missing_deps

        return issues

    def clear(self) -> 'ServiceContainer':
        """Clear all services and instances (useful for testing)"""
        self._services.clear()
        self._instances.clear()
        self._creating.clear()
        self._config.clear()
        return self

    def get_dependency_graph(self) -> Dict[str, List[str]]:
        """Get the dependency graph for visualization/debugging"""
        return {name: service_def.dependencies for name, service_def in self._services.items()}

    def __repr__(self) -> str:
        return f"ServiceContainer(services={len(self._services)}, instances={len(self._instances)})"


# Global container instance for the application
_app_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the global application service container"""
    global _app_container
    if _app_container is None:
        _app_container = ServiceContainer()
    return _app_container


def configure_container(socketio=None, config=None, clock=None) -> ServiceContainer:
    """
    Configure the global service container with DraftRoom services.

    Args:
        socketio: Flask-SocketIO instance
        config: Application configuration
        clock: Callable returning epoch seconds, defaults to time.time

    Returns:
        Configured service container
    """
    container = get_container()
    container.clear()  # Clear any existing configuration

    if socketio is not None:
        container.set_external_dependency('socketio', socketio)

    if clock is not None:
        container.set_external_dependency('clock', clock)

    if config is not None:
        container.set_config(config)

    container.configure_services()

    return container
