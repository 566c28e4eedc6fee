"""
Service Container Unit Tests
Tests registration, dependency resolution and the DraftRoom service wiring.
"""

import pytest
from unittest.mock import Mock

from container import (
    CircularDependencyError,
    ServiceContainer,
    ServiceLifecycle,
    ServiceNotFoundError,
)
from tests.helpers.fake_clock import FakeClock


class Leaf:
    pass


class Branch:
    def __init__(self, leaf):
        self.leaf = leaf


class TestServiceContainer:
    """Test ServiceContainer resolution rules"""

    def setup_method(self):
        self.container = ServiceContainer()

    def test_singleton_by_default(self):
        self.container.register('Leaf', Leaf)

        assert self.container.get('Leaf') is self.container.get('Leaf')

    def test_transient_lifecycle(self):
        self.container.register('Leaf', Leaf, lifecycle=ServiceLifecycle.TRANSIENT)

        assert self.container.get('Leaf') is not self.container.get('Leaf')

    def test_dependencies_are_injected(self):
        self.container.register('Leaf', Leaf)
        self.container.register('Branch', Branch, dependencies=['Leaf'])

        assert self.container.get('Branch').leaf is self.container.get('Leaf')

    def test_function_factory_receives_config(self):
        self.container.register('Pair', lambda leaf, size=0: (leaf, size),
                                dependencies=['Leaf'], config={'size': 3})
        self.container.register('Leaf', Leaf)

        leaf, size = self.container.get('Pair')

        assert isinstance(leaf, Leaf)
        assert size == 3

    def test_external_dependency(self):
        socketio = Mock()
        self.container.set_external_dependency('socketio', socketio)

        assert self.container.get('socketio') is socketio

    def test_unknown_service(self):
        with pytest.raises(ServiceNotFoundError):
            self.container.get('Missing')

    def test_duplicate_registration(self):
        self.container.register('Leaf', Leaf)

        with pytest.raises(ValueError):
            self.container.register('Leaf', Leaf)

    def test_circular_dependency(self):
        self.container.register('A', Branch, dependencies=['B'])
        self.container.register('B', Branch, dependencies=['A'])

        with pytest.raises(CircularDependencyError, match='A -> B -> A'):
            self.container.get('A')

    def test_validate_dependencies(self):
        self.container.register('Branch', Branch, dependencies=['Leaf'])

        assert self.container.validate_dependencies() == {'Branch': ['Leaf']}
        assert self.container.get_dependency_graph() == {'Branch': ['Leaf']}

    def test_clear(self):
        self.container.register('Leaf', Leaf)
        self.container.set_config({'port': 3000})

        self.container.clear()

        assert not self.container.has_service('Leaf')
        assert self.container.get_config('port') is None


class TestDraftRoomWiring:
    """The configured container builds the whole coordinator"""

    def test_configure_services(self, mock_socketio):
        clock = FakeClock()
        container = ServiceContainer()
        container.set_external_dependency('socketio', mock_socketio)
        container.set_external_dependency('clock', clock)

        container.configure_services()

        assert container.validate_dependencies() == {}
        game_manager = container.get('GameManager')
        registry = container.get('RoomRegistry')
        assert game_manager.room_registry is registry
        assert container.get('TimerScheduler').room_registry is registry
        assert container.get('TurnEngine').clock is clock
        assert registry.concurrency_control is container.get('ConcurrencyControlService')
        assert container.get('BroadcastGateway').socketio is mock_socketio

    def test_default_clock(self):
        container = ServiceContainer().configure_services()

        assert callable(container.get('clock'))
        assert container.get_service_names()[0] == 'ConfigurationFactory'
