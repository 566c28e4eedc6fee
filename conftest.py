"""
Global pytest configuration and fixtures.
Provides service fixtures for the application instance and isolated unit fixtures.
"""

import pytest
import os

# Ensure testing environment before the app module is imported anywhere
os.environ['TESTING'] = '1'
os.environ['FLASK_ENV'] = 'testing'
os.environ['SOCKETIO_ASYNC_MODE'] = 'threading'


@pytest.fixture(scope="function", autouse=True)
def ensure_config_loaded():
    """Reload configuration if a previous test reset it; handlers read it on connect."""
    from config_factory import get_config, load_config, ConfigError

    try:
        get_config()
    except ConfigError:
        load_config()
    yield


@pytest.fixture(scope="session")
def app():
    """Flask app for testing."""
    from app import app as flask_app
    return flask_app


@pytest.fixture(scope="session")
def socketio():
    """SocketIO instance for testing."""
    from app import socketio as socketio_instance
    return socketio_instance


@pytest.fixture(scope="function")
def services():
    """Application services with all rooms, bindings and countdowns cleared."""
    from app import services as app_services

    _reset_app_state(app_services)
    yield app_services
    _reset_app_state(app_services)


def _reset_app_state(app_services):
    app_services['timer_scheduler'].stop_all()
    app_services['room_registry']._rooms.clear()
    app_services['participant_index']._records.clear()


@pytest.fixture(scope="function")
def fake_clock():
    """Manually advanced epoch clock."""
    from tests.helpers.fake_clock import FakeClock
    return FakeClock()


@pytest.fixture(scope="function")
def mock_socketio():
    """Mock Flask-SocketIO instance."""
    from tests.helpers.socket_mocks import create_mock_socketio
    return create_mock_socketio()


@pytest.fixture(scope="function")
def room_registry():
    """Fresh RoomRegistry with its own locks."""
    from src.room_registry import RoomRegistry
    from src.services.concurrency_control_service import ConcurrencyControlService
    return RoomRegistry(ConcurrencyControlService())


@pytest.fixture(scope="function")
def participant_index():
    from src.services.participant_index import ParticipantIndex
    return ParticipantIndex()
