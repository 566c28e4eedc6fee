"""
Socket Event Router Unit Tests

Tests for the SocketEventRouter class and its core routing functionality,
including event routing, middleware execution and Socket.IO registration.
"""

import pytest
from unittest.mock import MagicMock, Mock, patch

from src.handlers.socket_event_router import (
    SocketEventRouter,
    EventRouteNotFoundError,
    get_router,
    setup_router,
    request_logging_middleware
)


@pytest.fixture
def fake_request():
    with patch('src.handlers.socket_event_router.request', new=MagicMock()) as mock_request:
        mock_request.sid = 'sid-1'
        yield mock_request


class TestSocketEventRouter:
    """Test SocketEventRouter core functionality"""

    def setup_method(self):
        self.router = SocketEventRouter()

    def test_register_route(self):
        def test_handler(data):
            return "test_response"

        self.router.register_route("test_event", test_handler)

        assert self.router.has_route("test_event")
        assert not self.router.has_route("nonexistent_event")
        assert self.router.get_registered_events() == ["test_event"]

    def test_route_decorator(self):
        @self.router.route("decorated_event")
        def decorated_handler(data):
            return "decorated_response"

        assert self.router.has_route("decorated_event")

    def test_handle_unknown_event(self, fake_request):
        with pytest.raises(EventRouteNotFoundError):
            self.router.handle_event('nope', {})

    def test_handle_event_runs_hooks_in_order(self, fake_request):
        order = []

        def before(event_name, data):
            order.append('before')

        def middleware(event_name, data):
            order.append('middleware')
            return dict(data, touched=True)

        def after(event_name, data, result, error=None):
            order.append('after')

        def handler(data):
            order.append('handler')
            return data

        self.router.add_before_request(before)
        self.router.add_middleware(middleware)
        self.router.add_after_request(after)
        self.router.register_route('evt', handler)

        result = self.router.handle_event('evt', {'x': 1})

        assert order == ['before', 'middleware', 'handler', 'after']
        assert result == {'x': 1, 'touched': True}

    def test_handler_error_reaches_after_hooks_and_propagates(self, fake_request):
        after = Mock()

        def handler(data):
            raise ValueError('bad')

        self.router.add_after_request(after)
        self.router.register_route('evt', handler)

        with pytest.raises(ValueError):
            self.router.handle_event('evt', None)

        assert isinstance(after.call_args[1]['error'], ValueError)

    def test_register_with_socketio(self):
        socketio = Mock()
        router = SocketEventRouter(socketio)
        router.register_route('a', Mock(__name__='a'))
        router.register_route('b', Mock(__name__='b'))

        router.register_with_socketio()

        registered = [c[0][0] for c in socketio.on_event.call_args_list]
        assert registered == ['a', 'b']
        assert socketio.on_event.call_args_list[0][0][1].__name__ == 'on_a'

    def test_registered_handler_dispatches_through_router(self, fake_request):
        socketio = Mock()
        handler = Mock(return_value='done', __name__='handler')
        router = SocketEventRouter(socketio)
        router.register_route('skipTurn', handler)
        router.register_with_socketio()

        socketio_handler = socketio.on_event.call_args[0][1]

        assert socketio_handler({'roomCode': 'ABC123'}) == 'done'
        handler.assert_called_once_with({'roomCode': 'ABC123'})

    def test_register_without_socketio(self):
        with pytest.raises(RuntimeError):
            SocketEventRouter().register_with_socketio()


class TestRouterSetup:

    def test_setup_router(self):
        socketio = Mock()

        router = setup_router(socketio)

        assert get_router() is router
        assert request_logging_middleware in router._middleware

    def test_request_logging_middleware_passes_data(self):
        assert request_logging_middleware('evt', {'a': 1}) == {'a': 1}
