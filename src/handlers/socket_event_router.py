"""
Socket Event Router

This module provides declarative event-to-handler mapping with middleware support,
request logging, and centralized event management for Socket.IO events.
"""

import logging
from typing import Dict, List, Callable, Any, Optional
from flask import request

logger = logging.getLogger(__name__)


class EventRouteNotFoundError(Exception):
    """Raised when an event route is not found."""
    pass


class SocketEventRouter:
    """Router for Socket.IO events with middleware support and logging."""

    def __init__(self, socketio_instance=None):
        self._socketio = socketio_instance
        self._routes: Dict[str, Callable] = {}
        self._middleware: List[Callable] = []
        self._before_request_handlers: List[Callable] = []
        self._after_request_handlers: List[Callable] = []

    def register_route(self, event_name: str, handler: Callable) -> None:
        """Register an event handler for a specific event."""
        self._routes[event_name] = handler
        logger.debug(f"Registered route: {event_name} -> {getattr(handler, '__name__', handler)}")

    def add_middleware(self, middleware: Callable) -> None:
        """Add middleware that will be executed for all events."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.__name__}")

    def add_before_request(self, handler: Callable) -> None:
        """Add a handler that will be executed before every request."""
        self._before_request_handlers.append(handler)

    def add_after_request(self, handler: Callable) -> None:
        """Add a handler that will be executed after every request."""
        self._after_request_handlers.append(handler)

    def route(self, event_name: str):
        """Decorator for registering event handlers."""
        def decorator(handler: Callable):
            self.register_route(event_name, handler)
            return handler
        return decorator

    def handle_event(self, event_name: str, data: Any = None) -> Any:
        """
        Handle an incoming Socket.IO event.

        Executes before_request handlers, middleware, the main handler,
        and after_request handlers in sequence.

        Raises:
            EventRouteNotFoundError: If no handler is registered for the event
        """
        if event_name not in self._routes:
            raise EventRouteNotFoundError(f"No handler registered for event: {event_name}")

        logger.debug(f"Handling event: {event_name} from client: {request.sid}")  # type: ignore[attr-defined]

        try:
            for handler in self._before_request_handlers:
                handler(event_name, data)

            for middleware in self._middleware:
                data = middleware(event_name, data) or data

            result = self._routes[event_name](data)

            for handler in self._after_request_handlers:
                handler(event_name, data, result)

            return result

        except Exception as e:
            logger.error(f"Error handling event {event_name}: {str(e)}")
            for handler in self._after_request_handlers:
                try:
                    handler(event_name, data, None, error=e)
                except Exception as after_error:
                    logger.error(f"Error in after_request handler: {str(after_error)}")
            raise

    def register_with_socketio(self, socketio_instance=None) -> None:
        """Bind every registered route to the Socket.IO server."""
        socketio_instance = socketio_instance or self._socketio
        if socketio_instance is None:
            raise RuntimeError("No SocketIO instance to register routes with")

        for event_name in self.get_registered_events():
            socketio_instance.on_event(event_name, self._create_socketio_handler(event_name))
            logger.debug(f"Registered SocketIO handler for: {event_name}")

    def _create_socketio_handler(self, event_name: str) -> Callable:
        def socketio_handler(data=None):
            return self.handle_event(event_name, data)
        socketio_handler.__name__ = f"on_{event_name}"
        return socketio_handler

    def get_registered_events(self) -> List[str]:
        """Get a list of all registered event names."""
        return list(self._routes.keys())

    def has_route(self, event_name: str) -> bool:
        """Check if a route is registered for the given event."""
        return event_name in self._routes


def request_logging_middleware(event_name: str, data: Any) -> Any:
    """Middleware for logging requests."""
    logger.info(f"Processing {event_name}")
    return data


_default_router: Optional[SocketEventRouter] = None


def get_router() -> SocketEventRouter:
    """Get the default router instance."""
    if _default_router is None:
        raise RuntimeError("Router not initialized. Call setup_router() first.")
    return _default_router


def setup_router(socketio_instance) -> SocketEventRouter:
    """Set up the default router with the SocketIO instance."""
    global _default_router
    _default_router = SocketEventRouter(socketio_instance)
    _default_router.add_middleware(request_logging_middleware)

    logger.info("Socket event router initialized")
    return _default_router
