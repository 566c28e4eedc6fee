"""
DraftRoom - A real-time, three-seat turn-based draft room.
Main Flask application entry point focusing on app creation, dependency injection, and service wiring.
"""

from flask import Flask
from flask_socketio import SocketIO
import logging
import atexit

from container import configure_container
from config_factory import load_config, ConfigurationFactory

# Initialize Flask app
app = Flask(__name__)

# Load and apply configuration
app_config = load_config()
config_factory = ConfigurationFactory()
app.config.update(config_factory.get_flask_config())

# In production, restrict to the origins listed in SOCKETIO_CORS_ALLOWED_ORIGINS (comma-separated)
if app_config.is_production:
    # If none provided, default to same-origin only by providing empty list (no cross-origin)
    socketio = SocketIO(app, cors_allowed_origins=app_config.allowed_origins or [],
                        async_mode=app_config.socketio_async_mode)
else:
    # Development/testing: permissive for local workflows
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode=app_config.socketio_async_mode)

# Configure logging
logging.basicConfig(level=getattr(logging, app_config.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Configure service container with dependencies
container = configure_container(socketio=socketio, config=config_factory.to_dict())

# Initialize services from container
services = {
    'room_registry': container.get('RoomRegistry'),
    'participant_index': container.get('ParticipantIndex'),
    'turn_engine': container.get('TurnEngine'),
    'timer_scheduler': container.get('TimerScheduler'),
    'broadcast_gateway': container.get('BroadcastGateway'),
    'game_manager': container.get('GameManager'),
    'room_state_presenter': container.get('RoomStatePresenter'),
    'validation_service': container.get('ValidationService'),
    'error_response_factory': container.get('ErrorResponseFactory')
}

# Register REST endpoints
from src.routes.api import create_api_blueprint
api_blueprint = create_api_blueprint(services)
app.register_blueprint(api_blueprint)

# Register Socket.IO handlers
from src.handlers.socket_handlers import register_socket_handlers
register_socket_handlers(socketio)

# Idle rooms are reaped in the background for the life of the process
if not app_config.is_testing:
    services['timer_scheduler'].start_housekeeping()


def cleanup_on_exit():
    """Clean up resources on application exit."""
    logger.info("Shutting down DraftRoom server...")
    services['timer_scheduler'].shutdown()


atexit.register(cleanup_on_exit)

if __name__ == '__main__':
    # Run the application using configuration
    logger.info(f"Starting DraftRoom server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
    finally:
        cleanup_on_exit()
