"""
Gunicorn configuration for the DraftRoom application.
Optimized for Socket.IO with eventlet workers.
"""

import logging

from config_factory import load_config

# Load configuration (renamed to avoid conflicts with gunicorn's internal 'config')
app_config = load_config()


def on_starting(server):
    """Log the effective draft settings before workers are forked."""
    logger = logging.getLogger(__name__)
    logger.info(
        f"Starting DraftRoom on {app_config.host}:{app_config.port} "
        f"(turn {app_config.turn_duration_seconds}s, idle timeout {app_config.room_idle_timeout_minutes}m)"
    )


def worker_exit(server, worker):
    """Cancel countdowns and housekeeping in the exiting worker."""
    try:
        from app import services
    except ImportError:
        return
    services['timer_scheduler'].shutdown()


# Server socket
bind = f"{app_config.host}:{app_config.port}"
backlog = 2048

# Worker processes
workers = 1  # Must be 1: rooms, seats and countdowns live in process memory
worker_class = "eventlet"
worker_connections = app_config.worker_connections
timeout = app_config.timeout
keepalive = app_config.keepalive

# Logging
accesslog = "-"
errorlog = "-"
loglevel = app_config.log_level
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Process naming
proc_name = "draftroom"

# Server mechanics
preload_app = False  # Don't preload for Socket.IO
daemon = False
pidfile = None
user = None
group = None
tmp_upload_dir = None

# SSL (for production)
keyfile = None
certfile = None
