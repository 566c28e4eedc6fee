#!/usr/bin/env python3
"""
Development server runner using Gunicorn with an eventlet worker.
Rooms live in process memory, so --reload drops every open room.
"""

import os
import subprocess
import sys


def main():
    """Run the development server with Gunicorn."""
    os.environ.setdefault('FLASK_ENV', 'development')
    os.environ.setdefault('PORT', '3000')
    os.environ.setdefault('SOCKETIO_ASYNC_MODE', 'eventlet')

    try:
        from config_factory import load_config
        config = load_config()
        server_url = f"http://{config.host}:{config.port}"
        turn_info = f"{config.turn_duration_seconds}s turns"
    except Exception as e:
        print(f"Could not load configuration ({e}), using environment defaults")
        server_url = f"http://localhost:{os.environ['PORT']}"
        turn_info = "default turns"

    cmd = [
        'gunicorn',
        '--config', 'gunicorn.conf.py',
        '--reload',
        '--log-level', 'debug' if os.environ.get('DEBUG') else 'info',
        'wsgi:app'
    ]

    print(f"Starting DraftRoom development server ({turn_info})...")
    print(f"Socket.IO endpoint: {server_url}")
    print("Press Ctrl+C to stop the server")
    print("-" * 50)

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        print("\nShutting down development server...")
    except subprocess.CalledProcessError as e:
        print(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
