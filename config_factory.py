"""
Configuration Factory - Centralized configuration management for DraftRoom
Provides type-safe configuration with validation and environment-specific settings.
"""

import os
import logging
from typing import Any, Dict, Optional, Type
from enum import Enum
from dataclasses import dataclass, field


class Environment(Enum):
    """Environment types for configuration"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Configuration-related errors"""
    pass


@dataclass
class AppConfig:
    """Application configuration with type safety and validation"""

    # Core Flask settings
    secret_key: str = field(default_factory=lambda: 'dev-secret-key-change-in-production')
    debug: bool = False
    flask_env: str = 'development'  # Default to development for safety

    # Server settings
    host: str = '0.0.0.0'
    port: int = 3000

    # Draft settings
    turn_duration_seconds: int = 15
    timer_tick_interval_ms: int = 100
    room_code_length: int = 6
    max_player_name_length: int = 20

    # Room lifecycle settings
    room_idle_timeout_minutes: int = 30  # minutes without player activity before a room is reaped
    room_reap_interval_seconds: int = 60  # seconds between idle-room sweeps

    # Socket.IO settings
    socketio_async_mode: str = 'eventlet'
    cors_allowed_origins: str = ''  # comma-separated, only enforced in production

    # Gunicorn settings (for production deployment)
    worker_connections: int = 1000
    timeout: int = 30
    keepalive: int = 2
    log_level: str = 'info'

    # Environment
    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        """Validate configuration after initialization"""
        self._validate()

    def _validate(self):
        """Validate configuration values"""
        if self.port < 1 or self.port > 65535:
            raise ConfigError(f"Invalid port number: {self.port}")

        if self.turn_duration_seconds < 1 or self.turn_duration_seconds > 600:
            raise ConfigError(f"Invalid turn_duration_seconds: {self.turn_duration_seconds}")

        if self.timer_tick_interval_ms < 10 or self.timer_tick_interval_ms > 5000:
            raise ConfigError(f"Invalid timer_tick_interval_ms: {self.timer_tick_interval_ms}")

        if self.room_code_length < 4 or self.room_code_length > 12:
            raise ConfigError(f"Invalid room_code_length: {self.room_code_length}")

        if self.max_player_name_length < 1 or self.max_player_name_length > 100:
            raise ConfigError(f"Invalid max_player_name_length: {self.max_player_name_length}")

        if self.room_idle_timeout_minutes < 1 or self.room_idle_timeout_minutes > 24 * 60:
            raise ConfigError(f"Invalid room_idle_timeout_minutes: {self.room_idle_timeout_minutes}")

        if self.room_reap_interval_seconds < 1 or self.room_reap_interval_seconds > 3600:
            raise ConfigError(f"Invalid room_reap_interval_seconds: {self.room_reap_interval_seconds}")

        if self.socketio_async_mode not in ('eventlet', 'gevent', 'threading'):
            raise ConfigError(f"Invalid socketio_async_mode: {self.socketio_async_mode}")

        if self.environment == Environment.PRODUCTION and self.secret_key == 'dev-secret-key-change-in-production':
            raise ConfigError("Production environment requires a secure SECRET_KEY")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode"""
        return self.environment == Environment.TESTING

    @property
    def allowed_origins(self) -> list:
        """Parsed CORS allowlist"""
        return [o.strip() for o in self.cors_allowed_origins.split(',') if o.strip()]


class ConfigurationFactory:
    """
    Factory for creating and managing application configuration.

    Features:
    - Environment variable loading with type conversion
    - Configuration validation
    - Environment-specific defaults
    - Singleton pattern for global config access
    """

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        """Singleton pattern implementation"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the configuration factory"""
        if not hasattr(self, '_initialized'):
            self._logger = logging.getLogger(__name__)
            self._env_overrides: Dict[str, Any] = {}
            self._initialized = True

    def load_from_environment(self, env_prefix: str = '') -> AppConfig:
        """
        Load configuration from environment variables.

        Args:
            env_prefix: Optional prefix for environment variables (e.g., 'DRAFTROOM_')

        Returns:
            Configured AppConfig instance
        """
        def get_env_var(key: str, default: Any = None, var_type: Type = str) -> Any:
            """Get environment variable with type conversion"""
            env_key = f"{env_prefix}{key}" if env_prefix else key
            value = os.environ.get(env_key)

            if value is None:
                return default

            # Type conversion
            if var_type == bool:
                return value.lower() in ('true', '1', 'yes', 'on')
            elif var_type == int:
                try:
                    return int(value)
                except ValueError:
                    self._logger.warning(f"Invalid integer value for {env_key}: {value}, using default: {default}")
                    return default
            elif var_type == float:
                try:
                    return float(value)
                except ValueError:
                    self._logger.warning(f"Invalid float value for {env_key}: {value}, using default: {default}")
                    return default
            else:
                return value

        # Determine environment
        flask_env = get_env_var('FLASK_ENV', 'development')  # Default to development for safety
        if flask_env == 'development':
            environment = Environment.DEVELOPMENT
            debug = True
        elif flask_env == 'testing':
            environment = Environment.TESTING
            debug = True
        else:
            environment = Environment.PRODUCTION
            debug = False

        # Load all configuration values
        config = AppConfig(
            # Core Flask settings
            secret_key=get_env_var('SECRET_KEY', 'dev-secret-key-change-in-production'),
            debug=get_env_var('DEBUG', debug, bool),
            flask_env=flask_env,

            # Server settings
            host=get_env_var('HOST', '0.0.0.0'),
            port=get_env_var('PORT', 3000, int),

            # Draft settings
            turn_duration_seconds=get_env_var('TURN_DURATION_SECONDS', 15, int),
            timer_tick_interval_ms=get_env_var('TIMER_TICK_INTERVAL_MS', 100, int),
            room_code_length=get_env_var('ROOM_CODE_LENGTH', 6, int),
            max_player_name_length=get_env_var('MAX_PLAYER_NAME_LENGTH', 20, int),

            # Room lifecycle settings
            room_idle_timeout_minutes=get_env_var('ROOM_IDLE_TIMEOUT_MINUTES', 30, int),
            room_reap_interval_seconds=get_env_var('ROOM_REAP_INTERVAL_SECONDS', 60, int),

            # Socket.IO settings
            socketio_async_mode=get_env_var('SOCKETIO_ASYNC_MODE', 'eventlet'),
            cors_allowed_origins=get_env_var('SOCKETIO_CORS_ALLOWED_ORIGINS', ''),

            # Gunicorn settings
            worker_connections=get_env_var('WORKER_CONNECTIONS', 1000, int),
            timeout=get_env_var('TIMEOUT', 30, int),
            keepalive=get_env_var('KEEPALIVE', 2, int),
            log_level=get_env_var('LOG_LEVEL', 'info'),

            # Environment
            environment=environment
        )

        # Apply any manual overrides
        for key, value in self._env_overrides.items():
            if hasattr(config, key):
                setattr(config, key, value)

        self._config = config
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return config

    def load_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        """
        Load configuration from dictionary (useful for testing).

        Args:
            config_dict: Dictionary of configuration values

        Returns:
            Configured AppConfig instance
        """
        config_dict = dict(config_dict)
        # Convert environment string to enum if provided
        if 'environment' in config_dict and isinstance(config_dict['environment'], str):
            config_dict['environment'] = Environment(config_dict['environment'])

        self._config = AppConfig(**config_dict)
        return self._config

    def override_setting(self, key: str, value: Any) -> 'ConfigurationFactory':
        """
        Override a specific configuration setting.

        Args:
            key: Configuration key to override
            value: New value for the setting

        Returns:
            Self for method chaining
        """
        self._env_overrides[key] = value

        # Update current config if loaded
        if self._config and hasattr(self._config, key):
            setattr(self._config, key, value)
            self._config._validate()  # Re-validate after change

        return self

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Returns:
            Current AppConfig instance

        Raises:
            ConfigError: If no configuration has been loaded
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() or load_from_dict() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        """Reset the factory (useful for testing)"""
        self._config = None
        self._env_overrides.clear()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert current configuration to dictionary"""
        if self._config is None:
            raise ConfigError("Configuration not loaded")

        config_dict = {}
        for field_info in self._config.__dataclass_fields__.values():
            value = getattr(self._config, field_info.name)
            if isinstance(value, Environment):
                config_dict[field_info.name] = value.value
            else:
                config_dict[field_info.name] = value

        return config_dict

    def get_flask_config(self) -> Dict[str, Any]:
        """
        Get Flask-compatible configuration dictionary.

        Returns:
            Dictionary suitable for Flask app.config.update()
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded")

        return {
            'SECRET_KEY': self._config.secret_key,
            'DEBUG': self._config.debug,
            'ENV': self._config.flask_env,
            'TESTING': self._config.is_testing,
            'TURN_DURATION_SECONDS': self._config.turn_duration_seconds,
            'TIMER_TICK_INTERVAL_MS': self._config.timer_tick_interval_ms,
        }


# Global factory instance
_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    """Get the global application configuration"""
    return _config_factory.get_config()


def load_config(env_prefix: str = '') -> AppConfig:
    """Load configuration from environment variables"""
    return _config_factory.load_from_environment(env_prefix)


def load_config_from_dict(config_dict: Dict[str, Any]) -> AppConfig:
    """Load configuration from dictionary"""
    return _config_factory.load_from_dict(config_dict)


def override_config(key: str, value: Any) -> ConfigurationFactory:
    """Override a configuration setting"""
    return _config_factory.override_setting(key, value)


def reset_config() -> ConfigurationFactory:
    """Reset configuration (for testing)"""
    return _config_factory.reset()
