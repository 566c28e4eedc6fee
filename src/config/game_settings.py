"""
Game Settings Configuration Module

Provides centralized access to draft-specific configuration values,
replacing hardcoded constants throughout the codebase.
"""

import logging

logger = logging.getLogger(__name__)


class GameSettings:
    """Centralized game settings management."""

    def __init__(self, app_config=None):
        """
        Initialize game settings.

        Args:
            app_config: Application configuration instance from config_factory
        """
        self._config = app_config
        if app_config is None:
            try:
                from config_factory import get_config
                self._config = get_config()
            except (ImportError, Exception) as e:
                logger.warning(f"Could not load configuration: {e}, using defaults")
                self._config = None

    @property
    def turn_duration_seconds(self) -> int:
        """
        Get the length of a single turn.

        Returns:
            Seconds a seat has before its turn is forcibly advanced
        """
        if self._config is None:
            return 15  # Fallback default

        return self._config.turn_duration_seconds

    @property
    def timer_tick_interval(self) -> float:
        """
        Get the countdown tick interval in seconds.

        Returns:
            Seconds between two countdown ticks
        """
        if self._config is None:
            return 0.1

        return self._config.timer_tick_interval_ms / 1000.0

    @property
    def room_code_length(self) -> int:
        """Number of characters in a freshly generated room code."""
        if self._config is None:
            return 6

        return self._config.room_code_length

    @property
    def max_player_name_length(self) -> int:
        """Display names are truncated to this many characters."""
        if self._config is None:
            return 20

        return self._config.max_player_name_length

    @property
    def room_idle_timeout_minutes(self) -> int:
        if self._config is None:
            return 30

        return self._config.room_idle_timeout_minutes

    @property
    def room_reap_interval_seconds(self) -> int:
        if self._config is None:
            return 60

        return self._config.room_reap_interval_seconds


# Global instance for easy access
_game_settings_instance = None


def get_game_settings(app_config=None) -> GameSettings:
    """
    Get or create the global game settings instance.

    Args:
        app_config: Optional app config to use

    Returns:
        GameSettings instance
    """
    global _game_settings_instance

    if _game_settings_instance is None or app_config is not None:
        _game_settings_instance = GameSettings(app_config)

    return _game_settings_instance


def reset_game_settings():
    """Reset the global game settings instance (mainly for testing)."""
    global _game_settings_instance
    _game_settings_instance = None
