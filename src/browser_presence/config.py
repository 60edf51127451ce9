"""Configuration management for Browser Presence."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

MIN_UPDATE_INTERVAL = 2

DEFAULT_CONFIG = {
    "publisher": "discord",
    "discord_application_id": "",
    "update_interval_seconds": 3,
    "handshake_timeout": 5,
    "presence_endpoint": "",
    "presence_auth_token": "",  # nosec B105 - Bearer token for the HTTP publisher
    "verbose_logging": True,
    "debug": False,
}


def get_default_config_dir() -> Path:
    """Get the default configuration directory for the current user.

    Returns:
        Path to default configuration directory
    """
    return Path.home() / "Library" / "Application Support" / "BrowserPresence" / "config"


class Config:
    """Configuration manager for Browser Presence."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_dir: Custom configuration directory path
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = get_default_config_dir()

        self.config_file = self.config_dir / "settings.json"
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or create default."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config = json.load(f)
                merged_config = DEFAULT_CONFIG.copy()
                merged_config.update(config)
                return merged_config
            except (json.JSONDecodeError, IOError) as e:
                print(f"Warning: Could not load config file: {e}")
                print("Using default configuration.")

        return DEFAULT_CONFIG.copy()

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)
        except IOError as e:
            print(f"Warning: Could not save config file: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self._config[key] = value

    def update(self, config_dict: Dict[str, Any]) -> None:
        """Update multiple configuration values."""
        self._config.update(config_dict)

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self._config = DEFAULT_CONFIG.copy()

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration values."""
        return self._config.copy()

    @property
    def publisher(self) -> str:
        """Get the presence publisher backend name."""
        return self.get("publisher", "discord")

    @publisher.setter
    def publisher(self, value: str) -> None:
        self.set("publisher", value)

    @property
    def discord_application_id(self) -> str:
        return self.get("discord_application_id", "")

    @discord_application_id.setter
    def discord_application_id(self, value: str) -> None:
        self.set("discord_application_id", value)

    @property
    def update_interval_seconds(self) -> int:
        """Get the poll interval in whole seconds, never below the minimum."""
        try:
            interval = int(self.get("update_interval_seconds", 3))
        except (TypeError, ValueError):
            interval = DEFAULT_CONFIG["update_interval_seconds"]
        return max(MIN_UPDATE_INTERVAL, interval)

    @update_interval_seconds.setter
    def update_interval_seconds(self, value: int) -> None:
        self.set("update_interval_seconds", max(MIN_UPDATE_INTERVAL, int(value)))

    @property
    def handshake_timeout(self) -> float:
        """Get the publisher connection timeout in seconds."""
        return float(self.get("handshake_timeout", 5))

    @property
    def presence_endpoint(self) -> str:
        return self.get("presence_endpoint", "")

    @presence_endpoint.setter
    def presence_endpoint(self, value: str) -> None:
        self.set("presence_endpoint", value)

    @property
    def verbose_logging(self) -> bool:
        return self.get("verbose_logging", True)

    @verbose_logging.setter
    def verbose_logging(self, value: bool) -> None:
        self.set("verbose_logging", value)

    @property
    def debug(self) -> bool:
        return self.get("debug", False)


def load_config_from_env() -> Dict[str, Any]:
    """Load configuration from environment variables.

    Returns:
        Configuration dictionary from environment
    """
    env_config: Dict[str, Any] = {}

    env_mappings = {
        "BROWSER_PRESENCE_PUBLISHER": "publisher",
        "BROWSER_PRESENCE_DISCORD_APP_ID": "discord_application_id",
        "BROWSER_PRESENCE_INTERVAL": "update_interval_seconds",
        "BROWSER_PRESENCE_HANDSHAKE_TIMEOUT": "handshake_timeout",
        "BROWSER_PRESENCE_ENDPOINT": "presence_endpoint",
        "BROWSER_PRESENCE_AUTH_TOKEN": "presence_auth_token",  # nosec B105
        "BROWSER_PRESENCE_VERBOSE": "verbose_logging",
        "BROWSER_PRESENCE_DEBUG": "debug",
    }

    for env_var, config_key in env_mappings.items():
        value = os.getenv(env_var)
        if value is not None:
            if config_key in ["update_interval_seconds", "handshake_timeout"]:
                try:
                    env_config[config_key] = int(value)
                except ValueError:
                    print(f"Warning: Invalid integer value for {env_var}: {value}")
            elif config_key in ["verbose_logging", "debug"]:
                env_config[config_key] = value.lower() in ("true", "1", "yes", "on")
            else:
                env_config[config_key] = value

    return env_config


# Global config instance, used by the command line entry points only
_global_config: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance.

    Returns:
        Global Config instance
    """
    global _global_config
    if _global_config is None:
        _global_config = Config()
        env_config = load_config_from_env()
        if env_config:
            _global_config.update(env_config)
    return _global_config


def reload_config() -> Config:
    """Reload configuration from file."""
    global _global_config
    _global_config = None
    return get_config()
