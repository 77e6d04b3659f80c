"""
pipesh Configuration Loader

Configuration management for the interpreter:
- JSON configuration file loading
- Configuration validation
- Default value handling
- Runtime configuration updates

A configuration file is optional. Without one every setting keeps its
default and the interpreter behaves like a plain two-stage shell.

Author: pipesh developers
Version: 1.0.0
"""

import json
import threading
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

from pipesh.exceptions import ConfigError
from pipesh.logger import LogLevel


@dataclass
class ShellConfig:
    """Interpreter settings."""
    prompt: str = "> "
    max_args: int = 64
    exit_message: str = "Exiting pipesh..."
    report_status: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for the interpreter.
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('pipesh.json')
        >>> print(config.shell.prompt)
        >
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigError: If the file cannot be read, parsed or validated
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                path=config_path
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {e}",
                path=config_path
            )
        except OSError as e:
            raise ConfigError(
                f"Cannot read configuration file: {e}",
                path=config_path
            )

        if not isinstance(data, dict):
            raise ConfigError(
                "Configuration file must contain a JSON object",
                path=config_path
            )

        config = self._parse_config(data)
        self._validate(config, config_path)

        self._config = config
        self._loaded = True
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        if 'shell' in data:
            shell_data = data['shell']
            self._require_section(shell_data, 'shell')
            config.shell = ShellConfig(
                prompt=shell_data.get('prompt', config.shell.prompt),
                max_args=shell_data.get('max_args', config.shell.max_args),
                exit_message=shell_data.get('exit_message', config.shell.exit_message),
                report_status=shell_data.get('report_status', config.shell.report_status),
            )

        if 'logging' in data:
            log_data = data['logging']
            self._require_section(log_data, 'logging')
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
            )

        return config

    @staticmethod
    def _require_section(section: Any, name: str) -> None:
        if not isinstance(section, dict):
            raise ConfigError(f"Section '{name}' must be a JSON object")

    def _validate(self, config: Config, config_path: Optional[str] = None) -> None:
        """Reject settings the interpreter cannot run with."""
        max_args = config.shell.max_args
        if not isinstance(max_args, int) or isinstance(max_args, bool) or max_args < 1:
            raise ConfigError(
                f"shell.max_args must be a positive integer, got {max_args!r}",
                path=config_path
            )

        if not isinstance(config.shell.prompt, str):
            raise ConfigError("shell.prompt must be a string", path=config_path)

        try:
            LogLevel.from_name(str(config.logging.level))
        except ValueError as e:
            raise ConfigError(str(e), path=config_path)

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        return self._config

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'shell.prompt')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        obj: Any = self._config

        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Args:
            key: Dot-notation key (e.g., 'shell.max_args')
            value: Value to set

        Note:
            Changes are not persisted to disk.
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigError(f"Invalid configuration key: {key}")

        final_key = parts[-1]
        if not hasattr(obj, final_key):
            raise ConfigError(f"Invalid configuration key: {key}")

        previous = getattr(obj, final_key)
        setattr(obj, final_key, value)
        try:
            self._validate(self._config)
        except ConfigError:
            setattr(obj, final_key, previous)
            raise

    def reset(self) -> None:
        """Drop any loaded configuration and return to defaults."""
        self._config = Config()
        self._loaded = False

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self._config)


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    return ConfigLoader().config
