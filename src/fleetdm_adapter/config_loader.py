"""
ConfigLoader module for loading and resolving FleetDM connection configuration
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from .errors import ConfigurationError


logger = logging.getLogger(__name__)

SERVER_URL_ENV = "FLEETDM_URL"
API_TOKEN_ENV = "FLEETDM_API_TOKEN"

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass
class ConnectionConfig:
    """Connection settings for a FleetDM server"""
    server_url: Optional[str] = None
    api_token: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"


class ConfigLoader:
    """Loads connection configuration from TOML/YAML files and the environment"""

    CONNECTION_KEYS = ('server_url', 'api_token')
    LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

    @staticmethod
    def load_config(config_path: Path) -> ConnectionConfig:
        """
        Load connection configuration from a TOML or YAML file

        Args:
            config_path: Path to a .toml, .yml or .yaml file

        Returns:
            ConnectionConfig populated from the file (not yet resolved)

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the file cannot be parsed or has bad values
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix.lower() == '.toml':
            config_data = ConfigLoader._load_toml(config_path)
        else:
            config_data = ConfigLoader._load_yaml(config_path)

        logger.info(f"Loaded configuration from {config_path}")
        return ConfigLoader.from_mapping(config_data)

    @staticmethod
    def _load_toml(config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'rb') as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {config_path}: {e}")

    @staticmethod
    def _load_yaml(config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}")
        return config_data or {}

    @staticmethod
    def from_mapping(config_data: Dict[str, Any]) -> ConnectionConfig:
        """
        Build a ConnectionConfig from parsed file contents

        Args:
            config_data: Mapping with optional [connection], [client] and [logging] sections

        Returns:
            ConnectionConfig object

        Raises:
            ConfigurationError: If a section or value has the wrong type
        """
        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration root must be a mapping")

        connection = ConfigLoader._section(config_data, 'connection')
        client = ConfigLoader._section(config_data, 'client')
        logging_section = ConfigLoader._section(config_data, 'logging')

        for key in ConfigLoader.CONNECTION_KEYS:
            value = connection.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"Key '{key}' in section [connection] must be a string")

        timeout = client.get('timeout_seconds', DEFAULT_TIMEOUT_SECONDS)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigurationError("Key 'timeout_seconds' in section [client] must be a positive number")

        log_level = str(logging_section.get('level', 'INFO')).upper()
        if log_level not in ConfigLoader.LOG_LEVELS:
            raise ConfigurationError(
                f"Key 'level' in section [logging] must be one of {', '.join(ConfigLoader.LOG_LEVELS)}, got {log_level!r}"
            )

        return ConnectionConfig(
            server_url=connection.get('server_url'),
            api_token=connection.get('api_token'),
            timeout_seconds=float(timeout),
            log_level=log_level
        )

    @staticmethod
    def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = config_data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"Section [{name}] must be a table")
        return section

    @staticmethod
    def resolve(config: Optional[ConnectionConfig] = None) -> ConnectionConfig:
        """
        Apply environment fallbacks and validate required connection values

        Values from the configuration file take precedence; FLEETDM_URL and
        FLEETDM_API_TOKEN are used when the file leaves them empty.

        Args:
            config: ConnectionConfig loaded from file, or None for environment only

        Returns:
            New ConnectionConfig with server_url and api_token set

        Raises:
            ConfigurationError: If server URL or API token cannot be resolved
        """
        config = config or ConnectionConfig()

        server_url = ConfigLoader._pick(config.server_url, SERVER_URL_ENV, 'server_url')
        api_token = ConfigLoader._pick(config.api_token, API_TOKEN_ENV, 'api_token')

        if not server_url:
            raise ConfigurationError(
                f"server_url must be configured in the connection config or via {SERVER_URL_ENV} environment variable"
            )
        if not api_token:
            raise ConfigurationError(
                f"api_token must be configured in the connection config or via {API_TOKEN_ENV} environment variable"
            )

        return ConnectionConfig(
            server_url=server_url,
            api_token=api_token,
            timeout_seconds=config.timeout_seconds,
            log_level=config.log_level
        )

    @staticmethod
    def _pick(file_value: Optional[str], env_var_name: str, key: str) -> Optional[str]:
        if file_value:
            logger.info(f"{key} source: config file")
            return file_value

        env_value = os.getenv(env_var_name)
        if env_value:
            logger.info(f"{key} source: environment variable {env_var_name}")
            return env_value

        return None
