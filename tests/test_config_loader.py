"""
Test suite for ConfigLoader component
Following TDD approach with AAA pattern and descriptive naming
"""

import pytest
import tempfile
from pathlib import Path

from fleetdm_adapter.config_loader import ConfigLoader, ConnectionConfig, DEFAULT_TIMEOUT_SECONDS
from fleetdm_adapter.errors import ConfigurationError


class TestConfigLoader:
    """Test suite for loading connection configuration files"""

    def test_load_config_with_valid_toml_returns_connection_config(self):
        """
        Test that a TOML file populates every connection setting
        """
        # Arrange
        config_content = """
[connection]
server_url = "https://fleet.example.com"
api_token = "toml-token"

[client]
timeout_seconds = 10

[logging]
level = "debug"
"""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "fleetdm.toml"
            config_path.write_text(config_content)

            # Act
            config = ConfigLoader.load_config(config_path)

        # Assert
        assert isinstance(config, ConnectionConfig)
        assert config.server_url == "https://fleet.example.com"
        assert config.api_token == "toml-token"
        assert config.timeout_seconds == 10.0
        assert config.log_level == "DEBUG"

    def test_load_config_with_valid_yaml_returns_connection_config(self):
        """
        Test that a YAML file is parsed with the same section layout
        """
        # Arrange
        config_content = """
connection:
  server_url: https://fleet.example.com/api/v1/fleet
  api_token: yaml-token
"""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "fleetdm.yaml"
            config_path.write_text(config_content)

            # Act
            config = ConfigLoader.load_config(config_path)

        # Assert
        assert config.server_url == "https://fleet.example.com/api/v1/fleet"
        assert config.api_token == "yaml-token"
        assert config.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
        assert config.log_level == "INFO"

    def test_load_config_with_missing_file_raises_file_not_found_error(self):
        """
        Test that a missing configuration file raises FileNotFoundError
        """
        # Arrange
        missing_path = Path("/nonexistent/fleetdm.toml")

        # Act & Assert
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            ConfigLoader.load_config(missing_path)

    def test_load_config_with_invalid_toml_raises_configuration_error(self):
        """
        Test that malformed TOML raises ConfigurationError
        """
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "broken.toml"
            config_path.write_text("[connection\nserver_url = ")

            # Act & Assert
            with pytest.raises(ConfigurationError, match="Invalid TOML syntax"):
                ConfigLoader.load_config(config_path)

    def test_load_config_with_invalid_yaml_raises_configuration_error(self):
        """
        Test that malformed YAML raises ConfigurationError
        """
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "broken.yml"
            config_path.write_text("connection: [unclosed")

            # Act & Assert
            with pytest.raises(ConfigurationError, match="Invalid YAML syntax"):
                ConfigLoader.load_config(config_path)

    def test_from_mapping_with_non_string_token_raises_configuration_error(self):
        """
        Test that a non-string api_token is rejected
        """
        # Arrange
        config_data = {'connection': {'server_url': 'https://fleet.example.com', 'api_token': 12345}}

        # Act & Assert
        with pytest.raises(ConfigurationError, match="api_token"):
            ConfigLoader.from_mapping(config_data)

    def test_from_mapping_with_non_positive_timeout_raises_configuration_error(self):
        """
        Test that a zero timeout is rejected
        """
        # Arrange
        config_data = {'client': {'timeout_seconds': 0}}

        # Act & Assert
        with pytest.raises(ConfigurationError, match="timeout_seconds"):
            ConfigLoader.from_mapping(config_data)

    def test_from_mapping_with_unknown_log_level_raises_configuration_error(self):
        """
        Test that an unrecognised logging level is rejected at load time
        """
        # Arrange
        config_data = {'logging': {'level': 'verbose'}}

        # Act & Assert
        with pytest.raises(ConfigurationError, match="VERBOSE"):
            ConfigLoader.from_mapping(config_data)

    def test_from_mapping_with_empty_mapping_returns_defaults(self):
        """
        Test that an empty file leaves every setting at its default
        """
        # Act
        config = ConfigLoader.from_mapping({})

        # Assert
        assert config == ConnectionConfig()


class TestConfigResolution:
    """Test suite for environment fallbacks and required value validation"""

    def test_resolve_with_file_values_prefers_file_over_environment(self, monkeypatch):
        """
        Test that values from the configuration file win over environment variables
        """
        # Arrange
        monkeypatch.setenv('FLEETDM_URL', 'https://env.example.com')
        monkeypatch.setenv('FLEETDM_API_TOKEN', 'env-token')
        config = ConnectionConfig(server_url='https://file.example.com', api_token='file-token')

        # Act
        resolved = ConfigLoader.resolve(config)

        # Assert
        assert resolved.server_url == 'https://file.example.com'
        assert resolved.api_token == 'file-token'

    def test_resolve_with_empty_file_values_falls_back_to_environment(self, monkeypatch):
        """
        Test that FLEETDM_URL and FLEETDM_API_TOKEN fill in empty values
        """
        # Arrange
        monkeypatch.setenv('FLEETDM_URL', 'https://env.example.com')
        monkeypatch.setenv('FLEETDM_API_TOKEN', 'env-token')
        config = ConnectionConfig(server_url='', api_token=None, timeout_seconds=5.0)

        # Act
        resolved = ConfigLoader.resolve(config)

        # Assert
        assert resolved.server_url == 'https://env.example.com'
        assert resolved.api_token == 'env-token'
        assert resolved.timeout_seconds == 5.0

    def test_resolve_with_missing_server_url_raises_configuration_error(self, monkeypatch):
        """
        Test that a missing server URL names both the config key and the environment variable
        """
        # Arrange
        monkeypatch.delenv('FLEETDM_URL', raising=False)
        monkeypatch.setenv('FLEETDM_API_TOKEN', 'env-token')

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.resolve(ConnectionConfig())

        assert 'server_url' in str(exc_info.value)
        assert 'FLEETDM_URL' in str(exc_info.value)

    def test_resolve_with_missing_api_token_raises_configuration_error(self, monkeypatch):
        """
        Test that a missing API token names both the config key and the environment variable
        """
        # Arrange
        monkeypatch.delenv('FLEETDM_API_TOKEN', raising=False)
        config = ConnectionConfig(server_url='https://fleet.example.com')

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.resolve(config)

        assert 'api_token' in str(exc_info.value)
        assert 'FLEETDM_API_TOKEN' in str(exc_info.value)
