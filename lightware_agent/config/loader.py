"""Configuration loader with YAML parsing and environment variable substitution."""

import yaml
import os
import re
from pathlib import Path
from typing import Any
from .models import AgentConfig


class ConfigLoader:
    """Load and validate agent configuration."""

    @staticmethod
    def load_from_file(config_path: str) -> AgentConfig:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            AgentConfig: Validated configuration object

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            pydantic.ValidationError: If configuration validation fails
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            return ConfigLoader.load_from_string(f.read())

    @staticmethod
    def load_from_string(text: str) -> AgentConfig:
        """
        Load configuration from YAML text.

        Args:
            text: YAML document

        Returns:
            AgentConfig: Validated configuration object
        """
        raw_config = yaml.safe_load(text) or {}

        # Device URLs commonly carry ${LIGHTWARE_PASSWORD} style placeholders
        raw_config = ConfigLoader._substitute_env_vars(raw_config)

        return AgentConfig(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """
        Recursively substitute ${ENV_VAR} placeholders with environment values.

        Args:
            obj: Object to process (str, dict, list, or primitive)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, str):
            pattern = r'\$\{(\w+)\}'
            return re.sub(pattern, lambda m: os.getenv(m.group(1), ''), obj)

        elif isinstance(obj, dict):
            return {k: ConfigLoader._substitute_env_vars(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [ConfigLoader._substitute_env_vars(item) for item in obj]

        return obj
