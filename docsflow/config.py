"""
Configuration management for docsflow.
"""

import copy
import os
import yaml
import toml
import json
from pathlib import Path
from typing import Dict, Any, List, Optional
from pydantic import BaseModel, Field, ValidationError

from .constants import CONFIG_FILES, DEFAULT_CONFIG
from .errors import ConfigurationError
from .utils import logger, merge_dicts

TRUTHY = {'1', 'true', 'yes', 'on'}


class DocsConfig(BaseModel):
    """Documentation generator configuration."""
    output_dir: str = Field(default="docs")
    git_revision: str = Field(default="master")
    external_plugins: List[str] = Field(default_factory=lambda: ["markdown-link-resolver"])
    plugin_root: Optional[str] = None


class PublishSettings(BaseModel):
    """Hosting branch publishing configuration."""
    enabled: bool = Field(default=False)
    user: str = Field(default="docsflow[bot]")
    email: str = Field(default="docsflow[bot]@users.noreply.github.com")
    message: str = Field(default="docs: update documentation [skip ci]")
    branch: str = Field(default="gh-pages")
    dotfiles: bool = Field(default=True)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO")


class DocsflowConfig(BaseModel):
    """Main configuration model."""
    docs: DocsConfig = Field(default_factory=DocsConfig)
    publish: PublishSettings = Field(default_factory=PublishSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class Config:
    """Configuration manager for docsflow."""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file
        self.config_data = self._load_config()
        self._apply_environment_overrides()
        self.config = self._build(self.config_data)

    @staticmethod
    def _build(config_data: Dict[str, Any]) -> DocsflowConfig:
        try:
            return DocsflowConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def _find_config_file(self) -> Optional[Path]:
        """Find configuration file in current directory or parent directories."""
        current_dir = Path.cwd()

        for parent in [current_dir] + list(current_dir.parents):
            for config_name in CONFIG_FILES:
                config_path = parent / config_name
                if config_path.exists():
                    logger.debug(f"Found config file: {config_path}")
                    return config_path

        return None

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file."""
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_file:
            config_path = Path(self.config_file)
        else:
            config_path = self._find_config_file()

        if not config_path or not config_path.exists():
            logger.debug("No config file found, using defaults")
            return config

        try:
            with open(config_path, 'r') as f:
                if config_path.suffix in ['.yaml', '.yml']:
                    file_config = yaml.safe_load(f) or {}
                elif config_path.suffix == '.toml':
                    file_config = toml.load(f)
                elif config_path.suffix == '.json':
                    file_config = json.load(f)
                else:
                    logger.warning(f"Unknown config file format: {config_path}")
                    return config
        except (yaml.YAMLError, toml.TomlDecodeError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot parse config file {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        config = merge_dicts(config, file_config)
        logger.debug(f"Loaded config from: {config_path}")

        return config

    def _apply_environment_overrides(self):
        """Apply environment variable overrides to the raw configuration."""
        log_level = os.getenv('DOCSFLOW_LOG_LEVEL')
        if log_level:
            self.config_data.setdefault('logging', {})['level'] = log_level

        publish = os.getenv('DOCSFLOW_PUBLISH')
        if publish is not None and publish.strip():
            enabled = publish.strip().lower() in TRUTHY
            self.config_data.setdefault('publish', {})['enabled'] = enabled

    def set(self, key: str, value: Any):
        """Set configuration value by dot-notation key."""
        keys = key.split('.')
        config_dict = self.config_data

        for k in keys[:-1]:
            if k not in config_dict:
                config_dict[k] = {}
            config_dict = config_dict[k]

        config_dict[keys[-1]] = value

        self.config = self._build(self.config_data)

    def merge_cli_options(self, cli_options: Dict[str, Any]) -> 'Config':
        """Merge command-line options with configuration.

        Args:
            cli_options: Dotted keys mapped to CLI values; ``None`` values are ignored

        Returns:
            Updated Config instance
        """
        for key, value in cli_options.items():
            if value is not None:
                self.set(key, value)

        return self
