"""
Configuration management for EWP CLI.

Handles loading and managing configuration from files, environment variables,
and command-line options.
"""

from __future__ import annotations

import logging
import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', '1', 'yes', 'on')


@dataclass
class EwpCLIConfig:
    """Main configuration for EWP CLI."""

    # Exclusions applied by `add` when none are given
    default_exclusions: List[str] = field(default_factory=list)

    # Rewrite '/' to '\' in names passed to `add`
    convert_forward_slashes: bool = True

    # Let `add` insert a path that is already in the project
    allow_duplicates: bool = False

    # Keep a .bak copy of a project before overwriting it
    backup: bool = False

    log_level: str = "WARNING"


class ConfigManager:
    """Manages EWP CLI configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / '.ewp-cli'
        self.config_file = self.config_dir / 'config.yaml'
        self._config: Optional[EwpCLIConfig] = None

    def load_config(self) -> EwpCLIConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        # Start with defaults
        config = EwpCLIConfig()

        # Load from file if it exists
        if self.config_file.exists():
            file_config = self._load_from_file()
            config = self._merge_configs(config, file_config)

        # Override with environment variables
        env_config = self._load_from_env()
        config = self._merge_configs(config, env_config)

        self._config = config
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not load config file %s: %s", self.config_file, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring config file %s: expected a mapping", self.config_file)
            return {}
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        log_level = os.getenv('EWP_CLI_LOG_LEVEL')
        if log_level:
            env_config['log_level'] = log_level

        exclusions = os.getenv('EWP_CLI_DEFAULT_EXCLUSIONS')
        if exclusions:
            env_config['default_exclusions'] = [
                name.strip() for name in exclusions.split(',') if name.strip()
            ]

        # Boolean flags
        for option in ['convert_forward_slashes', 'allow_duplicates', 'backup']:
            env_var = f'EWP_CLI_{option.upper()}'
            value = os.getenv(env_var)
            if value:
                env_config[option] = value.lower() in TRUE_VALUES

        return env_config

    def _merge_configs(self, base: EwpCLIConfig, override: Dict[str, Any]) -> EwpCLIConfig:
        """Merge configuration dictionaries."""
        if 'default_exclusions' in override:
            exclusions = override['default_exclusions'] or []
            if isinstance(exclusions, str):
                exclusions = [exclusions]
            base.default_exclusions = [str(name) for name in exclusions]

        for option in ['convert_forward_slashes', 'allow_duplicates', 'backup']:
            if option in override:
                value = override[option]
                if isinstance(value, str):
                    value = value.lower() in TRUE_VALUES
                setattr(base, option, bool(value))

        if 'log_level' in override:
            base.log_level = str(override['log_level']).upper()

        return base

    def save_config(self, config: EwpCLIConfig) -> None:
        """Save configuration to file."""
        # Ensure config directory exists
        self.config_dir.mkdir(parents=True, exist_ok=True)

        config_dict = {
            'default_exclusions': config.default_exclusions,
            'convert_forward_slashes': config.convert_forward_slashes,
            'allow_duplicates': config.allow_duplicates,
            'backup': config.backup,
            'log_level': config.log_level,
        }

        with open(self.config_file, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)
        self._config = config

    def create_default_config(self) -> None:
        """Create a default configuration file."""
        self.save_config(EwpCLIConfig())
        logger.info("Created default configuration at %s", self.config_file)

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()

        return {
            'config_file': str(self.config_file),
            'config_exists': self.config_file.exists(),
            'default_exclusions': config.default_exclusions,
            'convert_forward_slashes': config.convert_forward_slashes,
            'allow_duplicates': config.allow_duplicates,
            'backup': config.backup,
            'log_level': config.log_level,
        }


# Global config manager instance
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def load_config() -> EwpCLIConfig:
    """Load the current configuration."""
    return get_config_manager().load_config()
