"""
Centralized configuration manager to avoid multiple Config instances.
"""
import os
from typing import Optional

from core.config import Config

CONFIG_ENV_VAR = 'CSVJOIN_CONFIG'
DEFAULT_CONFIG_FILE = 'csvjoin.toml'

# Global config instance - loaded once
_config_instance = None


def resolve_config_path(explicit_path: Optional[str] = None) -> Optional[str]:
    """
    Pick the configuration file to load.

    An explicit path wins, then the CSVJOIN_CONFIG environment variable,
    then csvjoin.toml in the working directory if it exists. Returns None
    when no file applies and defaults should be used.
    """
    if explicit_path:
        return explicit_path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path
    if os.path.isfile(DEFAULT_CONFIG_FILE):
        return DEFAULT_CONFIG_FILE
    return None


def get_config(config_file: Optional[str] = None) -> Config:
    """Get the global config instance, creating it only once."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_file_path=resolve_config_path(config_file))
    return _config_instance


def refresh_config(config_file: Optional[str] = None) -> Config:
    """Force a refresh of the global config instance."""
    global _config_instance
    _config_instance = None
    return get_config(config_file)
