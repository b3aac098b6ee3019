"""
Configuration models and loading.

Provides the Pydantic model for cl-parse settings with multi-layer
merging: defaults < user < project < env vars.
"""

from .env import load_layered_env
from .loader import (
    ConfigError,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import ClParseConfig

__all__ = [
    "ClParseConfig",
    "ConfigError",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_layered_env",
]
