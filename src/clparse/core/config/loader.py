"""
Settings resolution for cl-parse.

Each layer overrides the one before it:
    defaults < ~/.config/cl-parse/config.json < .cl-parse.json < CL_PARSE_* variables

CLI flags are applied on top of the result by the command itself.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import ClParseConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".cl-parse.json"

# Environment variable -> config field
ENV_OVERRIDES = {
    "CL_PARSE_CHANGELOG": "changelog",
    "CL_PARSE_FORMAT": "format",
    "CL_PARSE_INCLUDE_BODY": "include_body",
    "CL_PARSE_FETCH_ITEM_DETAILS": "fetch_item_details",
    "CL_PARSE_TOKEN": "token",
}

_BOOL_FIELDS = {"include_body", "fetch_item_details"}


class ConfigError(Exception):
    """Raised when the merged configuration is invalid."""

    pass


def get_xdg_config_home() -> Path:
    """Base directory for user config files ($XDG_CONFIG_HOME or ~/.config)."""
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """Get path to ~/.config/cl-parse/config.json (or XDG equivalent)."""
    return get_xdg_config_home() / "cl-parse" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """Get path to .cl-parse.json in the given directory (defaults to cwd)."""
    if cwd is None:
        cwd = Path.cwd()
    return cwd / PROJECT_CONFIG_NAME


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Read a config file.

    Missing files are silently skipped; unreadable or non-object files are
    skipped with a warning.

    Returns:
        The JSON object, or None
    """
    if not path.is_file():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config at {path}: expected a JSON object")
        return None
    return data


def _without_token(config: dict[str, Any], path: Path) -> dict[str, Any]:
    if "token" in config:
        logger.warning(f"Ignoring 'token' in {path}: set CL_PARSE_TOKEN instead")
        config = {k: v for k, v in config.items() if k != "token"}
    return config


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Overlay CL_PARSE_* variables on a config dict.

    Boolean variables are false for "false", "0", "no" and "off" and true
    otherwise. Empty variables are ignored.

    Variables:
        CL_PARSE_CHANGELOG - overrides changelog
        CL_PARSE_FORMAT - overrides format
        CL_PARSE_INCLUDE_BODY - overrides include_body
        CL_PARSE_FETCH_ITEM_DETAILS - overrides fetch_item_details
        CL_PARSE_TOKEN - sets token

    Returns:
        A new dict; config_dict is not modified
    """
    result = config_dict.copy()
    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        if field_name in _BOOL_FIELDS:
            result[field_name] = value.lower() not in ("false", "0", "no", "off")
        else:
            result[field_name] = value
    return result


def load_config(project_dir: Path | None = None) -> ClParseConfig:
    """
    Resolve the settings for a run.

    Precedence (highest to lowest):
        1. Environment variables (CL_PARSE_*)
        2. Project config (.cl-parse.json)
        3. User config (~/.config/cl-parse/config.json)
        4. Defaults

    Args:
        project_dir: Project directory to load .cl-parse.json from (defaults to cwd)

    Returns:
        Validated ClParseConfig instance

    Raises:
        ConfigError: If the merged config fails validation
    """
    merged: dict[str, Any] = {}

    user_config_path = get_user_config_path()
    if user_config := load_json_file(user_config_path):
        merged.update(_without_token(user_config, user_config_path))

    project_config_path = get_project_config_path(project_dir)
    if project_config := load_json_file(project_config_path):
        merged.update(_without_token(project_config, project_config_path))

    merged = apply_env_overrides(merged)

    try:
        return ClParseConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
