"""Environment loading helpers.

CL_PARSE_* overrides and the provider token may be kept in .env files
instead of the shell. Files are read in increasing precedence:

    user .env (~/.config/cl-parse/.env) < project .env < project .env.local

A variable already exported in the process environment always wins.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values


def _read_env(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    return {str(k): str(v) for k, v in dotenv_values(path).items() if k and v is not None}


def default_user_env_paths() -> list[Path]:
    """User-level .env file under the XDG config home."""
    xdg_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return [Path(xdg_home) / "cl-parse" / ".env"]


def default_project_env_paths(project_dir: Path) -> list[Path]:
    """Project-level .env files, lowest precedence first."""
    return [project_dir / ".env", project_dir / ".env.local"]


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> set[str]:
    """Export variables from user and project .env files.

    Args:
        project_dir: base directory for project env paths (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths

    Returns:
        Names of the variables that were set from .env files
    """
    if user_env_paths is None:
        user_env_paths = default_user_env_paths()
    if project_env_paths is None:
        project_env_paths = default_project_env_paths(project_dir or Path.cwd())

    # Later files override earlier ones; the OS environment is frozen first
    exported = set(os.environ)
    values: dict[str, str] = {}
    for path in [*user_env_paths, *project_env_paths]:
        values.update(_read_env(Path(path)))

    loaded = {name for name in values if name not in exported}
    for name in loaded:
        os.environ[name] = values[name]
    return loaded
