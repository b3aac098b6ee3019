"""
Git utilities for cl-parse.

Provides functions for reading from the local git repository,
used to enrich changelog entries with commit bodies and to find
the hosting provider of the repository via its origin remote.
"""

from __future__ import annotations

import re
import subprocess
from pathlib import Path

_SHA_PATTERN = re.compile(r"[0-9a-f]{40}")


class GitError(Exception):
    """Error from git operations."""

    pass


def is_valid_sha(value: str) -> bool:
    """Check that a string is a full, lowercase 40-character commit hash."""
    return _SHA_PATTERN.fullmatch(value) is not None


def is_repository(path: str | Path = ".") -> bool:
    """Check if the given path is inside a git repository.

    Args:
        path: Directory to check

    Returns:
        True if git recognises the path as a work tree or git dir
    """
    try:
        result = subprocess.run(
            ["git", "-C", str(path), "rev-parse", "--git-dir"],
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0
    except (OSError, FileNotFoundError):
        return False


def _strip_summary(message: str) -> str:
    """Drop the summary line and surrounding blank lines from a commit message."""
    lines = message.split("\n")[1:]
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines)


def get_commit_body(path: str | Path, sha: str) -> str:
    """Get the body of a commit message.

    The first line (summary) is removed, as are leading and trailing
    blank lines. Single-line commit messages yield an empty string.

    Args:
        path: Repository directory
        sha: Full commit hash

    Returns:
        Commit body text

    Raises:
        GitError: If the path is not a repository or the commit cannot be read

    Example:
        >>> get_commit_body(".", "8f5b75c6ba6c525e29463e2a96fec119e426e283")
        'Longer explanation of the change.\\n\\nCloses #12'
    """
    if not is_repository(path):
        raise GitError(f"Not a git repository: {path}")
    if not is_valid_sha(sha):
        raise GitError(f"Invalid commit hash: {sha}")

    try:
        result = subprocess.run(
            ["git", "-C", str(path), "show", "-s", "--format=%B", sha],
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip() or "unknown error"
        raise GitError(f"Failed to get commit {sha}: {stderr}") from e
    except (OSError, FileNotFoundError) as e:
        raise GitError(f"Failed to run git: {e}") from e

    return _strip_summary(result.stdout)


def get_origin_url(path: str | Path = ".") -> str:
    """Get the URL of the 'origin' remote.

    Args:
        path: Repository directory

    Returns:
        First configured URL of the origin remote

    Raises:
        GitError: If no origin remote is configured
    """
    try:
        result = subprocess.run(
            ["git", "-C", str(path), "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            check=False,
        )
    except (OSError, FileNotFoundError) as e:
        raise GitError(f"Failed to run git: {e}") from e

    url = result.stdout.strip().split("\n")[0] if result.returncode == 0 else ""
    if not url:
        raise GitError(f"No git remote 'origin' configured in {path}")
    return url
