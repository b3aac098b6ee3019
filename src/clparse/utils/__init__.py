"""Utility modules for cl-parse."""

from .git import GitError, get_commit_body, get_origin_url, is_repository, is_valid_sha

__all__ = [
    "get_commit_body",
    "get_origin_url",
    "is_repository",
    "is_valid_sha",
    "GitError",
]
