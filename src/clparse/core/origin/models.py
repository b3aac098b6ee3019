"""
Issue provider data models.

Defines Pydantic models for issues fetched from a provider and for
repository remotes parsed from git URLs.
"""

from __future__ import annotations

import re
from enum import Enum
from urllib.parse import urlsplit

from pydantic import BaseModel, Field

# scp-like syntax: [user@]host:path (no scheme)
_SCP_PATTERN = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>.+)$")


class ItemKind(str, Enum):
    """Kind of item referenced from a changelog line."""

    ISSUE = "issue"
    PULL_REQUEST = "pull_request"


class Issue(BaseModel):
    """
    An issue, work item, or pull/merge request from a provider.

    Normalized across providers: ``kind`` and ``number`` identify the
    item, regardless of how the provider names its id field.
    """

    kind: ItemKind = Field(default=ItemKind.ISSUE, description="Issue or pull request")
    number: int = Field(..., description="Issue or pull request number")
    title: str = Field(default="", description="Title")
    body: str = Field(default="", description="Body or description (plain text)")


class RemoteInfo(BaseModel):
    """
    Host and path of a git remote.

    Example:
        >>> RemoteInfo.from_remote_url("git@github.com:user/repo.git")
        RemoteInfo(host='github.com', path='user/repo')
        >>> RemoteInfo.from_remote_url("https://org@dev.azure.com/org/proj/_git/repo")
        RemoteInfo(host='dev.azure.com', path='org/proj/_git/repo')
    """

    host: str = Field(..., description="Lowercase host name")
    path: str = Field(..., description="Repository path without leading slash or .git")

    @property
    def segments(self) -> list[str]:
        """Path split into its non-empty segments."""
        return [part for part in self.path.split("/") if part]

    @classmethod
    def from_remote_url(cls, remote_url: str) -> RemoteInfo | None:
        """
        Parse a git remote URL.

        Handles formats:
        - https://host/owner/repo(.git)
        - ssh://git@host[:port]/owner/repo(.git)
        - git@host:owner/repo(.git)

        Args:
            remote_url: Git remote URL

        Returns:
            RemoteInfo or None if the URL cannot be parsed
        """
        remote_url = remote_url.strip() if remote_url else ""
        if not remote_url:
            return None

        if "://" in remote_url:
            parts = urlsplit(remote_url)
            host = parts.hostname or ""
            path = parts.path
        else:
            scp_match = _SCP_PATTERN.match(remote_url)
            if not scp_match:
                return None
            host = scp_match.group("host")
            path = scp_match.group("path")

        path = path.strip("/")
        if path.endswith(".git"):
            path = path[: -len(".git")]
        if not host or not path:
            return None

        return cls(host=host.lower(), path=path)
