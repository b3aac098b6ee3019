"""
Issue providers for cl-parse.

Resolves issue and pull request numbers referenced in a changelog
against the repository's hosting provider (GitHub, GitLab, Azure DevOps).
Importing this package registers all built-in providers.
"""

from clparse.core.origin import azuredevops, github, gitlab  # noqa: F401
from clparse.core.origin.base import IssueProvider, get_provider, list_providers
from clparse.core.origin.exceptions import (
    NetworkError,
    OriginError,
    ProviderHTTPError,
    ResponseParseError,
    UnsupportedProviderError,
)
from clparse.core.origin.models import Issue, ItemKind, RemoteInfo

__all__ = [
    "get_provider",
    "list_providers",
    "Issue",
    "IssueProvider",
    "ItemKind",
    "NetworkError",
    "OriginError",
    "ProviderHTTPError",
    "RemoteInfo",
    "ResponseParseError",
    "UnsupportedProviderError",
]
