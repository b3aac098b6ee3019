"""
Issue provider protocol and registry.

This module defines the IssueProvider protocol that all hosting
providers implement, and a registry that selects one provider for a
repository by inspecting the host of its remote URL.

- IssueProvider is a runtime_checkable Protocol
- Providers are registered with a decorator, together with the hosts they serve
- get_provider() is the single selection point; it runs once per parse
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import httpx

from clparse.core.origin.exceptions import (
    NetworkError,
    ProviderHTTPError,
    ResponseParseError,
    UnsupportedProviderError,
)
from clparse.core.origin.models import Issue, RemoteInfo

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@runtime_checkable
class IssueProvider(Protocol):
    """
    Protocol for issue provider implementations.

    Providers are constructed with the parsed remote and an optional
    access token, and resolve bare issue or pull request numbers.
    """

    @property
    def name(self) -> str:
        """
        Get the name of this provider.

        Returns:
            Provider name (e.g., 'github', 'gitlab', 'azuredevops')
        """
        ...

    def get_issue(self, number: int, is_pull_request: bool = False) -> Issue | None:
        """
        Fetch an issue or pull request.

        Args:
            number: Issue or pull request number
            is_pull_request: Whether the reference used the pull request marker

        Returns:
            Issue, or None if the provider answered 404

        Raises:
            OriginError: On transport errors or unexpected responses
        """
        ...


ProviderClass = Callable[[RemoteInfo, str | None], IssueProvider]

# Provider registry: name -> (hosts, class)
_providers: dict[str, tuple[tuple[str, ...], ProviderClass]] = {}


def register_provider(
    name: str, hosts: tuple[str, ...]
) -> Callable[[ProviderClass], ProviderClass]:
    """
    Decorator to register an issue provider implementation.

    Usage:
        @register_provider("github", hosts=("github.com",))
        class GitHubProvider:
            ...

    Args:
        name: Provider name
        hosts: Host names served by the provider; subdomains match too

    Returns:
        Decorator function

    Raises:
        ValueError: If provider name is already registered
    """

    def decorator(provider_class: ProviderClass) -> ProviderClass:
        if name in _providers:
            raise ValueError(
                f"Provider '{name}' is already registered. "
                f"Available providers: {', '.join(_providers.keys())}"
            )
        _providers[name] = (hosts, provider_class)
        return provider_class

    return decorator


def _host_matches(host: str, candidates: tuple[str, ...]) -> bool:
    return any(host == candidate or host.endswith("." + candidate) for candidate in candidates)


def get_provider(url: str, token: str | None = None) -> IssueProvider:
    """
    Select and instantiate the provider for a repository URL.

    Args:
        url: Repository remote URL (HTTPS, ssh:// or scp-like)
        token: Optional access token

    Returns:
        IssueProvider instance

    Raises:
        UnsupportedProviderError: If the URL cannot be parsed or no provider serves its host
    """
    remote = RemoteInfo.from_remote_url(url)
    if remote is None:
        raise UnsupportedProviderError(url)

    for name, (hosts, provider_class) in _providers.items():
        if _host_matches(remote.host, hosts):
            logger.debug(f"Using {name} provider for {remote.host}")
            return provider_class(remote, token)

    raise UnsupportedProviderError(url)


def list_providers() -> list[str]:
    """
    List all registered provider names.

    Returns:
        List of provider names in alphabetical order
    """
    return sorted(_providers.keys())


def fetch_json(url: str, headers: dict[str, str], source: str) -> dict[str, Any] | None:
    """
    Perform one GET request and decode the JSON object it returns.

    Args:
        url: Request URL
        headers: Request headers
        source: Provider name, for error messages

    Returns:
        Decoded JSON object, or None for a 404 response

    Raises:
        NetworkError: If the request could not be completed
        ProviderHTTPError: If the response status is neither 200 nor 404
        ResponseParseError: If the body is not a JSON object
    """
    try:
        response = httpx.get(
            url, headers=headers, timeout=DEFAULT_TIMEOUT, follow_redirects=True
        )
    except httpx.HTTPError as e:
        raise NetworkError(source, f"failed to get issue details: {e}", url=url) from e

    if response.status_code == 404:
        logger.debug(f"{source}: {url} not found")
        return None
    if response.status_code != 200:
        raise ProviderHTTPError(source, response.status_code, url)

    try:
        data = response.json()
    except ValueError as e:
        raise ResponseParseError(source, f"failed to decode response: {e}", url=url) from e

    if not isinstance(data, dict):
        raise ResponseParseError(
            source, f"expected JSON object, got {type(data).__name__}", url=url
        )
    return data
