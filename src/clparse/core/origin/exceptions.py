"""
Exceptions for issue providers.

Exception Hierarchy:
    OriginError (base)
    ├── UnsupportedProviderError (no provider for the remote host)
    ├── NetworkError (transport failures)
    ├── ProviderHTTPError (unexpected HTTP status)
    └── ResponseParseError (undecodable response body)

A 404 from a provider is not an error: providers return None instead.
"""


class OriginError(Exception):
    """
    Base exception for all issue provider errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class UnsupportedProviderError(OriginError):
    """Raised when no provider is registered for a repository URL's host."""

    def __init__(self, url: str) -> None:
        super().__init__(f"unsupported git provider for URL: {url}", url=url)
        self.url = url


class NetworkError(OriginError):
    """
    Raised when a request to a provider cannot be completed.

    Attributes:
        source: Provider name (e.g., "github")
    """

    def __init__(self, source: str, message: str, **context: object) -> None:
        super().__init__(f"{source}: {message}", source=source, **context)
        self.source = source


class ProviderHTTPError(OriginError):
    """
    Raised when a provider answers with a status other than 200 or 404.

    Attributes:
        source: Provider name
        status_code: HTTP status code of the response
    """

    def __init__(self, source: str, status_code: int, url: str) -> None:
        super().__init__(
            f"{source}: failed to get issue details: HTTP {status_code} from {url}",
            source=source,
            status_code=status_code,
            url=url,
        )
        self.source = source
        self.status_code = status_code


class ResponseParseError(OriginError):
    """Raised when a provider response body cannot be decoded."""

    def __init__(self, source: str, message: str, **context: object) -> None:
        super().__init__(f"{source}: {message}", source=source, **context)
        self.source = source
