"""
GitHub issue provider.

Resolves issue and pull request numbers through the GitHub REST API.
GitHub serves pull requests from the issues endpoint as well, so both
kinds of reference use the same URL.

API Endpoint:
- GET https://api.github.com/repos/{owner}/{repo}/issues/{number}
"""

from __future__ import annotations

from clparse.core.origin.base import fetch_json, register_provider
from clparse.core.origin.exceptions import OriginError
from clparse.core.origin.models import Issue, ItemKind, RemoteInfo

API_BASE_URL = "https://api.github.com"


@register_provider("github", hosts=("github.com",))
class GitHubProvider:
    """
    Issue provider for GitHub repositories.

    Example:
        >>> remote = RemoteInfo.from_remote_url("git@github.com:owner/repo.git")
        >>> provider = GitHubProvider(remote, token=None)
        >>> provider.issue_url(42)
        'https://api.github.com/repos/owner/repo/issues/42'
    """

    def __init__(self, remote: RemoteInfo, token: str | None = None) -> None:
        segments = remote.segments
        if len(segments) < 2:
            raise OriginError(
                f"cannot determine GitHub owner and repository from {remote.host}/{remote.path}"
            )
        self.owner = segments[0]
        self.repo = segments[1]
        self.token = token
        # www.github.com and ssh.github.com (port 443 ssh) share the public API
        self.api_base_url = API_BASE_URL

    @property
    def name(self) -> str:
        """Get the name of this provider."""
        return "github"

    def issue_url(self, number: int) -> str:
        """API URL for an issue or pull request."""
        return f"{self.api_base_url}/repos/{self.owner}/{self.repo}/issues/{number}"

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "cl-parse",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_issue(self, number: int, is_pull_request: bool = False) -> Issue | None:
        """
        Fetch an issue or pull request from GitHub.

        Args:
            number: Issue or pull request number
            is_pull_request: Whether the reference used the pull request marker

        Returns:
            Issue, or None if GitHub answered 404
        """
        data = fetch_json(self.issue_url(number), self._headers(), self.name)
        if data is None:
            return None

        # The issues endpoint marks pull requests with a "pull_request" key
        is_pr = is_pull_request or "pull_request" in data
        kind = ItemKind.PULL_REQUEST if is_pr else ItemKind.ISSUE
        raw_number = data.get("number", number)
        return Issue(
            kind=kind,
            number=int(raw_number) if isinstance(raw_number, (int, float)) else number,
            title=str(data.get("title") or ""),
            body=str(data.get("body") or ""),
        )
