"""
GitLab issue provider.

Resolves issue and merge request numbers through the GitLab REST API.
The project is addressed by its URL-escaped, namespaced path.

API Endpoints:
- Issue: GET https://gitlab.com/api/v4/projects/{project}/issues/{iid}
- Merge request: GET https://gitlab.com/api/v4/projects/{project}/merge_requests/{iid}
"""

from __future__ import annotations

from urllib.parse import quote

from clparse.core.origin.base import fetch_json, register_provider
from clparse.core.origin.exceptions import OriginError
from clparse.core.origin.models import Issue, ItemKind, RemoteInfo

API_BASE_URL = "https://gitlab.com/api/v4"


@register_provider("gitlab", hosts=("gitlab.com",))
class GitLabProvider:
    """Issue provider for GitLab repositories, including nested groups."""

    def __init__(self, remote: RemoteInfo, token: str | None = None) -> None:
        if len(remote.segments) < 2:
            raise OriginError(f"cannot determine GitLab project from {remote.host}/{remote.path}")
        self.project = "/".join(remote.segments)
        self.token = token

    @property
    def name(self) -> str:
        """Get the name of this provider."""
        return "gitlab"

    def issue_url(self, number: int, is_pull_request: bool = False) -> str:
        """API URL for an issue, or a merge request when is_pull_request is set."""
        collection = "merge_requests" if is_pull_request else "issues"
        project = quote(self.project, safe="")
        return f"{API_BASE_URL}/projects/{project}/{collection}/{number}"

    def get_issue(self, number: int, is_pull_request: bool = False) -> Issue | None:
        """
        Fetch an issue or merge request from GitLab.

        Args:
            number: Project-scoped issue or merge request iid
            is_pull_request: Fetch a merge request instead of an issue

        Returns:
            Issue, or None if GitLab answered 404
        """
        headers = {"PRIVATE-TOKEN": self.token} if self.token else {}
        data = fetch_json(self.issue_url(number, is_pull_request), headers, self.name)
        if data is None:
            return None

        iid = data.get("iid", number)
        return Issue(
            kind=ItemKind.PULL_REQUEST if is_pull_request else ItemKind.ISSUE,
            number=int(iid) if isinstance(iid, (int, float)) else number,
            title=str(data.get("title") or ""),
            body=str(data.get("description") or ""),
        )
