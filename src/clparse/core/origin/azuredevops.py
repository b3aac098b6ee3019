"""
Azure DevOps issue provider.

Resolves work items and pull requests through the Azure DevOps REST API.
Both are addressed at organization level. Authentication uses a
personal access token as the password of an empty Basic-auth user.

API Endpoints:
- Work item: GET https://dev.azure.com/{org}/_apis/wit/workitems/{id}?api-version=7.1
- Pull request: GET https://dev.azure.com/{org}/_apis/git/pullrequests/{id}?api-version=7.1

Work item descriptions are HTML; they are reduced to plain text.
"""

from __future__ import annotations

import base64
import html
import re
from typing import Any

from clparse.core.origin.base import fetch_json, register_provider
from clparse.core.origin.exceptions import OriginError
from clparse.core.origin.models import Issue, ItemKind, RemoteInfo

API_VERSION = "7.1"

_TAG_PATTERN = re.compile(r"<[^>]*>")


def clean_description(description: str) -> str:
    """Strip HTML tags and entities from a description."""
    return html.unescape(_TAG_PATTERN.sub("", description)).strip()


def _organization(remote: RemoteInfo) -> str:
    segments = remote.segments
    # ssh remotes: git@ssh.dev.azure.com:v3/{org}/{project}/{repo}
    if segments and segments[0] == "v3":
        segments = segments[1:]
    return segments[0] if segments else ""


@register_provider("azuredevops", hosts=("dev.azure.com",))
class AzureDevOpsProvider:
    """Issue provider for Azure DevOps repositories."""

    def __init__(self, remote: RemoteInfo, token: str | None = None) -> None:
        self.org = _organization(remote)
        if not self.org:
            raise OriginError(
                f"cannot determine Azure DevOps organization from {remote.host}/{remote.path}"
            )
        self.token = token

    @property
    def name(self) -> str:
        """Get the name of this provider."""
        return "azuredevops"

    def issue_url(self, number: int, is_pull_request: bool = False) -> str:
        """API URL for a work item, or a pull request when is_pull_request is set."""
        resource = "git/pullrequests" if is_pull_request else "wit/workitems"
        base = f"https://dev.azure.com/{self.org}/_apis/{resource}/{number}"
        return f"{base}?api-version={API_VERSION}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            encoded = base64.b64encode(f":{self.token}".encode()).decode()
            headers["Authorization"] = f"Basic {encoded}"
        return headers

    def get_issue(self, number: int, is_pull_request: bool = False) -> Issue | None:
        """
        Fetch a work item or pull request from Azure DevOps.

        Args:
            number: Work item or pull request id
            is_pull_request: Fetch a pull request instead of a work item

        Returns:
            Issue, or None if Azure DevOps answered 404
        """
        data = fetch_json(self.issue_url(number, is_pull_request), self._headers(), self.name)
        if data is None:
            return None
        if is_pull_request:
            return self._pull_request_from_api(data, number)
        return self._work_item_from_api(data, number)

    @staticmethod
    def _work_item_from_api(data: dict[str, Any], number: int) -> Issue:
        fields = data.get("fields")
        if not isinstance(fields, dict):
            fields = {}
        item_id = data.get("id", number)
        return Issue(
            kind=ItemKind.ISSUE,
            number=int(item_id) if isinstance(item_id, (int, float)) else number,
            title=str(fields.get("System.Title") or ""),
            body=clean_description(str(fields.get("System.Description") or "")),
        )

    @staticmethod
    def _pull_request_from_api(data: dict[str, Any], number: int) -> Issue:
        pr_id = data.get("pullRequestId", number)
        return Issue(
            kind=ItemKind.PULL_REQUEST,
            number=int(pr_id) if isinstance(pr_id, (int, float)) else number,
            title=str(data.get("title") or ""),
            body=clean_description(str(data.get("description") or "")),
        )
