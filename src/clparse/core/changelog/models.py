"""
Changelog data models.

Defines Pydantic models for parsed releases, their changes, and the
issues or pull requests each change references.

Serialized field names are camelCase (compareUrl, commitBody,
relatedItems); Python attribute names are snake_case.
"""

from __future__ import annotations

from datetime import date as Date

from pydantic import BaseModel, ConfigDict, Field

from clparse.core.changelog.exceptions import EntryNotFoundError
from clparse.core.origin.models import Issue, ItemKind


class RelatedItem(BaseModel):
    """
    An issue or pull request referenced by a change.

    A bare reference carries only kind and number. A resolved reference
    also carries the title and body fetched from the provider.
    """

    kind: ItemKind = Field(default=ItemKind.ISSUE, description="Issue or pull request")
    number: int = Field(..., ge=1, description="Issue or pull request number")
    title: str | None = Field(default=None, description="Title, when resolved")
    body: str | None = Field(default=None, description="Body, when resolved")

    @property
    def is_resolved(self) -> bool:
        """Check if provider details were attached."""
        return self.title is not None

    @property
    def is_pull_request(self) -> bool:
        """Check if the reference is a pull or merge request."""
        return self.kind == ItemKind.PULL_REQUEST

    @property
    def marker(self) -> str:
        """Reference as written in a changelog (#12 or !12)."""
        prefix = "!" if self.is_pull_request else "#"
        return f"{prefix}{self.number}"

    @property
    def key(self) -> tuple[ItemKind, int]:
        """Identity used for de-duplication."""
        return (self.kind, self.number)

    @classmethod
    def from_issue(cls, issue: Issue) -> RelatedItem:
        """Create a resolved item from provider data."""
        return cls(kind=issue.kind, number=issue.number, title=issue.title, body=issue.body)


class Change(BaseModel):
    """A single bullet under a changelog section."""

    model_config = ConfigDict(populate_by_name=True)

    scope: str = Field(default="", description="Bold scope prefix, e.g. 'api'")
    description: str = Field(..., description="Change description without trailing links")
    commit: str = Field(default="", description="Full commit hash from a trailing commit link")
    commit_body: str = Field(
        default="", alias="commitBody", description="Commit message body, when enriched"
    )
    related_items: list[RelatedItem] = Field(
        default_factory=list,
        alias="relatedItems",
        description="Referenced issues and pull requests, first-seen order",
    )


class ReleaseEntry(BaseModel):
    """One version section of a changelog."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(..., description="Version without leading 'v'")
    date: Date = Field(..., description="Release date")
    compare_url: str = Field(
        default="", alias="compareUrl", description="Link to the diff with the previous version"
    )
    changes: dict[str, list[Change]] = Field(
        default_factory=dict, description="Changes by section, in order of first appearance"
    )

    @property
    def change_count(self) -> int:
        """Total number of changes across all sections."""
        return sum(len(changes) for changes in self.changes.values())

    def add_change(self, section: str, change: Change) -> None:
        """Append a change to a section, creating the section on first use."""
        self.changes.setdefault(section, []).append(change)


class Changelog(BaseModel):
    """
    Result of parsing a changelog document.

    Entries are kept in document order, which by convention lists the
    newest release first.

    Example:
        >>> changelog = ChangelogParser().parse(text)
        >>> changelog.get_latest().version
        '2.0.0'
        >>> changelog.get_version("1.0.0").date
        datetime.date(2025, 1, 1)
    """

    entries: list[ReleaseEntry] = Field(default_factory=list)

    @property
    def versions(self) -> list[str]:
        """Versions in document order."""
        return [entry.version for entry in self.entries]

    def get_latest(self) -> ReleaseEntry:
        """
        Get the first entry in document order.

        Raises:
            EntryNotFoundError: If the changelog has no entries
        """
        if not self.entries:
            raise EntryNotFoundError("no changelog entries found")
        return self.entries[0]

    def get_version(self, version: str) -> ReleaseEntry:
        """
        Find the entry for an exact version string.

        A leading 'v' on the requested version is ignored, since entries
        store versions without it.

        Raises:
            EntryNotFoundError: If no entry has that version
        """
        wanted = version[1:] if version.startswith("v") else version
        for entry in self.entries:
            if entry.version == wanted:
                return entry
        raise EntryNotFoundError(f"version {version} not found", version=version)
