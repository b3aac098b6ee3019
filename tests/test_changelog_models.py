"""
Tests for changelog models, release filters and output rendering.
"""

import json
from datetime import date, datetime, timezone

import pytest
import yaml

try:
    import tomllib  # type: ignore[import-not-found]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found]

from clparse.core.changelog import (
    Change,
    Changelog,
    ChangelogParser,
    EntryNotFoundError,
    OutputFormat,
    RelatedItem,
    ReleaseEntry,
    ScopeOptionError,
    filter_entries,
    render,
    validate_scope_options,
)
from clparse.core.origin import Issue, ItemKind


def make_entry(version: str, released: date) -> ReleaseEntry:
    return ReleaseEntry(version=version, date=released)


class TestRelatedItem:
    """Tests for RelatedItem model."""

    def test_bare_issue(self) -> None:
        item = RelatedItem(number=12)
        assert item.kind == ItemKind.ISSUE
        assert item.marker == "#12"
        assert not item.is_resolved
        assert not item.is_pull_request

    def test_pull_request_marker(self) -> None:
        item = RelatedItem(kind=ItemKind.PULL_REQUEST, number=5)
        assert item.marker == "!5"
        assert item.key == (ItemKind.PULL_REQUEST, 5)

    def test_from_issue(self) -> None:
        item = RelatedItem.from_issue(Issue(number=3, title="Bug", body=""))
        assert item.is_resolved
        assert item.title == "Bug"
        assert item.body == ""

    def test_number_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            RelatedItem(number=0)


class TestReleaseEntry:
    """Tests for ReleaseEntry model."""

    def test_add_change_keeps_section_order(self) -> None:
        entry = make_entry("1.0.0", date(2025, 1, 1))
        entry.add_change("Features", Change(description="a"))
        entry.add_change("Bug Fixes", Change(description="b"))
        entry.add_change("Features", Change(description="c"))

        assert list(entry.changes) == ["Features", "Bug Fixes"]
        assert [c.description for c in entry.changes["Features"]] == ["a", "c"]
        assert entry.change_count == 3

    def test_populate_by_alias(self) -> None:
        entry = ReleaseEntry(version="1.0.0", date=date(2025, 1, 1), compareUrl="https://x")
        assert entry.compare_url == "https://x"


class TestChangelogLookups:
    """Tests for Changelog.get_latest and Changelog.get_version."""

    def test_get_latest_is_first_entry(self, sample_changelog: str) -> None:
        changelog = ChangelogParser().parse(sample_changelog)
        assert changelog.get_latest().version == "2.0.0"

    def test_get_latest_ignores_version_order(self) -> None:
        content = "## 1.0.0 (2025-03-01)\n## 2.0.0 (2025-01-01)\n"
        assert ChangelogParser().parse(content).get_latest().version == "1.0.0"

    def test_get_version(self, sample_changelog: str) -> None:
        changelog = ChangelogParser().parse(sample_changelog)
        assert changelog.get_version("1.0.0").date == date(2025, 1, 1)
        assert changelog.get_version("v1.0.0").version == "1.0.0"

    def test_get_version_missing(self, sample_changelog: str) -> None:
        changelog = ChangelogParser().parse(sample_changelog)
        with pytest.raises(EntryNotFoundError, match="version 9.9.9 not found"):
            changelog.get_version("9.9.9")

    def test_empty_changelog(self) -> None:
        changelog = ChangelogParser().parse("# Changelog\n")
        assert changelog == Changelog()
        with pytest.raises(EntryNotFoundError, match="no changelog entries found"):
            changelog.get_latest()
        with pytest.raises(EntryNotFoundError):
            changelog.get_version("1.0.0")


class TestFilterEntries:
    """Tests for filter_entries function."""

    ENTRIES = [
        make_entry("3.0.0", date(2025, 3, 10)),
        make_entry("2.0.0", date(2025, 3, 1)),
        make_entry("1.0.0", date(2025, 1, 1)),
    ]
    NOW = datetime(2025, 3, 11, 8, 30, tzinfo=timezone.utc)

    def test_no_filters(self) -> None:
        assert filter_entries(self.ENTRIES) == self.ENTRIES

    def test_last(self) -> None:
        assert [e.version for e in filter_entries(self.ENTRIES, last=2)] == ["3.0.0", "2.0.0"]

    def test_last_larger_than_entries(self) -> None:
        assert filter_entries(self.ENTRIES, last=10) == self.ENTRIES

    def test_since_days_includes_cutoff_day(self) -> None:
        result = filter_entries(self.ENTRIES, since_days=10, now=self.NOW)
        assert [e.version for e in result] == ["3.0.0", "2.0.0"]

    def test_since_days_excludes_older(self) -> None:
        result = filter_entries(self.ENTRIES, since_days=1, now=self.NOW)
        assert [e.version for e in result] == ["3.0.0"]


class TestValidateScopeOptions:
    """Tests for validate_scope_options function."""

    def test_valid_combinations(self) -> None:
        validate_scope_options()
        validate_scope_options(latest=True)
        validate_scope_options(release="1.0.0")
        validate_scope_options(last=2)
        validate_scope_options(since_days=7)

    @pytest.mark.parametrize(
        "kwargs,message",
        [
            ({"latest": True, "release": "1.0.0"}, "--latest cannot be combined"),
            ({"latest": True, "last": 1}, "--latest cannot be combined"),
            ({"release": "1.0.0", "since_days": 3}, "--release cannot be combined"),
            ({"last": 1, "since_days": 3}, "--last cannot be combined"),
            ({"last": -1}, "must be positive integers"),
        ],
    )
    def test_conflicts(self, kwargs: dict, message: str) -> None:
        with pytest.raises(ScopeOptionError, match=message):
            validate_scope_options(**kwargs)


class TestRender:
    """Tests for JSON, YAML and TOML rendering."""

    def test_json_entry(self, sample_changelog: str) -> None:
        entry = ChangelogParser().parse(sample_changelog).get_latest()

        data = json.loads(render(entry, OutputFormat.JSON))

        assert list(data) == ["version", "date", "compareUrl", "changes"]
        assert data["version"] == "2.0.0"
        assert data["date"] == "2025-02-01"
        assert list(data["changes"]) == ["⚠ BREAKING CHANGES", "Features", "Bug Fixes"]
        assert data["changes"]["Features"][0] == {
            "scope": "api",
            "description": "add new endpoint",
            "relatedItems": [{"kind": "issue", "number": 123}],
        }
        assert data["changes"]["Features"][1]["commit"].startswith("8f5b75c")
        assert "commitBody" not in data["changes"]["Features"][1]

    def test_non_ascii_is_kept(self, sample_changelog: str) -> None:
        output = render(ChangelogParser().parse(sample_changelog).get_latest(), "json")
        assert "⚠ BREAKING CHANGES" in output

    def test_resolved_items_include_details(self) -> None:
        change = Change(
            description="x",
            related_items=[RelatedItem(number=1, title="Bug", body="Steps")],
        )
        entry = make_entry("1.0.0", date(2025, 1, 1))
        entry.add_change("Fixes", change)

        data = json.loads(render(entry))

        assert data["changes"]["Fixes"][0]["relatedItems"] == [
            {"kind": "issue", "number": 1, "title": "Bug", "body": "Steps"}
        ]

    def test_yaml_list(self, sample_changelog: str) -> None:
        changelog = ChangelogParser().parse(sample_changelog)

        output = render(changelog.entries, "YAML")
        data = yaml.safe_load(output)

        assert output.startswith("- version: 2.0.0")
        assert [item["version"] for item in data] == ["2.0.0", "1.0.0"]
        assert data[1]["changes"] == {"Features": [{"description": "initial release"}]}

    def test_toml_entry(self, sample_changelog: str) -> None:
        entry = ChangelogParser().parse(sample_changelog).get_latest()

        data = tomllib.loads(render(entry, OutputFormat.TOML))

        assert data["version"] == "2.0.0"
        assert data["date"] == "2025-02-01"
        assert list(data["changes"]) == ["⚠ BREAKING CHANGES", "Features", "Bug Fixes"]
        assert data["changes"]["Features"][0] == {
            "scope": "api",
            "description": "add new endpoint",
            "relatedItems": [{"kind": "issue", "number": 123}],
        }

    def test_toml_list_is_nested_under_entries(self, sample_changelog: str) -> None:
        changelog = ChangelogParser().parse(sample_changelog)

        data = tomllib.loads(render(changelog.entries, "toml"))

        assert list(data) == ["entries"]
        assert [item["version"] for item in data["entries"]] == ["2.0.0", "1.0.0"]

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError):
            render([], "xml")
