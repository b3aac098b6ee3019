"""
Pytest configuration and shared fixtures.

Provides sample changelog documents, a changelog file in a temporary
project directory, and a fake issue provider for enrichment tests.
"""

from pathlib import Path

import pytest

from clparse.core.origin import Issue, ItemKind

COMMIT_SHA = "8f5b75c6ba6c525e29463e2a96fec119e426e283"
OTHER_SHA = "22822a9f19442b51d952b550e73ad3c229583371"

# ==============================================================================
# Changelog Fixtures
# ==============================================================================

SAMPLE_CHANGELOG = f"""# Changelog

## [v2.0.0](https://github.com/owner/repo/compare/v1.0.0...v2.0.0) (2025-02-01)

### ⚠ BREAKING CHANGES

* **api**: drop v1 endpoints (#130)

### Features

* **api**: add new endpoint (#123)
* basic feature ([8f5b75c](https://github.com/owner/repo/commit/{COMMIT_SHA}))

### Bug Fixes

* **ui**: fix button alignment ([2282](https://github.com/owner/repo/commit/{OTHER_SHA})), closes #45 #46

## [v1.0.0](https://github.com/owner/repo/compare/v0.1.0...v1.0.0) (2025-01-01)

### Features

* initial release
"""


@pytest.fixture
def sample_changelog() -> str:
    """Provide a two-release changelog in release-please layout."""
    return SAMPLE_CHANGELOG


@pytest.fixture
def changelog_file(tmp_path: Path) -> Path:
    """Write the sample changelog to CHANGELOG.md in a temporary project."""
    path = tmp_path / "CHANGELOG.md"
    path.write_text(SAMPLE_CHANGELOG, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user config, .env files and CL_PARSE_* variables out of tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in (
        "CL_PARSE_CHANGELOG",
        "CL_PARSE_FORMAT",
        "CL_PARSE_INCLUDE_BODY",
        "CL_PARSE_FETCH_ITEM_DETAILS",
        "CL_PARSE_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)


# ==============================================================================
# Provider Fixtures
# ==============================================================================


class FakeProvider:
    """In-memory issue provider recording the lookups it receives."""

    def __init__(self, issues: dict[tuple[ItemKind, int], Issue] | None = None) -> None:
        self.issues = issues or {}
        self.calls: list[tuple[int, bool]] = []

    @property
    def name(self) -> str:
        return "fake"

    def get_issue(self, number: int, is_pull_request: bool = False) -> Issue | None:
        self.calls.append((number, is_pull_request))
        kind = ItemKind.PULL_REQUEST if is_pull_request else ItemKind.ISSUE
        return self.issues.get((kind, number))


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Provide a fake provider that knows issue #123 and pull request !7."""
    return FakeProvider(
        {
            (ItemKind.ISSUE, 123): Issue(number=123, title="Add endpoint", body="Details"),
            (ItemKind.PULL_REQUEST, 7): Issue(
                kind=ItemKind.PULL_REQUEST, number=7, title="Endpoint PR", body=""
            ),
        }
    )
