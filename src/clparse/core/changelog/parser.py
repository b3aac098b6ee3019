"""
Changelog parser.

Parses a conventional markdown changelog (release-please / conventional
commits layout) into structured release entries:

    # Changelog

    ## [v1.1.0](https://github.com/owner/repo/compare/v1.0.0...v1.1.0) (2025-02-01)

    ### Features

    * **api**: add endpoint (#123)
    * basic feature ([8f5b75c](https://github.com/owner/repo/commit/8f5b75c...))

    ### Bug Fixes

    * fix alignment, closes #45

Parsing happens in two steps:
- tokenize() classifies each trimmed line (version heading, section
  heading, change bullet, ...) and keeps the regex match with named groups
- ChangelogParser drives a small state machine over those lines
  (NO_ENTRY -> IN_ENTRY -> IN_SECTION) and builds the entries

Enrichment (optional, synchronous, in document order):
- commit bodies from the local git repository (include_body)
- issue / pull request details from the origin's hosting provider
  (fetch_item_details)
"""

import logging
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from clparse.core.changelog.exceptions import ChangelogFormatError, EnrichmentError
from clparse.core.changelog.models import Change, Changelog, RelatedItem, ReleaseEntry
from clparse.core.origin import IssueProvider, ItemKind, OriginError, get_provider
from clparse.utils.git import (
    GitError,
    get_commit_body,
    get_origin_url,
    is_repository,
    is_valid_sha,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
TITLE_LINE = "# Changelog"
SECTION_PREFIX = "### "
CHANGE_PREFIX = "* "

# Matches: ## [v1.0.0](https://host/compare/v0.9.0...v1.0.0) (2025-01-01)
#          ## 1.0.0-alpha.1 (2025-01-01)
# release-please writes patch releases with ###, so deeper headings count too.
VERSION_HEADING_PATTERN = re.compile(
    r"^##+ \[?v?(?P<version>[0-9.]+(?:-[a-zA-Z0-9]+(?:\.[0-9]+)?)?)\]?"
    r"(?:\((?P<compare_url>.*?)\))? \((?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})\)"
)

# Matches: * **scope**: description (annotation), closes #1 #2
CHANGE_PATTERN = re.compile(
    r"^\* (?:\*\*(?P<scope>.*?)\*\*: )?(?P<description>.+?)\s*"
    r"(?:\((?P<annotation>.*?)\))?(?:,\s*(?i:closes).*)?$"
)

# Matches: #123 (issue), !45 (pull/merge request)
REFERENCE_PATTERN = re.compile(r"(?<![\w&])(?P<marker>[#!])(?P<number>[0-9]+)\b")


class LineKind(str, Enum):
    """Classification of a changelog line."""

    BLANK = "blank"
    TITLE = "title"
    VERSION_HEADING = "version_heading"
    SECTION_HEADING = "section_heading"
    CHANGE = "change"
    OTHER = "other"


class ParserState(str, Enum):
    """Position of the parser within the document."""

    NO_ENTRY = "no_entry"
    IN_ENTRY = "in_entry"
    IN_SECTION = "in_section"


@dataclass(frozen=True)
class Line:
    """A trimmed, classified changelog line."""

    number: int
    kind: LineKind
    text: str
    match: re.Match[str] | None = None


def classify(text: str) -> tuple[LineKind, re.Match[str] | None]:
    """Classify a single trimmed line."""
    if not text:
        return LineKind.BLANK, None
    if text == TITLE_LINE:
        return LineKind.TITLE, None

    # Version headings are checked before sections: both may start with ###
    heading_match = VERSION_HEADING_PATTERN.match(text)
    if heading_match:
        return LineKind.VERSION_HEADING, heading_match
    if text.startswith(SECTION_PREFIX):
        return LineKind.SECTION_HEADING, None
    if text.startswith(CHANGE_PREFIX):
        return LineKind.CHANGE, CHANGE_PATTERN.match(text)
    return LineKind.OTHER, None


def tokenize(content: str) -> Iterator[Line]:
    """
    Split changelog content into classified lines.

    Args:
        content: Full changelog text

    Yields:
        Line objects with 1-based line numbers
    """
    # Only "\n" ends a line; form feeds and Unicode separators stay in the text
    for number, raw in enumerate(content.split("\n"), start=1):
        text = raw.strip()
        kind, match = classify(text)
        yield Line(number=number, kind=kind, text=text, match=match)


def extract_related_items(text: str) -> list[RelatedItem]:
    """
    Extract issue and pull request references from text.

    '#N' is an issue, '!N' a pull or merge request. Duplicates are
    dropped, keeping first-seen order.

    Args:
        text: Text to scan

    Returns:
        Bare (unresolved) related items
    """
    items: list[RelatedItem] = []
    for match in REFERENCE_PATTERN.finditer(text):
        number = int(match.group("number"))
        if number < 1:
            continue
        kind = ItemKind.PULL_REQUEST if match.group("marker") == "!" else ItemKind.ISSUE
        items.append(RelatedItem(kind=kind, number=number))
    return merge_related_items(items)


def merge_related_items(*groups: Iterable[RelatedItem]) -> list[RelatedItem]:
    """Concatenate related item groups, de-duplicating by kind and number."""
    seen: set[tuple[ItemKind, int]] = set()
    merged: list[RelatedItem] = []
    for group in groups:
        for item in group:
            if item.key not in seen:
                seen.add(item.key)
                merged.append(item)
    return merged


def parse_commit_hash(annotation: str) -> str:
    """
    Get the commit hash from a trailing link annotation.

    The last path segment of the annotation is used, so both bare hashes
    and markdown links to commit pages work:
    '8f5b75c...' or '[8f5b75c](https://host/owner/repo/commit/8f5b75c...)'.

    Returns:
        The hash, or an empty string if the segment is not a full hash
    """
    candidate = annotation.rsplit("/", 1)[-1].strip()
    if candidate.endswith(")"):
        candidate = candidate[:-1]
    return candidate if is_valid_sha(candidate) else ""


ProviderFactory = Callable[[str, str | None], IssueProvider]


@dataclass
class _ParseRun:
    """Accumulating state of a single parse() call."""

    provider: IssueProvider | None = None
    state: ParserState = ParserState.NO_ENTRY
    entries: list[ReleaseEntry] = field(default_factory=list)
    entry: ReleaseEntry | None = None
    section: str = ""

    def flush(self) -> None:
        """Move the open entry, if any, to the finished entries."""
        if self.entry is not None:
            self.entries.append(self.entry)
            self.entry = None


class ChangelogParser:
    """
    Parser for conventional markdown changelogs.

    The parser holds configuration only; every call to parse() starts
    from a fresh state, so one instance can parse any number of documents.

    Example:
        >>> parser = ChangelogParser()
        >>> changelog = parser.parse(Path("CHANGELOG.md").read_text())
        >>> latest = changelog.get_latest()
        >>> print(latest.version, latest.date)
        >>> for section, changes in latest.changes.items():
        ...     print(section, [c.description for c in changes])
    """

    def __init__(
        self,
        include_body: bool = False,
        fetch_item_details: bool = False,
        token: str | None = None,
        repo_path: str | Path = ".",
        provider_factory: ProviderFactory = get_provider,
    ) -> None:
        """
        Initialize the ChangelogParser.

        Args:
            include_body: Attach commit bodies for changes with a commit link
            fetch_item_details: Resolve referenced issues and pull requests
            token: Access token for the hosting provider
            repo_path: Local git repository used for enrichment
            provider_factory: Selects the issue provider for a remote URL
        """
        self.include_body = include_body
        self.fetch_item_details = fetch_item_details
        self.token = token
        self.repo_path = Path(repo_path)
        self.provider_factory = provider_factory

    @property
    def enrichment_enabled(self) -> bool:
        """Check if any enrichment needs the git repository."""
        return self.include_body or self.fetch_item_details

    def parse(self, content: str) -> Changelog:
        """
        Parse changelog content.

        Args:
            content: Full changelog text

        Returns:
            Changelog with one entry per version heading, in document order

        Raises:
            ChangelogFormatError: If a version heading has an invalid date
            EnrichmentError: If enrichment is enabled and git or the provider fails
        """
        run = _ParseRun(provider=self._select_provider())

        for line in tokenize(content):
            self._step(run, line)
        run.flush()

        logger.info(
            f"Parsed {len(run.entries)} releases with "
            f"{sum(entry.change_count for entry in run.entries)} changes"
        )
        return Changelog(entries=run.entries)

    def _step(self, run: _ParseRun, line: Line) -> None:
        """Apply one line to the state machine."""
        if line.kind == LineKind.VERSION_HEADING and line.match is not None:
            run.flush()
            run.entry = self._create_entry(line.number, line.match)
            run.section = ""
            run.state = ParserState.IN_ENTRY
        elif line.kind == LineKind.SECTION_HEADING:
            run.section = line.text[len(SECTION_PREFIX) :].strip()
            if run.state != ParserState.NO_ENTRY:
                run.state = ParserState.IN_SECTION
        elif line.kind == LineKind.CHANGE and run.state == ParserState.IN_SECTION:
            if line.match is None or run.entry is None:
                logger.debug(f"Skipping unrecognised change on line {line.number}: {line.text}")
                return
            run.entry.add_change(run.section, self._create_change(run, line.match))
        elif line.kind in (LineKind.CHANGE, LineKind.OTHER):
            logger.debug(f"Ignoring line {line.number} in state {run.state.value}")

    def _create_entry(self, line_number: int, match: re.Match[str]) -> ReleaseEntry:
        date_str = match.group("date")
        try:
            date = datetime.strptime(date_str, DATE_FORMAT).date()
        except ValueError as e:
            raise ChangelogFormatError(
                line_number, f"invalid date format: {date_str}", heading=match.string
            ) from e

        return ReleaseEntry(
            version=match.group("version"),
            date=date,
            compare_url=match.group("compare_url") or "",
        )

    def _create_change(self, run: _ParseRun, match: re.Match[str]) -> Change:
        annotation = match.group("annotation") or ""
        # Everything after the scope: description, annotation and closes suffix
        raw_text = match.string[match.start("description") :]

        change = Change(
            scope=match.group("scope") or "",
            description=match.group("description").strip(),
            commit=parse_commit_hash(annotation) if annotation else "",
        )

        if self.include_body and change.commit:
            change.commit_body = self._commit_body(change.commit)

        change.related_items = merge_related_items(
            extract_related_items(raw_text),
            extract_related_items(change.commit_body),
        )

        if run.provider is not None and change.related_items:
            change.related_items = self._resolve_items(run.provider, change.related_items)

        return change

    def _commit_body(self, sha: str) -> str:
        try:
            return get_commit_body(self.repo_path, sha)
        except GitError as e:
            raise EnrichmentError(
                f"failed to get commit message for {sha}: {e}", commit=sha
            ) from e

    def _select_provider(self) -> IssueProvider | None:
        """
        Check the repository and pick the issue provider for this parse.

        Returns:
            IssueProvider, or None when details are not fetched or no origin exists
        """
        if not self.enrichment_enabled:
            return None

        if not is_repository(self.repo_path):
            raise EnrichmentError(
                f"cannot enrich changelog: not a git repository: {self.repo_path}",
                path=str(self.repo_path),
            )

        if not self.fetch_item_details:
            return None

        try:
            url = get_origin_url(self.repo_path)
        except GitError as e:
            logger.warning(f"Not fetching related item details: {e}")
            return None

        try:
            return self.provider_factory(url, self.token)
        except OriginError as e:
            raise EnrichmentError(f"failed to select issue provider: {e}", url=url) from e

    def _resolve_items(
        self, provider: IssueProvider, items: list[RelatedItem]
    ) -> list[RelatedItem]:
        """
        Replace bare references with provider details.

        References the provider does not know (404) stay bare.
        """
        resolved: list[RelatedItem] = []
        for item in items:
            try:
                issue = provider.get_issue(item.number, item.is_pull_request)
            except OriginError as e:
                raise EnrichmentError(
                    f"failed to get details for {item.marker}: {e}",
                    provider=provider.name,
                    number=item.number,
                ) from e

            if issue is None:
                logger.warning(f"{provider.name}: {item.marker} not found, keeping bare reference")
                resolved.append(item)
            else:
                resolved.append(RelatedItem.from_issue(issue))

        # GitHub may report a '#' reference as a pull request
        return merge_related_items(resolved)
