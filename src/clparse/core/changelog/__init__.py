"""
Changelog parsing for cl-parse.

Turns a conventional markdown changelog into release entries, with
optional enrichment from git and the repository's hosting provider.
"""

from clparse.core.changelog.exceptions import (
    ChangelogError,
    ChangelogFormatError,
    EnrichmentError,
    EntryNotFoundError,
    ScopeOptionError,
)
from clparse.core.changelog.filters import filter_entries, validate_scope_options
from clparse.core.changelog.models import Change, Changelog, RelatedItem, ReleaseEntry
from clparse.core.changelog.parser import ChangelogParser, tokenize
from clparse.core.changelog.render import OutputFormat, render

__all__ = [
    "filter_entries",
    "render",
    "tokenize",
    "validate_scope_options",
    "Change",
    "Changelog",
    "ChangelogError",
    "ChangelogFormatError",
    "ChangelogParser",
    "EnrichmentError",
    "EntryNotFoundError",
    "OutputFormat",
    "RelatedItem",
    "ReleaseEntry",
    "ScopeOptionError",
]
