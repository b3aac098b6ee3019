"""
cl-parse - Conventional Changelog Parser

Parses CHANGELOG.md files into structured release data, optionally
enriched with commit bodies and issue details.
"""

__version__ = "0.5.1"

# Re-export core models for convenience
from clparse.core.changelog.models import Change, Changelog, RelatedItem, ReleaseEntry
from clparse.core.changelog.parser import ChangelogParser

__all__ = ["Change", "Changelog", "ChangelogParser", "RelatedItem", "ReleaseEntry", "__version__"]
