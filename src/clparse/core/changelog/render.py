"""
Output rendering for parsed changelogs.

Converts entries to plain dictionaries with camelCase keys and ISO
dates, then serializes them as JSON, YAML or TOML. Empty optional change
fields (scope, commit, commitBody, relatedItems) are left out.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

import tomli_w
import yaml

from clparse.core.changelog.models import Change, ReleaseEntry


class OutputFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    YAML = "yaml"
    TOML = "toml"


# TOML documents are tables, so a list of entries is nested under this key
TOML_ENTRIES_KEY = "entries"


def change_to_dict(change: Change) -> dict[str, Any]:
    """Convert a change, omitting empty optional fields."""
    data = change.model_dump(mode="json", by_alias=True, exclude_defaults=True)
    if change.related_items:
        data["relatedItems"] = [
            item.model_dump(mode="json", exclude_none=True) for item in change.related_items
        ]
    return data


def entry_to_dict(entry: ReleaseEntry) -> dict[str, Any]:
    """Convert a release entry, keeping section order."""
    return {
        "version": entry.version,
        "date": entry.date.isoformat(),
        "compareUrl": entry.compare_url,
        "changes": {
            section: [change_to_dict(change) for change in changes]
            for section, changes in entry.changes.items()
        },
    }


def render(
    data: ReleaseEntry | list[ReleaseEntry], fmt: OutputFormat | str = OutputFormat.JSON
) -> str:
    """
    Serialize one entry or a list of entries.

    Args:
        data: Entry or entries to render
        fmt: Output format

    Returns:
        Serialized text without a trailing newline

    Raises:
        ValueError: If the format is not supported
    """
    output_format = OutputFormat(fmt.lower() if isinstance(fmt, str) else fmt)
    if isinstance(data, ReleaseEntry):
        payload: Any = entry_to_dict(data)
    else:
        payload = [entry_to_dict(entry) for entry in data]

    if output_format == OutputFormat.TOML:
        if isinstance(payload, list):
            payload = {TOML_ENTRIES_KEY: payload}
        return tomli_w.dumps(payload).rstrip("\n")
    if output_format == OutputFormat.YAML:
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True).rstrip("\n")
    return json.dumps(payload, indent=2, ensure_ascii=False)
