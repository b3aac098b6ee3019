"""
Release filters.

Narrow a parsed changelog down to the releases a caller asked for:
the N most recent ones, or those released within the last N days.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from clparse.core.changelog.exceptions import ScopeOptionError
from clparse.core.changelog.models import ReleaseEntry


def filter_entries(
    entries: list[ReleaseEntry],
    last: int = 0,
    since_days: int = 0,
    now: datetime | None = None,
) -> list[ReleaseEntry]:
    """
    Filter entries by count and by age.

    Args:
        entries: Entries in document order (newest first)
        last: Keep only the first N entries (0 keeps all)
        since_days: Keep entries dated on or after UTC midnight N days ago (0 keeps all)
        now: Reference time, defaults to the current UTC time

    Returns:
        Filtered entries, order preserved
    """
    filtered = list(entries)
    if 0 < last < len(filtered):
        filtered = filtered[:last]

    if since_days <= 0:
        return filtered

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    cutoff = now.date() - timedelta(days=since_days)

    return [entry for entry in filtered if entry.date >= cutoff]


def validate_scope_options(
    latest: bool = False,
    release: str | None = None,
    last: int = 0,
    since_days: int = 0,
) -> None:
    """
    Check that release selection options can be combined.

    Raises:
        ScopeOptionError: If options conflict or counts are negative
    """
    if latest and (release or last > 0 or since_days > 0):
        raise ScopeOptionError(
            "--latest cannot be combined with --release, --last, or --since-days"
        )
    if release and (last > 0 or since_days > 0):
        raise ScopeOptionError("--release cannot be combined with --last or --since-days")
    if last > 0 and since_days > 0:
        raise ScopeOptionError("--last cannot be combined with --since-days")
    if last < 0 or since_days < 0:
        raise ScopeOptionError("--last and --since-days must be positive integers")
