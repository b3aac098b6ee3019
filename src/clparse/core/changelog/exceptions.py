"""
Exceptions for changelog parsing.

Exception Hierarchy:
    ChangelogError (base)
    ├── ChangelogFormatError (malformed version heading; aborts the parse)
    ├── EnrichmentError (git or provider failure during enrichment; aborts the parse)
    ├── EntryNotFoundError (lookup on a parsed changelog found nothing)
    └── ScopeOptionError (conflicting release filters)

Lines that do not match the expected shapes are not errors; they are skipped.
"""


class ChangelogError(Exception):
    """
    Base exception for all changelog errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class ChangelogFormatError(ChangelogError):
    """
    Raised when a version heading carries an invalid date.

    Attributes:
        line_number: 1-based line number of the offending heading
    """

    def __init__(self, line_number: int, message: str, **context: object) -> None:
        super().__init__(f"line {line_number}: {message}", line_number=line_number, **context)
        self.line_number = line_number


class EnrichmentError(ChangelogError):
    """
    Raised when commit body or issue lookup fails with a hard error.

    The underlying git or provider error is chained as ``__cause__``.
    """

    pass


class EntryNotFoundError(ChangelogError):
    """Raised by lookups when no matching release entry exists."""

    pass


class ScopeOptionError(ChangelogError):
    """Raised when release filter options cannot be combined."""

    pass
