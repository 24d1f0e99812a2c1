"""Exception hierarchy for wish-xml.

Parsing is all-or-nothing: every error is raised synchronously at the point
of failure and never logged or retried by the library itself. Stream I/O
failures are not wrapped and surface as the underlying ``OSError``.
"""

from typing import Optional


class XMLError(Exception):
    """Base class for all wish-xml errors."""


class XMLEncodingError(XMLError):
    """Malformed input syntax, always tied to a position in the source.

    Attributes:
        line: 1-based line number where the problem was detected
        column: column within that line (0 before the first character)
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{message} near line {line}, column {column}")
        self.reason = message
        self.line = line
        self.column = column


class XMLTreeError(XMLError):
    """Misuse of the node API against the value/children rules."""


class XMLConversionError(XMLError, ValueError):
    """A scalar value was requested as a number but is absent or not numeric."""

    def __init__(self, message: str, value: Optional[str] = None) -> None:
        super().__init__(message)
        self.value = value
