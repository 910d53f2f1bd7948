from __future__ import annotations

"""Exception classes for the rearrange core.

The engine raises these for conditions the caller must react to. The
editor-facing service converts the expected ones (an empty cut history, a
document that does not parse) into failed OperationResult values so the UI
never has to catch them.
"""

from typing import Optional

__all__ = [
    "RearrangeError",
    "EmptyHistory",
    "MarkerReleasedError",
    "DocumentParseError",
]


class RearrangeError(Exception):
    """Base exception for all rearrange-related errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause


class EmptyHistory(RearrangeError):
    """Raised when a paste is requested but no cut batch is pending."""

    def __init__(self, message: str = "Nothing to paste: the cut history is empty.") -> None:
        super().__init__(message)


class MarkerReleasedError(RearrangeError):
    """Raised when a released marker is resolved."""
    pass


class DocumentParseError(RearrangeError):
    """Raised when the document text cannot be parsed into a node tree.

    Line and column are 1-based and refer to the offending markup, when the
    underlying parser reports them.
    """

    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is not None:
            return f"{super().__str__()} (line {self.line}, column {self.column})"
        return super().__str__()
