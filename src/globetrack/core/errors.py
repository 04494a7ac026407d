"""Exceptions raised by the tracking core.

All of them subclass :class:`ValueError`, so callers that only care about
"bad input" can keep catching that.
"""

from __future__ import annotations


class ParseError(ValueError):
    """An element record could not be turned into a usable element set."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"{name or '<unnamed>'}: {reason}")
        self.name = name
        self.reason = reason


class MalformedRecordError(ParseError):
    """The record's structure is wrong (missing name, bad line markers, short lines)."""


class InvalidElementsError(ParseError):
    """The record is well formed but its numeric content is rejected."""


class PropagationError(ValueError):
    """The propagator could not produce a state for the requested instant."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class InvalidBatchError(ValueError):
    """A refresh was handed something that is not a batch of element records."""
