"""
Errors
======
Exception hierarchy for parsing and simulation failures.
All failures are raised to the caller; nothing here is process-fatal.
"""

from __future__ import annotations

from typing import Optional


class BingoError(Exception):
    """Base class for all simulator errors."""


class ParseError(BingoError):
    """A call or cell token is not a valid non-negative integer."""

    def __init__(self, message: str, chunk_index: Optional[int] = None):
        super().__init__(message)
        self.chunk_index = chunk_index


class GrammarError(ParseError):
    """A chunk appeared where the input grammar does not allow it."""


class ShapeMismatchError(BingoError):
    """A card has no well-formed rows, or cards are not uniformly square."""


class NoWinnerError(BingoError):
    """The calls ran out before the requested win condition was met."""
