"""
Card Parser
===========
Converts a blank-line delimited text block into a Card.

A card row is N right-aligned, two character wide integers separated by
single spaces:

    22 13 17 11  0
     8  2 23  4 24
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Optional

from .errors import ParseError, ShapeMismatchError
from .models import Card, Cell

logger = logging.getLogger(__name__)

# ─── Row Patterns ─────────────────────────────────────────────────────────────

FIELD_WIDTH = 2

# One right-aligned numeric field, e.g. " 8" or "24"
FIELD_PATTERN = r"([ \d]{2})"

DEFAULT_CARD_SIZE = 5

# Any number of fields, used to find the card size from a well-formed row
GENERIC_ROW_PATTERN = re.compile(r"^[ \d]{2}( [ \d]{2})*$", re.ASCII)


@lru_cache(maxsize=None)
def row_pattern(size: int) -> re.Pattern:
    """Anchored pattern matching a row of exactly ``size`` fields."""
    return re.compile(
        "^" + " ".join([FIELD_PATTERN] * size) + "$", re.ASCII
    )


ROW_PATTERN = row_pattern(DEFAULT_CARD_SIZE)


def infer_card_size(line: str) -> Optional[int]:
    """Number of fields in a well-formed row, or None for any other line."""
    if not GENERIC_ROW_PATTERN.match(line):
        return None
    return (len(line) + 1) // (FIELD_WIDTH + 1)


class CardParser:
    """
    Parses the first N lines of a block into an N x N card.

    Lines that do not match the row shape are skipped and do not count
    towards the N rows, so a malformed block can produce a short card;
    the validator reports those.
    """

    def __init__(self, size: Optional[int] = None):
        self.size = size

    def parse(self, block: str) -> Card:
        lines = block.splitlines()
        size = self.size or self._detect_size(lines)

        pattern = row_pattern(size)
        cells: list[list[Cell]] = []

        for line in lines[:size]:
            match = pattern.match(line)
            if not match:
                logger.debug(f"Skipping malformed card row: {line!r}")
                continue
            cells.append([self._parse_cell(field) for field in match.groups()])

        if not cells:
            raise ShapeMismatchError(
                f"Card block has no well-formed {size}-field rows"
            )

        return Card(cells=cells)

    def _detect_size(self, lines: list[str]) -> int:
        for line in lines:
            size = infer_card_size(line)
            if size is not None:
                return size
        return DEFAULT_CARD_SIZE

    def _parse_cell(self, field: str) -> Cell:
        try:
            return Cell(value=int(field))
        except ValueError as e:
            raise ParseError(f"Invalid cell value: '{field}'") from e
