"""
State Machine Parser
====================
Deterministic state machine that turns blank-line delimited chunks of
puzzle input into a Game.

Grammar: one comma-separated calls line, then one or more card blocks.
The first malformed chunk moves the machine into an absorbing ERROR state;
the captured error is raised once all chunks have been consumed.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Optional

from .card_parser import CardParser
from .errors import BingoError, GrammarError, ParseError
from .models import Card, Game

logger = logging.getLogger(__name__)

CHUNK_SEPARATOR = "\n\n"

# A call is a plain non-negative decimal integer
CALL_PATTERN = re.compile(r"\d+", re.ASCII)


class GameParserState(Enum):
    """Internal states, one per position in the input grammar."""
    WAITING_FOR_CALLS = "WAITING_FOR_CALLS"
    CALLS = "CALLS"
    BOARDS = "BOARDS"
    ERROR = "ERROR"


def split_chunks(text: str) -> list[str]:
    """Split raw input on blank lines, normalizing Windows line endings."""
    return text.replace("\r\n", "\n").split(CHUNK_SEPARATOR)


def parse_calls(chunk: str) -> list[int]:
    """Parse a comma-separated call list, preserving order and duplicates."""
    if "\n" in chunk.strip("\n"):
        raise GrammarError(
            "Expected a single comma-separated calls line, "
            "found a multi-line block"
        )

    calls = []
    for token in chunk.strip("\n").split(","):
        if not CALL_PATTERN.fullmatch(token.strip()):
            raise ParseError(f"Invalid call value: '{token}'")
        calls.append(int(token))
    return calls


class GameParser:
    """
    Finite State Machine consuming input chunks in order.

    WAITING_FOR_CALLS -> CALLS -> BOARDS (-> BOARDS ...), any failure -> ERROR.
    """

    def __init__(self, card_parser: Optional[CardParser] = None):
        self.card_parser = card_parser or CardParser()
        self.reset()

    def reset(self):
        """Reset the state machine for a fresh parsing run."""
        self.state = GameParserState.WAITING_FOR_CALLS
        self.calls: list[int] = []
        self.cards: list[Card] = []
        self.error: Optional[BingoError] = None
        self.error_chunk: Optional[int] = None
        self.chunk_index = 0

    def parse(self, text: str) -> Game:
        """
        Parse a complete puzzle input.

        Raises:
            ParseError: If any chunk is malformed or a section is missing.
                The first captured error is chained as ``__cause__``.
        """
        self.reset()

        for chunk in split_chunks(text):
            self.feed(chunk)

        return self.finish()

    def feed(self, chunk: str):
        """Advance the machine by one chunk."""
        index = self.chunk_index
        self.chunk_index += 1

        if self.state == GameParserState.ERROR:
            logger.debug(f"Ignoring chunk {index} after parse error")
            return

        if not chunk.strip():
            logger.debug(f"Skipping blank chunk {index}")
            return

        try:
            if self.state == GameParserState.WAITING_FOR_CALLS:
                self.calls = parse_calls(chunk)
                self._transition(GameParserState.CALLS, index)
            else:
                self.cards.append(self.card_parser.parse(chunk))
                self._transition(GameParserState.BOARDS, index)
        except BingoError as e:
            if isinstance(e, ParseError) and e.chunk_index is None:
                e.chunk_index = index
            logger.debug(f"Chunk {index} failed in state {self.state.value}: {e}")
            self.error = e
            self.error_chunk = index
            self.state = GameParserState.ERROR

    def finish(self) -> Game:
        """Convert the terminal state into a Game or raise."""
        if self.state == GameParserState.BOARDS:
            game = Game(calls=self.calls, cards=self.cards)
            logger.info(
                f"Parsed game: {len(game.calls)} calls, {len(game.cards)} cards"
            )
            return game

        if self.state == GameParserState.ERROR:
            raise ParseError(
                f"Unable to parse game: {self.error}",
                chunk_index=self.error_chunk,
            ) from self.error

        if self.state == GameParserState.CALLS:
            cause = GrammarError("Input has a calls line but no cards")
        else:
            cause = GrammarError("Input has no calls line")
        raise ParseError(f"Unable to parse game: {cause}") from cause

    def _transition(self, state: GameParserState, index: int):
        if state != self.state:
            logger.debug(
                f"Chunk {index}: {self.state.value} -> {state.value}"
            )
        self.state = state
