"""
Bingo Engine
============
Main orchestrator that combines input loading, state machine parsing,
validation and simulation into the two puzzle answers.

Usage:
    engine = BingoEngine(config)
    answer = engine.part_one(text)
    # answer is the first winner's call * unmarked sum, as text

Architecture:
    text → GameParser (chunk by chunk) → Game → ValidationEngine →
    first / last winner replay → answer
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .card_parser import CardParser
from .errors import NoWinnerError, ShapeMismatchError
from .models import Game, Severity, SolveResult, ValidationReport, Win
from .state_machine import GameParser
from .validator import ValidationEngine

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

STDIN_PATH = "-"


@dataclass
class EngineConfig:
    """Configuration for the bingo engine."""

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Parsing
    card_size: Optional[int] = None
    strict_shape: bool = True


class BingoEngine:
    """
    Bingo simulation engine.

    Orchestrates the full pipeline:
        1. Input loading (file or stdin)
        2. State machine parsing
        3. Validation
        4. Replay with the first-winner or last-winner policy

    Every replay parses a fresh Game, so answers never share marked state.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        # Configure root logger for the bingo package
        package_logger = logging.getLogger("bingo")
        package_logger.setLevel(log_level)

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
            package_logger.addHandler(console)

        # File handler
        if self.config.log_file:
            log_dir = Path(self.config.log_file).parent
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                self.config.log_file, encoding="utf-8"
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
            package_logger.addHandler(file_handler)

    def load(self, input_path: str) -> str:
        """
        Read puzzle input from a file, or stdin when the path is "-".

        Raises:
            FileNotFoundError: If the input file doesn't exist.
        """
        if input_path == STDIN_PATH:
            return sys.stdin.read()

        path = Path(input_path)
        if not path.exists():
            raise FileNotFoundError(f"Input not found: {input_path}")

        logger.info(f"Loading input: {path}")
        return path.read_text(encoding="utf-8")

    def parse_game(self, text: str) -> Game:
        """
        Parse input text into a fresh Game.

        Raises:
            ParseError: If the input does not follow the puzzle grammar.
            ShapeMismatchError: If strict_shape is set and the cards are
                not uniformly square.
        """
        game, _ = self.parse_and_validate(text)
        return game

    def parse_and_validate(self, text: str) -> tuple[Game, ValidationReport]:
        parser = GameParser(CardParser(size=self.config.card_size))
        game = parser.parse(text)

        report = ValidationEngine().validate(game)
        if self.config.strict_shape and not report.is_valid:
            problems = "; ".join(
                a.message for a in report.anomalies
                if a.severity == Severity.ERROR
            )
            raise ShapeMismatchError(f"Invalid card layout: {problems}")

        return game, report

    def first_win(self, text: str) -> Optional[Win]:
        win = self.parse_game(text).first_win()
        self._log_win("First", win)
        return win

    def last_win(self, text: str) -> Optional[Win]:
        win = self.parse_game(text).last_win()
        self._log_win("Last", win)
        return win

    def part_one(self, text: str) -> str:
        """
        Score of the first card to win.

        Raises:
            NoWinnerError: If no card completes a line.
        """
        win = self.first_win(text)
        if win is None:
            raise NoWinnerError("No winning call")
        return str(win.status.score)

    def part_two(self, text: str) -> str:
        """
        Score of the last card to win.

        Raises:
            NoWinnerError: If no card completes a line.
        """
        win = self.last_win(text)
        if win is None:
            raise NoWinnerError("No winning call")
        return str(win.status.score)

    def solve(self, text: str) -> SolveResult:
        """Run both replays and collect them with the validation report."""
        start_time = time.time()

        game, report = self.parse_and_validate(text)

        first = game.first_win()
        game.reset()
        last = game.last_win()

        self._log_win("First", first)
        self._log_win("Last", last)

        elapsed = time.time() - start_time
        logger.info(f"Solve complete in {elapsed:.3f}s")

        return SolveResult(first_win=first, last_win=last, validation=report)

    def _log_win(self, label: str, win: Optional[Win]):
        if win is None:
            logger.warning(f"{label} winner: none after all calls")
            return
        logger.info(
            f"{label} winner: card {win.card_index} on call "
            f"{win.status.call} (#{win.call_index}), unmarked sum "
            f"{win.status.sum}, score {win.status.score}"
        )
